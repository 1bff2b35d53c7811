from supabase import Client
from app.modules.workouts.schemas import (
    WorkoutCreate, WorkoutUpdate, WorkoutResponse, ExerciseAssignment, ExerciseResponse
)
from app.config.permissions_config import TRAINER
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


class WorkoutService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _load_exercises(self, workout_ids: List[str]) -> Dict[str, List[Dict[str, Any]]]:
        """Return workout_id -> assignments (ordered), each with its catalogue exercise embedded."""
        if not workout_ids:
            return {}
        rows = self.supabase.table("workout_exercises")\
            .select("*")\
            .in_("workout_id", workout_ids)\
            .order("order")\
            .execute()
        rows = rows.data or []
        exercise_ids = list({r["exercise_id"] for r in rows if r.get("exercise_id")})
        catalogue = {}
        if exercise_ids:
            result = self.supabase.table("exercise")\
                .select("*")\
                .in_("id", exercise_ids)\
                .execute()
            catalogue = {e["id"]: e for e in (result.data or [])}

        grouped: Dict[str, List[Dict[str, Any]]] = {wid: [] for wid in workout_ids}
        for row in sorted(rows, key=lambda r: r.get("order") or 0):
            exercise = catalogue.get(row.get("exercise_id"))
            grouped.setdefault(row["workout_id"], []).append({
                **row,
                "name": exercise.get("name") if exercise else None,
                "exercise": exercise,
            })
        return grouped

    def _with_exercises(self, workouts: List[Dict[str, Any]]) -> List[WorkoutResponse]:
        exercises = self._load_exercises([w["id"] for w in workouts])
        return [WorkoutResponse(**w, exercises=exercises.get(w["id"], [])) for w in workouts]

    def _insert_assignments(self, workout_id: str, exercises: List[ExerciseAssignment]) -> None:
        if not exercises:
            return
        self.supabase.table("workout_exercises").insert([
            {
                "workout_id": workout_id,
                "exercise_id": exercise.exercise_id,
                "sets": exercise.sets,
                "reps": exercise.reps,
                "rest_seconds": exercise.rest_seconds,
                "notes": exercise.notes,
                "order": index,
            }
            for index, exercise in enumerate(exercises)
        ]).execute()

    def get_workout_row(self, workout_id: str) -> Dict[str, Any]:
        """Get the bare workout row (for ownership checks)"""
        try:
            result = self.supabase.table("workouts")\
                .select("*")\
                .eq("id", workout_id)\
                .maybe_single()\
                .execute()

            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Workout not found")

            return result.data
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_workout_by_id(self, workout_id: str, row: Optional[Dict[str, Any]] = None) -> WorkoutResponse:
        """Get workout with its ordered exercises. Optional row avoids a second fetch."""
        row = row or self.get_workout_row(workout_id)
        try:
            return self._with_exercises([row])[0]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_workouts(
        self,
        user_id: str,
        role: Optional[str],
        category: Optional[str] = None
    ) -> List[WorkoutResponse]:
        """Trainers get the workouts they authored, students the ones assigned to them."""
        try:
            column = "created_by" if role == TRAINER else "user_id"
            query = self.supabase.table("workouts")\
                .select("*")\
                .eq(column, user_id)
            if category:
                query = query.eq("category", category)
            result = query.order("created_at", desc=True).execute()
            return self._with_exercises(result.data or [])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_workout(self, workout_data: WorkoutCreate, trainer_id: str) -> WorkoutResponse:
        """Create a workout and its exercise assignments"""
        try:
            result = self.supabase.table("workouts").insert({
                "name": workout_data.name,
                "description": workout_data.description,
                "category": workout_data.category,
                "duration": workout_data.duration,
                "difficulty": workout_data.difficulty,
                "user_id": workout_data.student_id,
                "created_by": trainer_id,
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create workout")

            workout = result.data[0]
            self._insert_assignments(workout["id"], workout_data.exercises)
            logger.info(f"Trainer {trainer_id} created workout {workout['id']} for {workout_data.student_id}")
            return self.get_workout_by_id(workout["id"], row=workout)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating workout: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_workout(self, workout_id: str, workout_data: WorkoutUpdate) -> WorkoutResponse:
        """Update workout fields; when exercises are given, replace all assignments"""
        try:
            result = self.supabase.table("workouts")\
                .update({
                    "name": workout_data.name,
                    "description": workout_data.description,
                    "category": workout_data.category,
                    "duration": workout_data.duration,
                    "difficulty": workout_data.difficulty,
                    "updated_at": datetime.utcnow().isoformat(),
                })\
                .eq("id", workout_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Workout not found")

            if workout_data.exercises is not None:
                self.supabase.table("workout_exercises")\
                    .delete()\
                    .eq("workout_id", workout_id)\
                    .execute()
                self._insert_assignments(workout_id, workout_data.exercises)

            return self.get_workout_by_id(workout_id, row=result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating workout {workout_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def delete_workout(self, workout_id: str) -> bool:
        """Delete workout and its exercise assignments"""
        try:
            self.supabase.table("workout_exercises")\
                .delete()\
                .eq("workout_id", workout_id)\
                .execute()

            result = self.supabase.table("workouts")\
                .delete()\
                .eq("id", workout_id)\
                .execute()

            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting workout {workout_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))

    def list_exercises(self, muscle_group: Optional[str] = None) -> List[ExerciseResponse]:
        """Exercise catalogue"""
        try:
            query = self.supabase.table("exercise").select("*")
            if muscle_group:
                query = query.eq("muscle_group", muscle_group)
            result = query.order("name").execute()
            return [ExerciseResponse(**e) for e in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_pdf_payload(self, workout: WorkoutResponse) -> tuple:
        """Shape the workout and its student into the renderer's input"""
        try:
            result = self.supabase.table("profiles")\
                .select("id, name, email")\
                .eq("id", workout.user_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        student = (result.data if result else None) or {}
        user = {
            "id": workout.user_id,
            "name": student.get("name") or student.get("email") or "",
            "email": student.get("email") or "",
        }
        workout_data = {
            "id": workout.id,
            "name": workout.name,
            "description": workout.description,
            "category": workout.category,
            "duration": workout.duration,
            "difficulty": workout.difficulty,
            "exercises": [
                {
                    "id": e.exercise_id,
                    "name": e.name,
                    "sets": e.sets,
                    "reps": e.reps,
                    "rest_seconds": e.rest_seconds,
                    "notes": e.notes,
                }
                for e in workout.exercises
            ],
        }
        return workout_data, user
