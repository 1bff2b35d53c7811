from supabase import Client
from app.modules.dashboard.schemas import StudentDashboardResponse, ScheduledWorkout
from typing import List, Dict, Any
from fastapi import HTTPException
from datetime import date
import logging

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


class DashboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _workouts(self, workout_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        if not workout_ids:
            return {}
        result = self.supabase.table("workouts")\
            .select("id, name, category, duration")\
            .in_("id", workout_ids)\
            .execute()
        return {w["id"]: w for w in (result.data or [])}

    def get_student_dashboard(self, student_id: str) -> StudentDashboardResponse:
        """Next pending workout from today on, the last completed ones and the completed count"""
        try:
            today = date.today().isoformat()
            upcoming = self.supabase.table("student_workouts")\
                .select("*")\
                .eq("student_id", student_id)\
                .eq("status", "pending")\
                .gte("scheduled_date", today)\
                .order("scheduled_date")\
                .limit(1)\
                .execute()

            recent = self.supabase.table("student_workouts")\
                .select("*")\
                .eq("student_id", student_id)\
                .eq("status", "completed")\
                .order("completed_at", desc=True)\
                .limit(RECENT_LIMIT)\
                .execute()

            completed = self.supabase.table("student_workouts")\
                .select("*", count="exact")\
                .eq("student_id", student_id)\
                .eq("status", "completed")\
                .execute()

            rows = (upcoming.data or []) + (recent.data or [])
            workouts = self._workouts(list({r["workout_id"] for r in rows}))

            def to_scheduled(row: Dict[str, Any]) -> ScheduledWorkout:
                workout = workouts.get(row["workout_id"], {"id": row["workout_id"], "name": ""})
                return ScheduledWorkout(
                    **workout,
                    scheduled_date=row.get("scheduled_date"),
                    completed_at=row.get("completed_at"),
                )

            return StudentDashboardResponse(
                next_workout=to_scheduled(upcoming.data[0]) if upcoming.data else None,
                recent_workouts=[to_scheduled(r) for r in (recent.data or [])],
                total_completed=completed.count if completed.count is not None else len(completed.data or []),
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error building dashboard for {student_id}: {str(e)}")
            raise HTTPException(status_code=500, detail=str(e))
