from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask
from app.database.supabase_client import get_supabase
from app.modules.workouts.schemas import WorkoutCreate, WorkoutUpdate, WorkoutResponse, ExerciseResponse
from app.modules.workouts.service import WorkoutService
from app.modules.workouts.pdf_generator import generate_workout_pdf, cleanup_pdf
from app.core.dependencies import require_action, get_current_user
from app.core.policy import authorize, workout_ownership
from supabase import Client
from typing import List, Optional, Dict
import re
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/workouts", tags=["workouts"])
exercises_router = APIRouter(prefix="/exercises", tags=["workouts"])


def get_workout_service(supabase: Client = Depends(get_supabase)) -> WorkoutService:
    return WorkoutService(supabase)


def download_name(workout_name: str) -> str:
    safe_name = re.sub(r"\s+", "_", workout_name)
    return f"treino_{safe_name}.pdf"


@router.get("", response_model=List[WorkoutResponse])
async def list_workouts(
    category: Optional[str] = None,
    user_data: Dict = Depends(require_action("workouts:list")),
    service: WorkoutService = Depends(get_workout_service)
):
    """List the caller's workouts: assigned (students) or authored (trainers)"""
    return service.list_workouts(user_data["id"], user_data.get("role"), category=category)


@router.post("", response_model=WorkoutResponse, status_code=201)
async def create_workout(
    workout_data: WorkoutCreate,
    user_data: Dict = Depends(require_action("workouts:create", "Only trainers can create workouts")),
    service: WorkoutService = Depends(get_workout_service)
):
    """Create a workout for a student"""
    return service.create_workout(workout_data, user_data["id"])


@router.get("/{workout_id}", response_model=WorkoutResponse)
async def get_workout(
    workout_id: str,
    user_data: Dict = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service)
):
    """Get workout by ID (assigned student or authoring trainer only)"""
    row = service.get_workout_row(workout_id)
    authorize(user_data, "workouts:read", workout_ownership(user_data["id"], row),
              detail="Not authorized to access this workout")
    return service.get_workout_by_id(workout_id, row=row)


@router.put("/{workout_id}", response_model=WorkoutResponse)
async def update_workout(
    workout_id: str,
    workout_data: WorkoutUpdate,
    user_data: Dict = Depends(require_action("workouts:manage", "Only trainers can update workouts")),
    service: WorkoutService = Depends(get_workout_service)
):
    """Update workout (authoring trainer only)"""
    row = service.get_workout_row(workout_id)
    authorize(user_data, "workouts:update", workout_ownership(user_data["id"], row),
              detail="You are not allowed to edit this workout")
    return service.update_workout(workout_id, workout_data)


@router.delete("/{workout_id}")
async def delete_workout(
    workout_id: str,
    user_data: Dict = Depends(require_action("workouts:manage", "Only trainers can delete workouts")),
    service: WorkoutService = Depends(get_workout_service)
):
    """Delete workout and its exercises (authoring trainer only)"""
    row = service.get_workout_row(workout_id)
    authorize(user_data, "workouts:delete", workout_ownership(user_data["id"], row),
              detail="You are not allowed to delete this workout")
    service.delete_workout(workout_id)
    return {"message": "Workout deleted"}


@router.get("/{workout_id}/pdf", response_class=FileResponse)
async def export_workout_pdf(
    workout_id: str,
    request: Request,
    user_data: Dict = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service)
):
    """Download the workout plan as PDF. The temp file is removed after the response is sent."""
    row = service.get_workout_row(workout_id)
    authorize(user_data, "workouts:export", workout_ownership(user_data["id"], row),
              detail="Not authorized to access this workout")
    workout = service.get_workout_by_id(workout_id, row=row)
    workout_data, student = service.get_pdf_payload(workout)

    settings = request.app.state.settings
    try:
        pdf_path = generate_workout_pdf(workout_data, student, settings.pdf_tmp_dir)
    except Exception as e:
        logger.error(f"Error generating PDF for workout {workout_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="PDF generation failed")

    return FileResponse(
        pdf_path,
        media_type="application/pdf",
        filename=download_name(workout.name),
        background=BackgroundTask(cleanup_pdf, pdf_path, settings.pdf_cleanup_delay_seconds),
    )


@exercises_router.get("", response_model=List[ExerciseResponse])
async def list_exercises(
    muscle_group: Optional[str] = None,
    user_data: Dict = Depends(get_current_user),
    service: WorkoutService = Depends(get_workout_service)
):
    """Exercise catalogue used when building workouts"""
    return service.list_exercises(muscle_group=muscle_group)
