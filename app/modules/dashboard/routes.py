from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.dashboard.schemas import StudentDashboardResponse
from app.modules.dashboard.service import DashboardService
from app.core.dependencies import require_action
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_dashboard_service(supabase: Client = Depends(get_supabase)) -> DashboardService:
    return DashboardService(supabase)


@router.get("/student", response_model=StudentDashboardResponse)
async def student_dashboard(
    user_data: Dict = Depends(require_action("dashboard:student", "Only students have a student dashboard")),
    service: DashboardService = Depends(get_dashboard_service)
):
    return service.get_student_dashboard(user_data["id"])
