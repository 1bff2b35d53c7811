from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime


class ScheduledWorkout(BaseModel):
    id: str
    name: str
    category: Optional[str] = None
    duration: Optional[int] = None
    scheduled_date: Optional[date] = None
    completed_at: Optional[datetime] = None


class StudentDashboardResponse(BaseModel):
    next_workout: Optional[ScheduledWorkout] = None
    recent_workouts: List[ScheduledWorkout] = []
    total_completed: int = 0
