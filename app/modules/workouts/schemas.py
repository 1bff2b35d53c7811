from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Literal, Optional, List, Dict, Any
from datetime import datetime


Difficulty = Literal["beginner", "intermediate", "advanced"]


class ExerciseAssignment(BaseModel):
    # Clients send the catalogue exercise as "id"
    exercise_id: str = Field(validation_alias=AliasChoices("exercise_id", "id"))
    sets: int = Field(gt=0)
    reps: int = Field(gt=0)
    rest_seconds: int = Field(default=60, ge=0)
    notes: Optional[str] = None


class WorkoutCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category: str = Field(min_length=1)
    duration: int = Field(gt=0)  # minutes
    difficulty: Difficulty
    student_id: str = Field(min_length=1)
    exercises: List[ExerciseAssignment]


class WorkoutUpdate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    category: str = Field(min_length=1)
    duration: int = Field(gt=0)
    difficulty: Difficulty
    exercises: Optional[List[ExerciseAssignment]] = None  # replaces all assignments when given


class ExerciseAssignmentResponse(BaseModel):
    id: Optional[str] = None
    exercise_id: str
    name: Optional[str] = None
    sets: Optional[int] = None
    reps: Optional[int] = None
    rest_seconds: Optional[int] = None
    notes: Optional[str] = None
    order: int = 0
    exercise: Optional[Dict[str, Any]] = None


class WorkoutResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    category: str
    duration: int
    difficulty: str
    user_id: str
    created_by: str
    exercises: List[ExerciseAssignmentResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ExerciseResponse(BaseModel):
    id: str
    name: str
    muscle_group: Optional[str] = None
    description: Optional[str] = None
