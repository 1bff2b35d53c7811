from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class UserUpdate(BaseModel):
    # user_type is deliberately absent: the role never changes after registration
    name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    user_type: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
