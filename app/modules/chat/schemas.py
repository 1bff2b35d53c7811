from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class Participant(BaseModel):
    id: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    user_type: Optional[str] = None


class ChatRoomCreate(BaseModel):
    student_id: str = Field(min_length=1)
    name: Optional[str] = None


class ChatRoomResponse(BaseModel):
    id: str
    name: Optional[str] = None
    last_message: Optional[str] = None
    last_message_time: Optional[datetime] = None
    unread_count: int = 0
    participants: List[Participant] = []


class MessageCreate(BaseModel):
    content: str


class MessageResponse(BaseModel):
    id: str
    room_id: str
    user_id: str
    content: str
    created_at: Optional[datetime] = None
    user: Optional[Participant] = None
