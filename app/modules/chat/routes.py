from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.chat.schemas import ChatRoomCreate, ChatRoomResponse, MessageCreate, MessageResponse
from app.modules.chat.service import ChatService
from app.core.dependencies import require_action, get_current_user
from app.core.policy import authorize, Ownership
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/chat", tags=["chat"])


def get_chat_service(supabase: Client = Depends(get_supabase)) -> ChatService:
    return ChatService(supabase)


def _check_member(room_id: str, user_data: Dict, action: str, service: ChatService) -> None:
    membership = service.get_membership(room_id, user_data["id"])
    authorize(user_data, action, Ownership(is_member=membership is not None),
              detail="You are not a participant of this chat room")


@router.get("/rooms", response_model=List[ChatRoomResponse])
async def list_rooms(
    user_data: Dict = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service)
):
    """Rooms of the current user with last message preview and unread count"""
    return service.list_rooms(user_data["id"])


@router.post("/rooms", response_model=ChatRoomResponse, status_code=201)
async def open_room(
    room_data: ChatRoomCreate,
    user_data: Dict = Depends(require_action("chat:open", "Only trainers can open chat rooms")),
    service: ChatService = Depends(get_chat_service)
):
    """Open (or return the existing) room between the trainer and a student"""
    return service.open_room(user_data["id"], room_data.student_id, room_data.name)


@router.get("/rooms/{room_id}/messages", response_model=List[MessageResponse])
async def list_messages(
    room_id: str,
    limit: int = 100,
    user_data: Dict = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service)
):
    _check_member(room_id, user_data, "chat:read", service)
    return service.list_messages(room_id, user_data["id"], limit=limit)


@router.post("/rooms/{room_id}/messages", response_model=MessageResponse, status_code=201)
async def send_message(
    room_id: str,
    message: MessageCreate,
    user_data: Dict = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service)
):
    _check_member(room_id, user_data, "chat:send", service)
    return service.send_message(room_id, user_data["id"], message.content)
