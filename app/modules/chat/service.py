from supabase import Client
from app.modules.chat.schemas import ChatRoomResponse, MessageResponse, Participant
from app.config.permissions_config import STUDENT
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _profiles(self, user_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        if not user_ids:
            return {}
        result = self.supabase.table("profiles")\
            .select("id, name, avatar_url, user_type")\
            .in_("id", user_ids)\
            .execute()
        return {p["id"]: p for p in (result.data or [])}

    def _participants(self, room_ids: List[str]) -> Dict[str, List[Dict[str, Any]]]:
        if not room_ids:
            return {}
        result = self.supabase.table("chat_room_participants")\
            .select("*")\
            .in_("room_id", room_ids)\
            .execute()
        grouped: Dict[str, List[Dict[str, Any]]] = {rid: [] for rid in room_ids}
        for row in result.data or []:
            grouped.setdefault(row["room_id"], []).append(row)
        return grouped

    def _room_ids_for(self, user_id: str) -> List[str]:
        result = self.supabase.table("chat_room_participants")\
            .select("room_id")\
            .eq("user_id", user_id)\
            .execute()
        return [r["room_id"] for r in (result.data or [])]

    def _build_rooms(self, rooms: List[Dict[str, Any]], user_id: str) -> List[ChatRoomResponse]:
        participants = self._participants([r["id"] for r in rooms])
        profiles = self._profiles(list({p["user_id"] for rows in participants.values() for p in rows}))
        responses = []
        for room in rooms:
            members = participants.get(room["id"], [])
            mine = next((p for p in members if p["user_id"] == user_id), None)
            responses.append(ChatRoomResponse(
                id=room["id"],
                name=room.get("name"),
                last_message=room.get("last_message"),
                last_message_time=room.get("last_message_time"),
                unread_count=(mine or {}).get("unread_count") or 0,
                participants=[
                    Participant(**profiles.get(p["user_id"], {"id": p["user_id"]}))
                    for p in members
                ],
            ))
        return responses

    def get_membership(self, room_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        """Return the caller's participant row, 404 if the room does not exist"""
        try:
            room = self.supabase.table("chat_rooms")\
                .select("id")\
                .eq("id", room_id)\
                .maybe_single()\
                .execute()
            if not room or not room.data:
                raise HTTPException(status_code=404, detail="Chat room not found")
            result = self.supabase.table("chat_room_participants")\
                .select("*")\
                .eq("room_id", room_id)\
                .eq("user_id", user_id)\
                .execute()
            return result.data[0] if result.data else None
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_rooms(self, user_id: str) -> List[ChatRoomResponse]:
        """Rooms the user takes part in, most recent conversation first"""
        try:
            room_ids = self._room_ids_for(user_id)
            if not room_ids:
                return []
            result = self.supabase.table("chat_rooms")\
                .select("*")\
                .in_("id", room_ids)\
                .execute()
            rooms = self._build_rooms(result.data or [], user_id)
            rooms.sort(key=lambda r: r.last_message_time.isoformat() if r.last_message_time else "", reverse=True)
            return rooms
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def open_room(self, trainer_id: str, student_id: str, name: Optional[str] = None) -> ChatRoomResponse:
        """Return the trainer/student room, creating it on first contact"""
        try:
            student = self._profiles([student_id]).get(student_id)
            if not student:
                raise HTTPException(status_code=404, detail="Student not found")
            if student.get("user_type") != STUDENT:
                raise HTTPException(status_code=400, detail="Chat rooms can only be opened with students")

            shared = set(self._room_ids_for(trainer_id)) & set(self._room_ids_for(student_id))
            if shared:
                existing = self.supabase.table("chat_rooms")\
                    .select("*")\
                    .in_("id", sorted(shared))\
                    .execute()
                if existing.data:
                    return self._build_rooms(existing.data[:1], trainer_id)[0]

            result = self.supabase.table("chat_rooms").insert({
                "name": name or student.get("name"),
                "created_at": datetime.utcnow().isoformat(),
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create chat room")
            room = result.data[0]
            self.supabase.table("chat_room_participants").insert([
                {"room_id": room["id"], "user_id": trainer_id, "unread_count": 0},
                {"room_id": room["id"], "user_id": student_id, "unread_count": 0},
            ]).execute()
            logger.info(f"Opened chat room {room['id']} between {trainer_id} and {student_id}")
            return self._build_rooms([room], trainer_id)[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_messages(self, room_id: str, user_id: str, limit: int = 100) -> List[MessageResponse]:
        """The latest `limit` messages in creation order; marks the room as read for the caller"""
        try:
            result = self.supabase.table("messages")\
                .select("*")\
                .eq("room_id", room_id)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .execute()
            messages = list(reversed(result.data or []))
            profiles = self._profiles(list({m["user_id"] for m in messages}))

            self.supabase.table("chat_room_participants")\
                .update({"unread_count": 0})\
                .eq("room_id", room_id)\
                .eq("user_id", user_id)\
                .execute()

            return [
                MessageResponse(
                    **m,
                    user=Participant(**profiles[m["user_id"]]) if m["user_id"] in profiles else None,
                )
                for m in messages
            ]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def send_message(self, room_id: str, user_id: str, content: str) -> MessageResponse:
        """Append a message and refresh the room preview and unread counters"""
        content = content.strip()
        if not content:
            raise HTTPException(status_code=400, detail="Message content is required")
        try:
            now = datetime.utcnow().isoformat()
            result = self.supabase.table("messages").insert({
                "room_id": room_id,
                "user_id": user_id,
                "content": content,
                "created_at": now,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to send message")

            self.supabase.table("chat_rooms")\
                .update({"last_message": content, "last_message_time": now})\
                .eq("id", room_id)\
                .execute()

            for member in self._participants([room_id]).get(room_id, []):
                if member["user_id"] == user_id:
                    continue
                self.supabase.table("chat_room_participants")\
                    .update({"unread_count": (member.get("unread_count") or 0) + 1})\
                    .eq("id", member["id"])\
                    .execute()

            sender = self._profiles([user_id]).get(user_id)
            return MessageResponse(**result.data[0], user=Participant(**sender) if sender else None)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
