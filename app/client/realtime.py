"""One realtime listener per open chat room."""

import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


def _record(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    # realtime payloads carry the inserted row under data.record; older shapes use "new"
    if "new" in payload:
        return payload["new"]
    data = payload.get("data") or {}
    return data.get("record") or payload.get("record")


class RoomFeed:
    """Listen for new messages of a room on a supabase ``AsyncClient``.

    ``on_message`` receives each inserted row with a ``user`` entry taken from
    the room participants (id, name, avatar_url) when the sender is known.
    """

    def __init__(
        self,
        client,
        room_id: str,
        on_message: Callable[[Dict[str, Any]], None],
        participants: Optional[List[Dict[str, Any]]] = None,
    ):
        self.client = client
        self.room_id = room_id
        self.on_message = on_message
        self.participants = {p["id"]: p for p in (participants or [])}
        self._channel = None

    @property
    def channel_name(self) -> str:
        return f"room:{self.room_id}"

    @property
    def is_open(self) -> bool:
        return self._channel is not None

    def handle_insert(self, payload: Dict[str, Any]) -> None:
        record = _record(payload)
        if not record or record.get("room_id") != self.room_id:
            return
        message = dict(record)
        sender = self.participants.get(message.get("user_id"))
        message["user"] = {
            "id": sender["id"],
            "name": sender.get("name"),
            "avatar_url": sender.get("avatar_url"),
        } if sender else None
        self.on_message(message)

    async def open(self) -> None:
        if self._channel is not None:
            return
        channel = self.client.channel(self.channel_name)
        channel.on_postgres_changes(
            "INSERT",
            schema="public",
            table="messages",
            filter=f"room_id=eq.{self.room_id}",
            callback=self.handle_insert,
        )
        await channel.subscribe()
        self._channel = channel
        logger.info(f"Subscribed to {self.channel_name}")

    async def close(self) -> None:
        if self._channel is None:
            return
        channel, self._channel = self._channel, None
        await self.client.remove_channel(channel)
        logger.info(f"Unsubscribed from {self.channel_name}")
