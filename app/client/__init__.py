"""Client-side helpers: session mirroring, auth calls with user-facing alerts, realtime chat."""

from app.client.storage import FileStorage, MemoryStorage
from app.client.session_store import SessionStore
from app.client.auth_client import AuthClient
from app.client.realtime import RoomFeed

__all__ = ["FileStorage", "MemoryStorage", "SessionStore", "AuthClient", "RoomFeed"]
