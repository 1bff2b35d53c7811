"""
Mirror of the auth provider's session.

The store persists the current session to a key/value storage and keeps it in
memory so UI code can gate on authentication without asking the provider on
every render. Consumers call ``subscribe`` and get ``(event, session)`` pushes.
"""

import json
import threading
import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

SessionListener = Callable[[str, Optional[Dict[str, Any]]], None]


def _session_to_dict(session: Any) -> Optional[Dict[str, Any]]:
    if session is None:
        return None
    if isinstance(session, dict):
        return session
    if hasattr(session, "model_dump"):
        return session.model_dump(mode="json")
    return dict(vars(session))


class SessionStore:
    def __init__(self, storage, storage_key: str = "supabase-session"):
        self.storage = storage
        self.storage_key = storage_key
        self.loading = True
        self._session: Optional[Dict[str, Any]] = None
        self._listeners: List[SessionListener] = []
        self._lock = threading.Lock()
        self._subscription = None

    def get_current_session(self) -> Optional[Dict[str, Any]]:
        return self._session

    @property
    def user(self) -> Optional[Dict[str, Any]]:
        return (self._session or {}).get("user")

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; the returned callable removes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    def handle_auth_state_change(self, event: str, session: Any) -> None:
        """Persist (or drop) the session, mirror it in memory and notify listeners."""
        data = _session_to_dict(session)
        logger.info(f"Auth state changed: {event} {((data or {}).get('user') or {}).get('id')}")
        if data is not None:
            self.storage.set_item(self.storage_key, json.dumps(data))
        else:
            self.storage.remove_item(self.storage_key)
        with self._lock:
            self._session = data
            self.loading = False
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, data)
            except Exception:
                logger.exception(f"Session listener failed on {event}")

    def bind(self, auth) -> None:
        """Follow the provider's auth events (supabase ``client.auth``)."""
        self.unbind()
        self._subscription = auth.on_auth_state_change(self.handle_auth_state_change)

    def unbind(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def restore(self, auth) -> Optional[Dict[str, Any]]:
        """Load a persisted session, keeping it only while the provider still has one."""
        try:
            if self.storage.get_item(self.storage_key) is None:
                return None
            current = auth.get_session()
            if current is not None:
                data = _session_to_dict(current)
                with self._lock:
                    self._session = data
                return data
            self.storage.remove_item(self.storage_key)
            return None
        finally:
            self.loading = False
