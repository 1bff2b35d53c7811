from fastapi import Request
from supabase import create_client, Client
from app.config import Settings
import logging

logger = logging.getLogger(__name__)


def create_supabase_client(settings: Settings) -> Client:
    """Build a Supabase client from settings. Raises ValueError when URL or key is missing."""
    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be configured")
    return create_client(settings.supabase_url, settings.supabase_key)


def get_supabase(request: Request) -> Client:
    """Dependency returning the client owned by the running app.

    The handle is created on first use so the app can start (and be imported)
    without credentials; tests pass their own client to ``create_app``.
    """
    state = request.app.state
    if getattr(state, "supabase", None) is None:
        logger.info("Creating Supabase client")
        state.supabase = create_supabase_client(state.settings)
    return state.supabase
