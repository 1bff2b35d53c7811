"""
Core dependencies for route protection
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from app.core.policy import authorize
from supabase import Client
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as 401 rather than 403
security = HTTPBearer(auto_error=False)


def get_auth_service(request: Request, supabase: Client = Depends(get_supabase)) -> AuthService:
    settings = request.app.state.settings
    return AuthService(
        supabase,
        cache=request.app.state.auth_cache,
        cache_ttl=settings.auth_cache_ttl_seconds,
        cache_max_size=settings.auth_cache_max_size,
    )


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    """Extract the bearer token from the Authorization header"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token not provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def get_current_user(
    request: Request,
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Resolve the token to a user and attach it to the request"""
    user_data = auth_service.get_current_user(token)
    request.state.user = user_data
    return user_data


def require_action(action: str, detail: Optional[str] = None):
    """Factory function to create a role-only policy check dependency"""
    def check_action(user_data: dict = Depends(get_current_user)) -> dict:
        return authorize(user_data, action, detail=detail)
    return check_action
