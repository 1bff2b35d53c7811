import hashlib
import time
from supabase import Client
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from fastapi import HTTPException
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

_DEFAULT_CACHE_TTL_SEC = 60
_DEFAULT_CACHE_MAX_SIZE = 500


def user_role(user_data: Dict[str, Any]) -> Optional[str]:
    return (user_data.get("user_metadata") or {}).get("user_type")


class AuthService:
    def __init__(
        self,
        supabase: Client,
        cache: Optional[Dict[str, tuple]] = None,
        cache_ttl: int = _DEFAULT_CACHE_TTL_SEC,
        cache_max_size: int = _DEFAULT_CACHE_MAX_SIZE,
    ):
        self.supabase = supabase
        # Token -> (user_data, expiry) cache, owned by the app so parallel requests share it
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.cache_max_size = cache_max_size

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user using Supabase Auth and create their profile row"""
        try:
            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": {
                        "name": register_data.name,
                        "phone": register_data.phone,
                        "user_type": register_data.user_type,
                    }
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            user_id = auth_response.user.id
            email = auth_response.user.email or register_data.email
            self.supabase.table("profiles").upsert({
                "id": user_id,
                "name": register_data.name,
                "email": email,
                "phone": register_data.phone,
                "user_type": register_data.user_type,
            }).execute()

            logger.info(f"Registered {register_data.user_type} {user_id}")
            return RegisterResponse(
                user_id=user_id,
                email=email,
                user_type=register_data.user_type,
                message="User registered successfully. Check your email to confirm your account."
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user using Supabase Auth"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise HTTPException(status_code=401, detail="Invalid credentials")

            return TokenResponse(
                access_token=auth_response.session.access_token,
                token_type="bearer",
                user_id=auth_response.user.id,
                email=auth_response.user.email or login_data.email,
                user_type=(auth_response.user.user_metadata or {}).get("user_type"),
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve a bearer token to the user. Uses the short TTL cache when one was given."""
        cache_key = hashlib.sha256(token.encode()).hexdigest()
        now = time.monotonic()
        if self.cache is not None and cache_key in self.cache:
            user_data, expiry = self.cache[cache_key]
            if now < expiry:
                return user_data
            del self.cache[cache_key]
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.info(f"Token rejected by auth provider: {e}")
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        if not user_response or not user_response.user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        user = user_response.user
        user_data = {
            "id": user.id,
            "email": user.email,
            "user_metadata": user.user_metadata or {},
            "app_metadata": user.app_metadata or {},
            "created_at": user.created_at,
            "updated_at": user.updated_at
        }
        user_data["role"] = user_role(user_data)
        if self.cache is not None and self.cache_ttl > 0 and len(self.cache) < self.cache_max_size:
            self.cache[cache_key] = (user_data, now + self.cache_ttl)
        return user_data

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        if self.cache is not None:
            self.cache.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Supabase tokens are stateless JWTs; they still expire on their own
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

    def reset_password(self, email: str) -> None:
        """Ask Supabase Auth to email password reset instructions"""
        try:
            self.supabase.auth.reset_password_for_email(email)
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Password reset failed: {str(e)}")
