from supabase import Client
from app.modules.users.schemas import UserUpdate, UserResponse
from app.modules.users.avatar_storage import AvatarStorage, ALLOWED_IMAGE_TYPES
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, supabase: Client, storage: Optional[AvatarStorage] = None):
        self.supabase = supabase
        self.storage = storage

    def get_user_by_id(self, user_id: str) -> UserResponse:
        """Get user profile by ID"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .maybe_single()\
                .execute()

            if not result or not result.data:
                raise HTTPException(status_code=404, detail="User not found")

            return UserResponse(**result.data)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_users(
        self,
        user_type: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> List[UserResponse]:
        """List profiles, optionally only one role"""
        try:
            query = self.supabase.table("profiles").select("*")
            if user_type:
                query = query.eq("user_type", user_type)
            result = query.order("name")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [UserResponse(**user) for user in result.data]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_user(self, user_id: str, user_data: UserUpdate) -> UserResponse:
        """Update user profile"""
        try:
            update_data = {"updated_at": datetime.utcnow().isoformat()}
            if user_data.name is not None:
                update_data["name"] = user_data.name
            if user_data.phone is not None:
                update_data["phone"] = user_data.phone
            if user_data.avatar_url is not None:
                update_data["avatar_url"] = user_data.avatar_url

            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")

            return UserResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def upload_avatar(self, user_id: str, file_content: bytes, filename: Optional[str], content_type: Optional[str]) -> UserResponse:
        """Store a new avatar image, point the profile at it and drop the previous image"""
        if self.storage is None:
            raise HTTPException(status_code=500, detail="Storage not configured")
        if not file_content:
            raise HTTPException(status_code=400, detail="Empty file")
        key = self.storage.build_key(user_id, filename)
        if key.rsplit(".", 1)[-1] not in ALLOWED_IMAGE_TYPES:
            raise HTTPException(status_code=400, detail="Only image files are accepted")
        previous_key = self.storage.key_from_url(self.get_user_by_id(user_id).avatar_url)
        try:
            public_url = self.storage.upload_file(file_content, key, content_type or "image/jpeg")
        except Exception as e:
            raise HTTPException(status_code=500, detail=f"Avatar upload failed: {str(e)}")
        logger.info(f"Uploaded avatar for {user_id} to {key}")
        profile = self.update_user(user_id, UserUpdate(avatar_url=public_url))
        if previous_key and previous_key != key:
            self.storage.delete_file(previous_key)
        return profile
