from fastapi import APIRouter, Depends, Request, UploadFile, File
from app.database.supabase_client import get_supabase
from app.modules.users.schemas import UserUpdate, UserResponse
from app.modules.users.service import UserService
from app.modules.users.avatar_storage import AvatarStorage
from app.core.dependencies import require_action, get_current_user
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(request: Request, supabase: Client = Depends(get_supabase)) -> UserService:
    storage = AvatarStorage(supabase, request.app.state.settings.storage_bucket)
    return UserService(supabase, storage)


@router.get("", response_model=List[UserResponse])
async def list_users(
    user_type: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
    user_data: Dict = Depends(require_action("users:list", "Only trainers can list users")),
    service: UserService = Depends(get_user_service)
):
    """List user profiles (trainers only)"""
    return service.list_users(user_type=user_type, limit=limit, offset=offset)


@router.get("/me", response_model=UserResponse)
async def get_my_profile(
    user_data: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    return service.get_user_by_id(user_data["id"])


@router.put("/me", response_model=UserResponse)
async def update_my_profile(
    user_data_body: UserUpdate,
    user_data: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Update own profile. The role cannot be changed."""
    return service.update_user(user_data["id"], user_data_body)


@router.post("/me/avatar", response_model=UserResponse)
async def upload_my_avatar(
    file: UploadFile = File(...),
    user_data: Dict = Depends(get_current_user),
    service: UserService = Depends(get_user_service)
):
    """Upload a profile picture to the images bucket"""
    content = await file.read()
    return service.upload_avatar(user_data["id"], content, file.filename, file.content_type)
