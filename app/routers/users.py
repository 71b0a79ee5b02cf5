# =============================================================================
# app/routers/users.py - User Directory Endpoints
# =============================================================================
# Read-only member views for the admin.
# All endpoints require an administrator.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AdminIdentity, require_admin
from app.config import settings
from core.models.responses import SignedUrlResponse, UserDetailResponse, UserListResponse
from core.services.storage_service import StorageService
from core.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=UserListResponse)
async def list_users(admin: AdminIdentity = Depends(require_admin)):
    """
    List every member with email, credit balances and subscription end.
    """
    return {"users": UserService.list_users()}


@router.get("/profile-image", response_model=SignedUrlResponse)
async def get_profile_image_url(
    path: Annotated[str, Query(min_length=1, description="Storage path or full URL")],
    admin: AdminIdentity = Depends(require_admin),
):
    """Get a one-hour signed URL for a member's avatar."""
    return {"url": StorageService.create_signed_url(settings.AVATAR_BUCKET, path)}


@router.get("/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: Annotated[str, Path(description="User UUID")],
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Get a member's profile, credits, activities, events, workouts and
    challenge submissions.
    """
    return UserService.get_user_detail(user_id)
