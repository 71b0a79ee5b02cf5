# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Sign-in itself is handled by Supabase Auth client-side.
# These routes let the admin UI confirm a stored session is still an admin one.
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth.dependencies import require_admin
from app.auth.models import AdminIdentity, AdminResponse

router = APIRouter()


@router.get("/me", response_model=AdminResponse)
async def get_current_admin(
    admin: AdminIdentity = Depends(require_admin)
) -> dict:
    """
    Get the current administrator's identity.

    Raises:
        401: If not authenticated
        403: If authenticated but not an administrator
    """
    return {"admin": admin.model_dump(mode="json")}
