# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth, and the admin guard
# that every privileged route depends on.
#
# Usage:
#   from app.auth import require_admin, AdminIdentity
#
#   @router.get("/protected")
#   async def protected(admin: AdminIdentity = Depends(require_admin)):
#       return {"admin_id": admin.actor_id}
# =============================================================================

from app.auth.dependencies import get_current_user, require_admin
from app.auth.models import AdminIdentity, AuthUser

__all__ = [
    "get_current_user",
    "require_admin",
    "AdminIdentity",
    "AuthUser",
]
