# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None


class AdminIdentity(BaseModel):
    """
    Resolved administrator identity.

    Returned by the admin guard and passed into every privileged handler.
    Its `id` is the actor used for ownership-scoped queries ("my templates",
    "my PT sessions") and for created_by stamps.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    nickname: Optional[str] = None
    is_admin: bool = True

    @property
    def actor_id(self) -> str:
        """ID as stored in created_by / user_id columns."""
        return str(self.id)


class AdminResponse(BaseModel):
    """Response body of GET /auth/me."""
    admin: AdminIdentity
