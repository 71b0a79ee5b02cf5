# =============================================================================
# app/routers/community_challenges.py - Timed Community Challenge Endpoints
# =============================================================================
# Mounted under /api/admin/challenges alongside the long-term challenge
# router:
# - /{id}/timed                              overlapping a date range (all challenges)
# - /{id}/timed/{timed_id}                   one timed challenge
# - /{id}/timed/{timed_id}/submissions       its submissions
# - /{id}/timed-api[/{community_id}]         CRUD scoped to challenge {id}
#
# All endpoints require an administrator.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AdminIdentity, require_admin
from core.models.community_challenge import (
    CommunityChallengeCreate,
    CommunityChallengeUpdate,
    DateOnly,
)
from core.models.responses import (
    ChallengeListResponse,
    ChallengeResponse,
    SubmissionListResponse,
    SuccessResponse,
)
from core.services.community_challenge_service import CommunityChallengeService

router = APIRouter()

ChallengeId = Annotated[str, Path(description="Long-term challenge UUID")]
CommunityId = Annotated[str, Path(description="Community challenge UUID")]


# =============================================================================
# Timed challenge views
# =============================================================================

@router.get("/{challenge_id}/timed", response_model=ChallengeListResponse)
async def list_timed_challenges(
    challenge_id: ChallengeId,
    start_date: Annotated[DateOnly, Query(description="First day of the range")],
    end_date: Annotated[DateOnly, Query(description="Last day of the range")],
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Community challenges overlapping the date range, with submission counts.

    Both query parameters are required. The range is matched across every
    long-term challenge, not only `challenge_id`.
    """
    return {"challenges": CommunityChallengeService.list_in_range(start_date, end_date)}


@router.get("/{challenge_id}/timed/{timed_challenge_id}", response_model=ChallengeResponse)
async def get_timed_challenge(
    challenge_id: ChallengeId,
    timed_challenge_id: CommunityId,
    admin: AdminIdentity = Depends(require_admin),
):
    """Get a community challenge by ID, whichever challenge it belongs to."""
    return {"challenge": CommunityChallengeService.get_community_challenge(timed_challenge_id)}


@router.get(
    "/{challenge_id}/timed/{timed_challenge_id}/submissions",
    response_model=SubmissionListResponse,
)
async def list_submissions(
    challenge_id: ChallengeId,
    timed_challenge_id: CommunityId,
    admin: AdminIdentity = Depends(require_admin),
):
    """Submissions, newest first, each with the member under `user`."""
    return {"submissions": CommunityChallengeService.list_submissions(timed_challenge_id)}


# =============================================================================
# Community challenge CRUD
# =============================================================================

@router.get("/{challenge_id}/timed-api", response_model=ChallengeListResponse)
async def list_community_challenges(
    challenge_id: ChallengeId,
    admin: AdminIdentity = Depends(require_admin),
):
    """A challenge's community challenges, latest start first."""
    return {"challenges": CommunityChallengeService.list_for_challenge(challenge_id)}


@router.post("/{challenge_id}/timed-api", response_model=ChallengeResponse)
async def create_community_challenge(
    challenge_id: ChallengeId,
    request: CommunityChallengeCreate,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Create a community challenge.

    `title`, `challenge_type`, `start_date` and `end_date` are required.
    Refused when the dates overlap another community challenge of the
    same long-term challenge.
    """
    return {
        "challenge": CommunityChallengeService.create_community_challenge(
            challenge_id, request, admin.actor_id
        )
    }


@router.get("/{challenge_id}/timed-api/{community_id}", response_model=ChallengeResponse)
async def get_community_challenge(
    challenge_id: ChallengeId,
    community_id: CommunityId,
    admin: AdminIdentity = Depends(require_admin),
):
    """Get a community challenge of this challenge with its submission count."""
    return {
        "challenge": CommunityChallengeService.get_community_challenge(community_id, challenge_id)
    }


@router.put("/{challenge_id}/timed-api/{community_id}", response_model=ChallengeResponse)
async def update_community_challenge(
    challenge_id: ChallengeId,
    community_id: CommunityId,
    request: CommunityChallengeUpdate,
    admin: AdminIdentity = Depends(require_admin),
):
    """Update a community challenge. Moved dates are re-checked for overlaps."""
    return {
        "challenge": CommunityChallengeService.update_community_challenge(
            challenge_id, community_id, request
        )
    }


@router.delete("/{challenge_id}/timed-api/{community_id}", response_model=SuccessResponse)
async def delete_community_challenge(
    challenge_id: ChallengeId,
    community_id: CommunityId,
    admin: AdminIdentity = Depends(require_admin),
):
    """Delete a community challenge. Refused once anyone has submitted."""
    CommunityChallengeService.delete_community_challenge(challenge_id, community_id)
    return {"success": True}
