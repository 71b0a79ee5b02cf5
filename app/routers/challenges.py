# =============================================================================
# app/routers/challenges.py - Long-Term Challenge Endpoints
# =============================================================================
# Handles long-term challenges and their sub-resources:
# - /challenges                                 challenge CRUD
# - /challenges/upload-image                    image upload (public bucket)
# - /challenges/{id}/goals[/{goal_id}]          goal CRUD
# - /challenges/{id}/enrollments[/{enr_id}]     enrollment CRUD
# - /challenges/{id}/enrollments/{enr_id}/approve
# - /challenges/{id}/workout-templates[/{tpl_id}] workout template CRUD
#
# Timed community challenges are served by community_challenges.py.
#
# All endpoints require an administrator.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile

from app.auth import AdminIdentity, require_admin
from core.models.challenge import (
    ChallengeCreate,
    ChallengeStatus,
    ChallengeUpdate,
    ChallengeWorkoutTemplateCreate,
    ChallengeWorkoutTemplateUpdate,
    GoalCreate,
    GoalUpdate,
)
from core.models.enrollment import EnrollmentCreate, EnrollmentStatus, EnrollmentUpdate
from core.models.responses import (
    ChallengeImageUploadResponse,
    ChallengeListResponse,
    ChallengeResponse,
    ChallengeWorkoutTemplateListResponse,
    ChallengeWorkoutTemplateResponse,
    EnrollmentListResponse,
    EnrollmentResponse,
    GoalListResponse,
    GoalResponse,
    SuccessResponse,
)
from core.services.challenge_service import ChallengeService
from core.services.challenge_workout_template_service import ChallengeWorkoutTemplateService
from core.services.enrollment_service import EnrollmentService
from core.services.goal_service import GoalService
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter()

ChallengeId = Annotated[str, Path(description="Challenge UUID")]
GoalId = Annotated[str, Path(description="Goal UUID")]
EnrollmentId = Annotated[str, Path(description="Enrollment UUID")]
TemplateId = Annotated[str, Path(description="Workout template UUID")]


# =============================================================================
# Image Upload
# =============================================================================

@router.post("/upload-image", response_model=ChallengeImageUploadResponse)
async def upload_challenge_image(
    file: Annotated[UploadFile, File(description="Image file (jpeg, png, webp, gif)")],
    image_type: Annotated[str, Form(alias="type", min_length=1)] = "challenge",
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Upload a challenge image.

    Stored under {type}/ in the public challenges bucket; returns the path
    and its public URL.
    """
    content = await file.read()
    logger.info(f"Challenge image upload ({image_type}, {len(content)} bytes)")

    return StorageService.upload_challenge_image(
        image_type=image_type,
        filename=file.filename,
        content_type=file.content_type,
        content=content,
    )


# =============================================================================
# Challenges
# =============================================================================

@router.get("", response_model=ChallengeListResponse)
async def list_challenges(
    status: Annotated[ChallengeStatus | None, Query(description="upcoming, active or past")] = None,
    admin: AdminIdentity = Depends(require_admin),
):
    """List long-term challenges with enrollment counts."""
    return {"challenges": ChallengeService.list_challenges(status)}


@router.post("", response_model=ChallengeResponse)
async def create_challenge(
    request: ChallengeCreate,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Create a long-term challenge.

    `title`, `start_at` and `end_at` are required; the end may not precede
    the start, and a full default macro split must sum to 100.
    """
    return {"challenge": ChallengeService.create_challenge(request, admin.actor_id)}


@router.get("/{challenge_id}", response_model=ChallengeResponse)
async def get_challenge(
    challenge_id: ChallengeId,
    admin: AdminIdentity = Depends(require_admin),
):
    """Get a challenge with enrollment, goal and community challenge counts."""
    return {"challenge": ChallengeService.get_challenge(challenge_id)}


@router.put("/{challenge_id}", response_model=ChallengeResponse)
async def update_challenge(
    challenge_id: ChallengeId,
    request: ChallengeUpdate,
    admin: AdminIdentity = Depends(require_admin),
):
    """Update a challenge. Fields left out of the body are unchanged."""
    return {"challenge": ChallengeService.update_challenge(challenge_id, request)}


@router.delete("/{challenge_id}", response_model=SuccessResponse)
async def delete_challenge(
    challenge_id: ChallengeId,
    admin: AdminIdentity = Depends(require_admin),
):
    """Delete a challenge. Refused while anyone is enrolled."""
    ChallengeService.delete_challenge(challenge_id)
    return {"success": True}


# =============================================================================
# Goals
# =============================================================================

@router.get("/{challenge_id}/goals", response_model=GoalListResponse)
async def list_goals(
    challenge_id: ChallengeId,
    admin: AdminIdentity = Depends(require_admin),
):
    """List a challenge's goals in display order."""
    return {"goals": GoalService.list_goals(challenge_id)}


@router.post("/{challenge_id}/goals", response_model=GoalResponse)
async def create_goal(
    challenge_id: ChallengeId,
    request: GoalCreate,
    admin: AdminIdentity = Depends(require_admin),
):
    """Create a goal. `goal_name` and `calorie_adjustment` are required."""
    return {"goal": GoalService.create_goal(challenge_id, request)}


@router.put("/{challenge_id}/goals/{goal_id}", response_model=GoalResponse)
async def update_goal(
    challenge_id: ChallengeId,
    goal_id: GoalId,
    request: GoalUpdate,
    admin: AdminIdentity = Depends(require_admin),
):
    """Update a goal of this challenge."""
    return {"goal": GoalService.update_goal(challenge_id, goal_id, request)}


@router.delete("/{challenge_id}/goals/{goal_id}", response_model=SuccessResponse)
async def delete_goal(
    challenge_id: ChallengeId,
    goal_id: GoalId,
    admin: AdminIdentity = Depends(require_admin),
):
    """Delete a goal of this challenge."""
    GoalService.delete_goal(challenge_id, goal_id)
    return {"success": True}


# =============================================================================
# Enrollments
# =============================================================================

@router.get("/{challenge_id}/enrollments", response_model=EnrollmentListResponse)
async def list_enrollments(
    challenge_id: ChallengeId,
    status: Annotated[EnrollmentStatus | None, Query(description="pending or onboarded")] = None,
    admin: AdminIdentity = Depends(require_admin),
):
    """List a challenge's enrollments, newest first, with user profiles."""
    return {"enrollments": EnrollmentService.list_enrollments(challenge_id, status)}


@router.post("/{challenge_id}/enrollments", response_model=EnrollmentResponse)
async def create_enrollment(
    challenge_id: ChallengeId,
    request: EnrollmentCreate,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Enroll a user as pending.

    Calorie and macro targets are derived from the challenge defaults.
    """
    return {"enrollment": EnrollmentService.create_enrollment(challenge_id, request)}


@router.get("/{challenge_id}/enrollments/{enrollment_id}", response_model=EnrollmentResponse)
async def get_enrollment(
    challenge_id: ChallengeId,
    enrollment_id: EnrollmentId,
    admin: AdminIdentity = Depends(require_admin),
):
    """Get an enrollment of this challenge with user and goal."""
    return {"enrollment": EnrollmentService.get_enrollment(challenge_id, enrollment_id)}


@router.put("/{challenge_id}/enrollments/{enrollment_id}", response_model=EnrollmentResponse)
async def update_enrollment(
    challenge_id: ChallengeId,
    enrollment_id: EnrollmentId,
    request: EnrollmentUpdate,
    admin: AdminIdentity = Depends(require_admin),
):
    """Update an enrollment of this challenge."""
    return {
        "enrollment": EnrollmentService.update_enrollment(challenge_id, enrollment_id, request)
    }


@router.delete("/{challenge_id}/enrollments/{enrollment_id}", response_model=SuccessResponse)
async def delete_enrollment(
    challenge_id: ChallengeId,
    enrollment_id: EnrollmentId,
    admin: AdminIdentity = Depends(require_admin),
):
    """Delete an enrollment of this challenge."""
    EnrollmentService.delete_enrollment(challenge_id, enrollment_id)
    return {"success": True}


@router.post(
    "/{challenge_id}/enrollments/{enrollment_id}/approve",
    response_model=EnrollmentResponse,
)
async def approve_enrollment(
    challenge_id: ChallengeId,
    enrollment_id: EnrollmentId,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Approve an enrollment: status becomes onboarded, start date today.

    404 when the enrollment does not belong to this challenge.
    """
    return {"enrollment": EnrollmentService.approve_enrollment(challenge_id, enrollment_id)}


# =============================================================================
# Workout Templates
# =============================================================================

@router.get(
    "/{challenge_id}/workout-templates",
    response_model=ChallengeWorkoutTemplateListResponse,
)
async def list_workout_templates(
    challenge_id: ChallengeId,
    week_number: Annotated[int | None, Query(description="Week, plus all-weeks templates")] = None,
    fitness_level: Annotated[str | None, Query(description="Fitness level")] = None,
    admin: AdminIdentity = Depends(require_admin),
):
    """List workout templates by fitness level, then week (all-weeks first)."""
    return {
        "templates": ChallengeWorkoutTemplateService.list_templates(
            challenge_id, week_number=week_number, fitness_level=fitness_level
        )
    }


@router.post(
    "/{challenge_id}/workout-templates",
    response_model=ChallengeWorkoutTemplateResponse,
)
async def create_workout_template(
    challenge_id: ChallengeId,
    request: ChallengeWorkoutTemplateCreate,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Add a workout template.

    `fitness_level` and `weights_circuits_count` are required; leave
    `week_number` out for a template that covers every week.
    """
    return {"template": ChallengeWorkoutTemplateService.create_template(challenge_id, request)}


@router.put(
    "/{challenge_id}/workout-templates/{template_id}",
    response_model=ChallengeWorkoutTemplateResponse,
)
async def update_workout_template(
    challenge_id: ChallengeId,
    template_id: TemplateId,
    request: ChallengeWorkoutTemplateUpdate,
    admin: AdminIdentity = Depends(require_admin),
):
    """Update a workout template of this challenge."""
    return {
        "template": ChallengeWorkoutTemplateService.update_template(
            challenge_id, template_id, request
        )
    }


@router.delete(
    "/{challenge_id}/workout-templates/{template_id}",
    response_model=SuccessResponse,
)
async def delete_workout_template(
    challenge_id: ChallengeId,
    template_id: TemplateId,
    admin: AdminIdentity = Depends(require_admin),
):
    """Delete a workout template of this challenge."""
    ChallengeWorkoutTemplateService.delete_template(challenge_id, template_id)
    return {"success": True}
