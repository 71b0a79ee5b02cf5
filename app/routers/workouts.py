# =============================================================================
# app/routers/workouts.py - Workout Endpoints
# =============================================================================
# Handles workout CRUD and assigning workouts to members. Workouts are
# returned with their nested exercises.
# All endpoints require an administrator.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.auth import AdminIdentity, require_admin
from core.models.responses import (
    SuccessResponse,
    WorkoutAssignmentResponse,
    WorkoutListResponse,
    WorkoutResponse,
)
from core.models.workout import WorkoutAssignmentCreate, WorkoutCreate, WorkoutUpdate
from core.services.workout_service import WorkoutService

router = APIRouter()

# Mounted under /api/admin/workout-assignments
assignments_router = APIRouter()


@router.get("", response_model=WorkoutListResponse)
async def list_workouts(admin: AdminIdentity = Depends(require_admin)):
    """List every workout, newest first."""
    return {"workouts": WorkoutService.list_workouts()}


@router.post("", response_model=WorkoutResponse)
async def create_workout(
    request: WorkoutCreate,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Create a workout owned by the calling admin.

    Exercises listed in the body are added in order.
    """
    return {"workout": WorkoutService.create_workout(request, admin.actor_id)}


@router.get("/{workout_id}", response_model=WorkoutResponse)
async def get_workout(
    workout_id: Annotated[str, Path(description="Workout UUID")],
    admin: AdminIdentity = Depends(require_admin),
):
    """Get a workout by ID."""
    return {"workout": WorkoutService.get_workout(workout_id)}


@router.put("/{workout_id}", response_model=WorkoutResponse)
async def update_workout(
    workout_id: Annotated[str, Path(description="Workout UUID")],
    request: WorkoutUpdate,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Update a workout.

    Supplying `exercises` replaces the whole exercise list.
    """
    return {"workout": WorkoutService.update_workout(workout_id, request)}


@router.delete("/{workout_id}", response_model=SuccessResponse)
async def delete_workout(
    workout_id: Annotated[str, Path(description="Workout UUID")],
    admin: AdminIdentity = Depends(require_admin),
):
    """Delete a workout and its exercise list."""
    WorkoutService.delete_workout(workout_id)
    return {"success": True}


# =============================================================================
# Assignments
# =============================================================================

@assignments_router.post("", response_model=WorkoutAssignmentResponse)
async def assign_workout(
    request: WorkoutAssignmentCreate,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Assign a workout to a member.

    The member gets a private copy of the workout and its exercises;
    the response holds the assignment and that copy.
    """
    return WorkoutService.assign_workout(request, admin.actor_id)
