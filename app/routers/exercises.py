# =============================================================================
# app/routers/exercises.py - Exercise Library Endpoints
# =============================================================================
# Handles exercise CRUD plus demonstration video upload and playback URLs.
# All endpoints require an administrator.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile

from app.auth import AdminIdentity, require_admin
from core.models.exercise import ExerciseCreate, ExerciseUpdate, VideoGender
from core.models.responses import (
    ExerciseListResponse,
    ExerciseResponse,
    SignedUrlResponse,
    SuccessResponse,
    VideoUploadResponse,
)
from core.services.exercise_service import ExerciseService
from core.services.storage_service import StorageService
from app.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Video Endpoints
# =============================================================================
# Declared before /{exercise_id} so the fixed paths win.

@router.post("/upload-video", response_model=VideoUploadResponse)
async def upload_exercise_video(
    file: Annotated[UploadFile, File(description="Video file (mp4, mov, avi, m4v)")],
    exercise_id: Annotated[str, Form(alias="exerciseId", min_length=1)],
    gender: Annotated[VideoGender, Form(description="male or female")],
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Upload the male or female demonstration video for an exercise.

    The video is stored at exercises/{exerciseId}/video_{gender}.{ext},
    replacing any earlier upload. Returns the storage path; request a
    playback URL from /video-url when needed.
    """
    content = await file.read()
    logger.info(f"Video upload for exercise {exercise_id} ({gender.value}, {len(content)} bytes)")

    path = StorageService.upload_exercise_video(
        exercise_id=exercise_id,
        gender=gender.value,
        filename=file.filename,
        content_type=file.content_type,
        content=content,
    )
    return {"path": path, "success": True}


@router.get("/video-url", response_model=SignedUrlResponse)
async def get_exercise_video_url(
    path: Annotated[str, Query(min_length=1, description="Storage path or full URL")],
    admin: AdminIdentity = Depends(require_admin),
):
    """Get a one-hour signed playback URL for an exercise video."""
    url = StorageService.create_signed_url(settings.EXERCISE_VIDEO_BUCKET, path)
    return {"url": url}


# =============================================================================
# CRUD Endpoints
# =============================================================================

@router.get("", response_model=ExerciseListResponse)
async def list_exercises(admin: AdminIdentity = Depends(require_admin)):
    """List every exercise, ordered by title."""
    return {"exercises": ExerciseService.list_exercises()}


@router.post("", response_model=ExerciseResponse)
async def create_exercise(
    request: ExerciseCreate,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Create an exercise.

    Only `title` is required. gender defaults to "both" and
    exercise_type to "strength".
    """
    return {"exercise": ExerciseService.create_exercise(request, admin.actor_id)}


@router.get("/{exercise_id}", response_model=ExerciseResponse)
async def get_exercise(
    exercise_id: Annotated[str, Path(description="Exercise UUID")],
    admin: AdminIdentity = Depends(require_admin),
):
    """Get an exercise by ID."""
    return {"exercise": ExerciseService.get_exercise(exercise_id)}


@router.put("/{exercise_id}", response_model=ExerciseResponse)
async def update_exercise(
    exercise_id: Annotated[str, Path(description="Exercise UUID")],
    request: ExerciseUpdate,
    admin: AdminIdentity = Depends(require_admin),
):
    """Update an exercise. Fields left out of the body are unchanged."""
    return {"exercise": ExerciseService.update_exercise(exercise_id, request)}


@router.delete("/{exercise_id}", response_model=SuccessResponse)
async def delete_exercise(
    exercise_id: Annotated[str, Path(description="Exercise UUID")],
    admin: AdminIdentity = Depends(require_admin),
):
    """Delete an exercise."""
    ExerciseService.delete_exercise(exercise_id)
    return {"success": True}
