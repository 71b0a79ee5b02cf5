# =============================================================================
# app/routers/events.py - Event Endpoints
# =============================================================================
# Handles event CRUD plus cover image upload and signed image URLs.
# All endpoints require an administrator.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile

from app.auth import AdminIdentity, require_admin
from app.config import settings
from core.models.event import EventCreate, EventUpdate
from core.models.responses import (
    EventImageUploadResponse,
    EventListResponse,
    EventResponse,
    SignedUrlResponse,
    SuccessResponse,
)
from core.services.event_service import EventService
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Image Endpoints
# =============================================================================

@router.get("/image", response_model=SignedUrlResponse)
async def get_event_image_url(
    path: Annotated[str, Query(min_length=1, description="Storage path or full URL")],
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Get a one-hour signed URL for an event image.

    Event images have lived in several buckets; each is tried in turn.
    """
    url = StorageService.create_signed_url_from_buckets(settings.event_image_buckets_list, path)
    return {"url": url}


@router.post("/{event_id}/upload-image", response_model=EventImageUploadResponse)
async def upload_event_image(
    event_id: Annotated[str, Path(description="Event UUID")],
    file: Annotated[UploadFile, File(description="Image file (jpeg, png, webp, gif)")],
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Upload a cover image for an event.

    Returns the storage path and the bucket that accepted it.
    """
    content = await file.read()
    logger.info(f"Image upload for event {event_id} ({len(content)} bytes)")

    stored = StorageService.upload_event_image(
        event_id=event_id,
        filename=file.filename,
        content_type=file.content_type,
        content=content,
    )
    return {**stored, "success": True}


# =============================================================================
# CRUD Endpoints
# =============================================================================

@router.get("", response_model=EventListResponse)
async def list_events(
    start_date: Annotated[str | None, Query(description="ISO date or timestamp")] = None,
    end_date: Annotated[str | None, Query(description="ISO date or timestamp")] = None,
    admin: AdminIdentity = Depends(require_admin),
):
    """List events ordered by start time, with attendance counts."""
    return {"events": EventService.list_events(start_date=start_date, end_date=end_date)}


@router.post("", response_model=EventResponse)
async def create_event(
    request: EventCreate,
    admin: AdminIdentity = Depends(require_admin),
):
    """Create an event. `title` and `start_at` are required."""
    return {"event": EventService.create_event(request, admin.actor_id)}


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: Annotated[str, Path(description="Event UUID")],
    admin: AdminIdentity = Depends(require_admin),
):
    """Get an event with per-day attendance."""
    return {"event": EventService.get_event(event_id)}


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: Annotated[str, Path(description="Event UUID")],
    request: EventUpdate,
    admin: AdminIdentity = Depends(require_admin),
):
    """Update an event. Fields left out of the body are unchanged."""
    return {"event": EventService.update_event(event_id, request)}


@router.delete("/{event_id}", response_model=SuccessResponse)
async def delete_event(
    event_id: Annotated[str, Path(description="Event UUID")],
    admin: AdminIdentity = Depends(require_admin),
):
    """Delete an event."""
    EventService.delete_event(event_id)
    return {"success": True}
