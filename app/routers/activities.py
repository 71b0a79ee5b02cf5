# =============================================================================
# app/routers/activities.py - Activity (Schedule) Endpoints
# =============================================================================
# Handles activity CRUD, attendance, the message thread, the coach's PT
# schedule and the Circuits attendance report.
# All endpoints require an administrator.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AdminIdentity, require_admin
from core.models.activity import ActivityCreate, ActivityUpdate, AttendeeAdd, MessageCreate
from core.models.responses import (
    ActivityListResponse,
    ActivityResponse,
    AttendanceResponse,
    CircuitAttendanceResponse,
    MessageListResponse,
    MessageResponse,
    SuccessResponse,
)
from core.services.activity_service import ActivityService
from core.services.attendance_service import AttendanceService
from core.services.message_service import MessageService

router = APIRouter()

# Mounted under /api/admin/coach
coach_router = APIRouter()

# Mounted under /api/admin/schedule
schedule_router = APIRouter()

ActivityId = Annotated[str, Path(description="Activity UUID")]


@router.get("", response_model=ActivityListResponse)
async def list_activities(
    activity_type: Annotated[str | None, Query(description="e.g. Circuits, PT")] = None,
    start_date: Annotated[str | None, Query(description="ISO date or timestamp")] = None,
    end_date: Annotated[str | None, Query(description="ISO date or timestamp")] = None,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    List activities ordered by start time.

    Each activity carries `host_profile` and `attendance`.
    """
    return {
        "activities": ActivityService.list_activities(
            activity_type=activity_type,
            start_date=start_date,
            end_date=end_date,
        )
    }


@router.post("", response_model=ActivityResponse)
async def create_activity(
    request: ActivityCreate,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Create an organised activity.

    `title` and `start_at` are required. The calling admin hosts it unless
    `host_user_id` names someone else; `attendees` are booked in as attending.
    """
    return {"activity": ActivityService.create_activity(request, admin.actor_id)}


@router.get("/{activity_id}", response_model=ActivityResponse)
async def get_activity(
    activity_id: ActivityId,
    admin: AdminIdentity = Depends(require_admin),
):
    """Get an activity with host profile and attendance."""
    return {"activity": ActivityService.get_activity(activity_id)}


@router.put("/{activity_id}", response_model=ActivityResponse)
async def update_activity(
    activity_id: ActivityId,
    request: ActivityUpdate,
    admin: AdminIdentity = Depends(require_admin),
):
    """Update an activity. Fields left out of the body are unchanged."""
    return {"activity": ActivityService.update_activity(activity_id, request)}


@router.delete("/{activity_id}", response_model=SuccessResponse)
async def delete_activity(
    activity_id: ActivityId,
    admin: AdminIdentity = Depends(require_admin),
):
    """Delete an activity together with its messages and attendance."""
    ActivityService.delete_activity(activity_id)
    return {"success": True}


# =============================================================================
# Attendees
# =============================================================================

@router.post("/{activity_id}/attendees", response_model=AttendanceResponse)
async def add_attendee(
    activity_id: ActivityId,
    request: AttendeeAdd,
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Book a user onto an activity (status defaults to attending).

    Posting for a user who is already booked updates their status.
    """
    return {"attendance": AttendanceService.add_attendee(activity_id, request)}


@router.delete("/{activity_id}/attendees", response_model=SuccessResponse)
async def remove_attendee(
    activity_id: ActivityId,
    user_id: Annotated[str, Query(description="User to take off the activity")],
    admin: AdminIdentity = Depends(require_admin),
):
    """Take a user off an activity. 404 if they were not on it."""
    AttendanceService.remove_attendee(activity_id, user_id)
    return {"success": True}


# =============================================================================
# Messages
# =============================================================================

@router.get("/{activity_id}/messages", response_model=MessageListResponse)
async def list_messages(
    activity_id: ActivityId,
    admin: AdminIdentity = Depends(require_admin),
):
    """The activity's message thread, oldest first."""
    return {"messages": MessageService.list_messages(activity_id)}


@router.post("/{activity_id}/messages", response_model=MessageResponse)
async def post_message(
    activity_id: ActivityId,
    request: MessageCreate,
    admin: AdminIdentity = Depends(require_admin),
):
    """Post a message to the thread as the calling admin."""
    return {"message": MessageService.post_message(activity_id, request, admin.actor_id)}


# =============================================================================
# Coach
# =============================================================================

@coach_router.get("/pt-schedule", response_model=ActivityListResponse)
async def get_pt_schedule(
    start_date: Annotated[str | None, Query(description="ISO date or timestamp")] = None,
    end_date: Annotated[str | None, Query(description="ISO date or timestamp")] = None,
    admin: AdminIdentity = Depends(require_admin),
):
    """PT sessions the calling admin hosts or created."""
    return {
        "activities": ActivityService.list_pt_schedule(
            admin.actor_id, start_date=start_date, end_date=end_date
        )
    }


# =============================================================================
# Schedule reports
# =============================================================================

@schedule_router.get("/circuit-attendance", response_model=CircuitAttendanceResponse)
async def get_circuit_attendance(
    admin: AdminIdentity = Depends(require_admin),
):
    """
    Circuits attendance grouped by day and start time (UTC).

    Only "attending" bookings count. The body uses camelCase keys
    (attendanceData, timeSlot, averageAttendance...).
    """
    return AttendanceService.circuit_attendance()
