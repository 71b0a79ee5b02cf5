# =============================================================================
# core/models/activity.py - Activity (Schedule) Schemas
# =============================================================================
# Activities are scheduled sessions (Circuits, PT, runs...) with attendance.
# Admin-created activities are always "organised" and flagged as such.
# =============================================================================

from datetime import datetime
from typing import Annotated, ClassVar, Optional

from pydantic import Field

from .base import (
    AdminRequest,
    OptionalNumber,
    OptionalText,
    RequiredText,
    default_if_blank,
)

DEFAULT_ACTIVITY_TYPE = "Circuits"
PT_ACTIVITY_TYPE = "PT"
ATTENDING = "attending"


class ActivityCreate(AdminRequest):
    """
    Schema for creating an activity.

    `attendees` is a list of user IDs booked in as attending on creation.
    """

    title: RequiredText
    start_at: datetime
    description: OptionalText = None
    end_at: Optional[datetime] = None
    location_name: OptionalText = None
    location_lat: OptionalNumber = None
    location_lng: OptionalNumber = None
    cost: Annotated[float, default_if_blank(1)] = 1
    activity_type: Annotated[str, default_if_blank(DEFAULT_ACTIVITY_TYPE)] = DEFAULT_ACTIVITY_TYPE
    host_user_id: OptionalText = None
    icon: OptionalText = None
    route_link: OptionalText = None
    visibility: Annotated[str, default_if_blank("private")] = "private"
    attendees: list[str] = Field(default_factory=list)


class ActivityUpdate(AdminRequest):
    """Schema for updating an activity. Omitted fields are left unchanged."""

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = ("title", "start_at")

    title: Optional[RequiredText] = None
    start_at: Optional[datetime] = None
    description: OptionalText = None
    end_at: Optional[datetime] = None
    location_name: OptionalText = None
    location_lat: OptionalNumber = None
    location_lng: OptionalNumber = None
    cost: Annotated[float, default_if_blank(0)] = 0
    activity_type: Annotated[str, default_if_blank(DEFAULT_ACTIVITY_TYPE)] = DEFAULT_ACTIVITY_TYPE
    host_user_id: OptionalText = None
    icon: OptionalText = None
    route_link: OptionalText = None
    visibility: Annotated[str, default_if_blank("private")] = "private"


# =============================================================================
# Attendance and messages
# =============================================================================

class AttendeeAdd(AdminRequest):
    """
    Schema for booking a user onto an activity.

    Booking someone who already has an attendance row changes its status.
    """

    user_id: RequiredText
    status: Annotated[str, default_if_blank(ATTENDING)] = ATTENDING


class MessageCreate(AdminRequest):
    """Schema for posting to an activity's message thread."""

    message: RequiredText
