# =============================================================================
# core/models/event.py - Event Schemas
# =============================================================================

from datetime import datetime
from typing import ClassVar, Optional

from .base import AdminRequest, OptionalText, RequiredText


class EventCreate(AdminRequest):
    """
    Schema for creating an event.

    `must_attend_all` only sticks for events spanning more than one calendar
    day; the service forces it to false otherwise.
    """

    title: RequiredText
    start_at: datetime
    description: OptionalText = None
    end_at: Optional[datetime] = None
    location_name: OptionalText = None
    external_url: OptionalText = None
    image_url: OptionalText = None
    must_attend_all: bool = False


class EventUpdate(AdminRequest):
    """Schema for updating an event. Omitted fields are left unchanged."""

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = ("title", "start_at", "must_attend_all")

    title: Optional[RequiredText] = None
    start_at: Optional[datetime] = None
    description: OptionalText = None
    end_at: Optional[datetime] = None
    location_name: OptionalText = None
    external_url: OptionalText = None
    image_url: OptionalText = None
    must_attend_all: Optional[bool] = None
