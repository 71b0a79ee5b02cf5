# =============================================================================
# core/models/template.py - Bulk Creation Template Schema
# =============================================================================
# Each admin keeps at most one bulk creation template: an ordered list of
# schedule entries the UI replays when creating a week of activities.
# =============================================================================

from typing import Any

from pydantic import Field

from .base import AdminRequest


class TemplateSave(AdminRequest):
    """
    Schema for saving the caller's bulk creation template.

    Example:
        {"template_data": [{"day": "monday", "time": "06:30", "activity_type": "Circuits"}]}
    """

    template_data: list[dict[str, Any]] = Field(
        ...,
        description="Ordered template entries; replaces any previous list"
    )
