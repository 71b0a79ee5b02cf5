# =============================================================================
# core/models/community_challenge.py - Timed Community Challenge Schemas
# =============================================================================
# A community (timed) challenge is a short competition inside a long-term
# challenge, e.g. "fastest 5k this week". Members post submissions against
# it. It runs over whole days, start_date to end_date inclusive.
# =============================================================================

from datetime import date
from typing import Annotated, Any, ClassVar, Optional

from pydantic import BeforeValidator, model_validator

from .base import AdminRequest, OptionalText, RequiredText


def _date_part(value: Any) -> Any:
    """Keep only the calendar day of an ISO timestamp."""
    if isinstance(value, str):
        return value.strip().split("T")[0] or None
    return value


DateOnly = Annotated[date, BeforeValidator(_date_part)]


def check_date_range(start: date | None, end: date | None) -> None:
    if start is not None and end is not None and end < start:
        raise ValueError("End date must be on or after start date")


class CommunityChallengeCreate(AdminRequest):
    """
    Schema for creating a community challenge.

    Example:
        {"title": "5k Time Trial", "challenge_type": "run_5k",
         "start_date": "2025-03-03", "end_date": "2025-03-09"}
    """

    title: RequiredText
    challenge_type: RequiredText
    start_date: DateOnly
    end_date: DateOnly
    description: OptionalText = None
    linked_challenge_id: OptionalText = None

    @model_validator(mode="after")
    def check_dates(self):
        check_date_range(self.start_date, self.end_date)
        return self


class CommunityChallengeUpdate(AdminRequest):
    """
    Schema for updating a community challenge.

    Dates are checked here only when both are supplied; the service
    re-checks them against the stored record.
    """

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = (
        "title",
        "challenge_type",
        "start_date",
        "end_date",
    )

    title: Optional[RequiredText] = None
    challenge_type: Optional[RequiredText] = None
    start_date: Optional[DateOnly] = None
    end_date: Optional[DateOnly] = None
    description: OptionalText = None
    linked_challenge_id: OptionalText = None

    @model_validator(mode="after")
    def check_dates(self):
        check_date_range(self.start_date, self.end_date)
        return self
