# =============================================================================
# core/models/enrollment.py - Challenge Enrollment Schemas
# =============================================================================
# An enrollment links a user to a long-term challenge.
#
# Status flow: pending -> onboarded
# The approve operation is the only way into "onboarded" and nothing moves
# an enrollment back out of it.
# =============================================================================

from enum import Enum
from typing import ClassVar, Optional

from .base import (
    AdminRequest,
    OptionalInt,
    OptionalNumber,
    OptionalPositiveNumber,
    OptionalText,
    RequiredPositiveNumber,
    RequiredText,
)

# Bodyweight is entered in kg; calorie multipliers are per lb
KG_TO_LB = 2.2


class EnrollmentStatus(str, Enum):
    """Enrollment lifecycle state."""
    PENDING = "pending"
    ONBOARDED = "onboarded"


class EnrollmentCreate(AdminRequest):
    """
    Schema for enrolling a user onto a challenge.

    Nutrition targets are not accepted here; they are derived from the
    challenge defaults and the user's bodyweight.
    """

    user_id: RequiredText
    bodyweight_kg: RequiredPositiveNumber
    fitness_level: RequiredText
    height_cm: OptionalNumber = None
    calorie_adjustment: OptionalNumber = 0
    goal_id: OptionalText = None
    short_term_goals: OptionalText = None
    long_term_goals: OptionalText = None
    events_during_challenge: OptionalText = None
    competing_in_events: bool = False


class EnrollmentUpdate(AdminRequest):
    """
    Schema for updating an enrollment.

    Status is deliberately absent: it only changes through approval.
    """

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = (
        "bodyweight_kg",
        "calorie_adjustment",
        "fitness_level",
        "competing_in_events",
        "use_goal_macro_split",
    )

    bodyweight_kg: OptionalPositiveNumber = None
    height_cm: OptionalNumber = None
    calorie_adjustment: OptionalNumber = None
    protein_percent: OptionalNumber = None
    carbs_percent: OptionalNumber = None
    fat_percent: OptionalNumber = None
    min_steps: OptionalInt = None
    fitness_level: Optional[RequiredText] = None
    short_term_goals: OptionalText = None
    long_term_goals: OptionalText = None
    events_during_challenge: OptionalText = None
    competing_in_events: Optional[bool] = None
    goal_id: OptionalText = None
    use_goal_macro_split: Optional[bool] = None
