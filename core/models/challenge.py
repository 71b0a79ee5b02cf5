# =============================================================================
# core/models/challenge.py - Long-Term Challenge, Goal and Template Schemas
# =============================================================================
# A long-term challenge runs between start_at and end_at. It carries default
# nutrition targets (calorie multiplier, macro split, daily steps) that are
# copied onto each enrollment, and a list of goals participants pick from.
#
# Cross-field rules enforced here:
# - end_at must not precede start_at (when both are supplied)
# - a macro split must sum to 100 (when all three percentages are supplied)
#
# Workout templates (weights/circuits and run sessions per week and
# fitness level) also live here.
# =============================================================================

from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Optional

from pydantic import model_validator

from lib.utils import macro_split_is_valid

from .base import (
    AdminRequest,
    OptionalInt,
    OptionalNumber,
    OptionalText,
    RequiredInt,
    RequiredNumber,
    RequiredText,
)


class ChallengeStatus(str, Enum):
    """
    Date-derived challenge phase, used as a list filter.

    - upcoming: starts after today
    - active: today falls between start and end (inclusive)
    - past: ended before today
    """
    UPCOMING = "upcoming"
    ACTIVE = "active"
    PAST = "past"


class _MacroSplitRule(AdminRequest):
    """Base schema checking that supplied macro percentages sum to 100."""

    MACRO_FIELDS: ClassVar[tuple[str, str, str]] = (
        "default_protein_percent",
        "default_carbs_percent",
        "default_fat_percent",
    )

    @model_validator(mode="after")
    def check_macro_split(self):
        protein, carbs, fat = (getattr(self, name) for name in self.MACRO_FIELDS)
        if not macro_split_is_valid(protein, carbs, fat):
            raise ValueError("Macro percentages must sum to 100")
        return self


class _DateRangeRule(AdminRequest):
    """Base schema checking that end_at does not precede start_at."""

    @model_validator(mode="after")
    def check_date_range(self):
        if self.start_at is not None and self.end_at is not None:
            if _comparable(self.end_at) < _comparable(self.start_at):
                raise ValueError("End date must be on or after start date")
        return self


def _comparable(value: datetime) -> datetime:
    """Normalise to naive UTC so naive and aware values compare."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class ChallengeCreate(_MacroSplitRule, _DateRangeRule):
    """
    Schema for creating a long-term challenge.

    Example:
        {"title": "12 Week Shred", "start_at": "2025-01-06", "end_at": "2025-03-30"}
    """

    title: RequiredText
    start_at: datetime
    end_at: datetime
    description: OptionalText = None
    image_url: OptionalText = None
    default_min_steps: OptionalInt = None
    calorie_multiplier: OptionalNumber = None
    default_protein_percent: OptionalNumber = None
    default_carbs_percent: OptionalNumber = None
    default_fat_percent: OptionalNumber = None
    weight_measurement_frequency: OptionalText = None
    physique_frequency: OptionalText = None
    allow_client_weight_checkin: bool = True
    allow_client_physique_checkin: bool = True
    coach_id: OptionalText = None
    challenge_info: OptionalText = None
    approve_button_text: OptionalText = None
    decline_button_text: OptionalText = None


class ChallengeUpdate(_MacroSplitRule, _DateRangeRule):
    """Schema for updating a challenge. Omitted fields are left unchanged."""

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = (
        "title",
        "start_at",
        "end_at",
        "allow_client_weight_checkin",
        "allow_client_physique_checkin",
    )

    title: Optional[RequiredText] = None
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    description: OptionalText = None
    image_url: OptionalText = None
    default_min_steps: OptionalInt = None
    calorie_multiplier: OptionalNumber = None
    default_protein_percent: OptionalNumber = None
    default_carbs_percent: OptionalNumber = None
    default_fat_percent: OptionalNumber = None
    weight_measurement_frequency: OptionalText = None
    physique_frequency: OptionalText = None
    allow_client_weight_checkin: Optional[bool] = None
    allow_client_physique_checkin: Optional[bool] = None
    coach_id: OptionalText = None
    challenge_info: OptionalText = None
    approve_button_text: OptionalText = None
    decline_button_text: OptionalText = None


# =============================================================================
# Goals
# =============================================================================

class _GoalMacroSplitRule(_MacroSplitRule):
    MACRO_FIELDS: ClassVar[tuple[str, str, str]] = (
        "protein_percent",
        "carbs_percent",
        "fat_percent",
    )


class GoalCreate(_GoalMacroSplitRule):
    """
    Schema for creating a challenge goal (e.g. "Fat loss", -500 kcal).
    """

    goal_name: RequiredText
    calorie_adjustment: RequiredNumber
    display_order: OptionalInt = 0
    protein_percent: OptionalNumber = None
    carbs_percent: OptionalNumber = None
    fat_percent: OptionalNumber = None


class GoalUpdate(_GoalMacroSplitRule):
    """Schema for updating a challenge goal."""

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = ("goal_name", "calorie_adjustment", "display_order")

    goal_name: Optional[RequiredText] = None
    calorie_adjustment: OptionalNumber = None
    display_order: OptionalInt = None
    protein_percent: OptionalNumber = None
    carbs_percent: OptionalNumber = None
    fat_percent: OptionalNumber = None


# =============================================================================
# Workout Templates
# =============================================================================
# The weekly training prescription for a fitness level. A template without
# a week_number applies to every week without its own template.

class ChallengeWorkoutTemplateCreate(AdminRequest):
    """Schema for adding a workout template to a challenge."""

    fitness_level: RequiredText
    weights_circuits_count: RequiredInt
    week_number: OptionalInt = None
    run_sessions: OptionalInt = None


class ChallengeWorkoutTemplateUpdate(AdminRequest):
    """Schema for updating a workout template. Omitted fields are unchanged."""

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = ("fitness_level", "weights_circuits_count")

    fitness_level: Optional[RequiredText] = None
    weights_circuits_count: OptionalInt = None
    week_number: OptionalInt = None
    run_sessions: OptionalInt = None
