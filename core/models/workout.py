# =============================================================================
# core/models/workout.py - Workout Schemas
# =============================================================================
# A workout owns an ordered list of prescribed exercises stored in the
# workout_exercises table. When an entry has no order_index its position in
# the submitted list is used.
# =============================================================================

from typing import ClassVar, Optional

from pydantic import Field

from .base import (
    AdminRequest,
    OptionalInt,
    OptionalNumber,
    OptionalText,
    RequiredText,
)


class WorkoutExerciseEntry(AdminRequest):
    """One prescribed exercise inside a workout."""

    exercise_id: RequiredText
    order_index: OptionalInt = None
    sets: OptionalInt = None
    reps: OptionalInt = None
    weight: OptionalNumber = None
    rest_seconds: OptionalInt = None
    notes: OptionalText = None
    reps_min: OptionalInt = None
    reps_max: OptionalInt = None
    reps_target: OptionalInt = None
    is_amrap: bool = False
    weight_percentage: OptionalNumber = None
    rpe_target: OptionalNumber = None
    tempo: OptionalText = None
    distance_km: OptionalNumber = None
    time_minutes: OptionalNumber = None
    time_seconds: OptionalNumber = None


class WorkoutCreate(AdminRequest):
    """
    Schema for creating a workout.

    Example:
        {"name": "Leg Day", "exercises": [{"exercise_id": "...", "sets": 4, "reps": 8}]}
    """

    name: RequiredText = Field(..., description="Workout name")
    description: OptionalText = None
    visibility: str = "private"
    is_template: bool = False
    exercises: list[WorkoutExerciseEntry] = Field(default_factory=list)


class WorkoutUpdate(AdminRequest):
    """
    Schema for updating a workout.

    When `exercises` is supplied the workout's exercise list is replaced
    wholesale; when omitted the existing list is kept.
    """

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = ("name", "visibility", "is_template", "exercises")

    name: Optional[RequiredText] = None
    description: OptionalText = None
    visibility: Optional[str] = None
    is_template: Optional[bool] = None
    exercises: Optional[list[WorkoutExerciseEntry]] = None


class WorkoutAssignmentCreate(AdminRequest):
    """
    Schema for assigning a workout to a member.

    The member receives a private copy of the workout; the original stays
    with its owner.
    """

    workout_id: RequiredText
    assigned_to_user_id: RequiredText
    notes: OptionalText = None
