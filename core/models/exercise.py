# =============================================================================
# core/models/exercise.py - Exercise Schemas
# =============================================================================
# Request bodies for the exercise library:
# - ExerciseCreate: title required, every other field defaulted
# - ExerciseUpdate: partial update, only supplied fields are written
# - VideoGender: which demonstration video an upload replaces
# =============================================================================

from enum import Enum
from typing import Annotated, Any, ClassVar, Optional

from pydantic import Field

from .base import AdminRequest, OptionalText, RequiredText, default_if_blank

DEFAULT_GENDER = "both"
DEFAULT_EXERCISE_TYPE = "strength"


class VideoGender(str, Enum):
    """Demonstration video variant."""
    MALE = "male"
    FEMALE = "female"


class ExerciseCreate(AdminRequest):
    """
    Schema for creating an exercise.

    Example:
        {"title": "Back Squat", "muscle_groups": ["quads", "glutes"]}
    """

    title: RequiredText = Field(..., description="Exercise name")
    description: OptionalText = None
    exercise_group_id: OptionalText = None
    gender: Annotated[str, default_if_blank(DEFAULT_GENDER)] = DEFAULT_GENDER
    video_url_male: OptionalText = None
    video_url_female: OptionalText = None
    thumbnail_url: OptionalText = None
    muscle_groups: Optional[Any] = None
    equipment_needed: Optional[Any] = None
    difficulty_level: OptionalText = None
    exercise_type: Annotated[str, default_if_blank(DEFAULT_EXERCISE_TYPE)] = DEFAULT_EXERCISE_TYPE
    is_custom: bool = False


class ExerciseUpdate(AdminRequest):
    """Schema for updating an exercise. Omitted fields are left unchanged."""

    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = ("title", "is_custom")

    title: Optional[RequiredText] = None
    description: OptionalText = None
    exercise_group_id: OptionalText = None
    gender: Annotated[str, default_if_blank(DEFAULT_GENDER)] = DEFAULT_GENDER
    video_url_male: OptionalText = None
    video_url_female: OptionalText = None
    thumbnail_url: OptionalText = None
    muscle_groups: Optional[Any] = None
    equipment_needed: Optional[Any] = None
    difficulty_level: OptionalText = None
    exercise_type: Annotated[str, default_if_blank(DEFAULT_EXERCISE_TYPE)] = DEFAULT_EXERCISE_TYPE
    is_custom: Optional[bool] = None
