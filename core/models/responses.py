# =============================================================================
# core/models/responses.py - Response Envelopes
# =============================================================================
# Every success response wraps its payload under a named key:
#   {"exercise": {...}}, {"exercises": [...]}, {"success": true}
#
# Stored rows are passed through as they come back from the database. Only
# `id` is declared on Record; every other column is kept as an extra field,
# so adding a column never requires a schema change here.
# =============================================================================

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """A stored row, returned with all of its columns."""

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "title": "Back Squat",
                "created_at": "2025-01-15T10:30:00+00:00",
            }
        },
    )

    id: str = Field(..., description="Row UUID")


class SuccessResponse(BaseModel):
    """Acknowledgement for deletes and other mutations without a body."""
    success: bool = True


class SignedUrlResponse(BaseModel):
    """A time-limited URL for a stored object (or an external URL as-is)."""
    url: str = Field(
        ...,
        example="https://project.supabase.co/storage/v1/object/sign/avatars/u1.jpg?token=...",
    )


# =============================================================================
# Uploads
# =============================================================================

class VideoUploadResponse(BaseModel):
    """Exercise video upload result."""
    path: str = Field(..., example="exercises/550e8400-.../video_male.mp4")
    success: bool = True


class EventImageUploadResponse(BaseModel):
    """Event image upload result; the bucket is the one that accepted it."""
    path: str = Field(..., example="event-550e8400-...-1736937000000-k3j9x2.jpg")
    bucket: str = Field(..., example="activity-images")
    success: bool = True


class ChallengeImageUploadResponse(BaseModel):
    """Challenge image upload result with the public URL."""
    path: str = Field(..., example="challenge/1736937000000-k3j9x2.png")
    url: str


# =============================================================================
# Single-record and list envelopes
# =============================================================================

class ExerciseResponse(BaseModel):
    exercise: Record


class ExerciseListResponse(BaseModel):
    exercises: list[Record]


class WorkoutResponse(BaseModel):
    workout: Record


class WorkoutListResponse(BaseModel):
    workouts: list[Record]


class WorkoutAssignmentResponse(BaseModel):
    """The assignment row and the private copy made for the member."""
    assignment: Record
    assigned_workout: Record


class ActivityResponse(BaseModel):
    activity: Record


class ActivityListResponse(BaseModel):
    activities: list[Record]


class EventResponse(BaseModel):
    event: Record


class EventListResponse(BaseModel):
    events: list[Record]


class ChallengeResponse(BaseModel):
    challenge: Record


class ChallengeListResponse(BaseModel):
    challenges: list[Record]


class GoalResponse(BaseModel):
    goal: Record


class GoalListResponse(BaseModel):
    goals: list[Record]


class EnrollmentResponse(BaseModel):
    enrollment: Record


class EnrollmentListResponse(BaseModel):
    enrollments: list[Record]


class ChallengeWorkoutTemplateResponse(BaseModel):
    template: Record


class ChallengeWorkoutTemplateListResponse(BaseModel):
    templates: list[Record]


class SubmissionListResponse(BaseModel):
    submissions: list[Record]


class BulkTemplateResponse(BaseModel):
    """The caller's bulk creation template, or null before the first save."""
    template: Optional[Record] = None


class UserListResponse(BaseModel):
    users: list[Record]


class UserDetailResponse(BaseModel):
    """Everything shown on a member's page."""
    profile: Record
    credits: dict[str, Any]
    activities: dict[str, list[Record]] = Field(..., description="past / upcoming")
    events: dict[str, list[Record]] = Field(..., description="past / upcoming / all")
    workouts: list[Record]
    assigned_workouts: list[Record]
    challenges: list[Record]


# =============================================================================
# Attendance and messages
# =============================================================================

class AttendanceEntry(BaseModel):
    """One user's attendance on an activity, with their profile summary."""
    user_id: str
    status: str
    profiles: Optional[dict[str, Any]] = None


class AttendanceResponse(BaseModel):
    attendance: AttendanceEntry


class MessageResponse(BaseModel):
    message: Record


class MessageListResponse(BaseModel):
    messages: list[Record]


# =============================================================================
# Credits
# =============================================================================

class CreditTransaction(BaseModel):
    """A credit ledger entry joined with its member and activity."""
    id: str
    user_id: Optional[str] = None
    user_name: str = Field(..., example="Sam Jones")
    avatar_url: Optional[str] = None
    amount: int | float = Field(..., example=-1)
    activity_id: Optional[str] = None
    activity_name: str = Field(..., example="Saturday Circuits")
    activity_date: Optional[str] = None
    activity_type: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None


class CreditTransactionListResponse(BaseModel):
    transactions: list[CreditTransaction]


# =============================================================================
# Circuit attendance report
# =============================================================================
# The admin console charts this report with camelCase keys.

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CircuitSession(_CamelModel):
    """A single session; its stored columns keep their own names."""
    id: str
    title: Optional[str] = None
    start_at: str = Field(..., alias="start_at")
    end_at: Optional[str] = Field(default=None, alias="end_at")
    location_name: Optional[str] = Field(default=None, alias="location_name")
    attendance_count: int


class CircuitSlot(_CamelModel):
    """Circuits sessions sharing a calendar day and start time."""
    day: str = Field(..., example="Monday")
    time_slot: str = Field(..., example="6:30 AM")
    date: str
    activities: list[CircuitSession]
    total_attendance: int


class CircuitAttendanceSummary(_CamelModel):
    total_sessions: int
    total_attendance: int
    average_attendance: float


class CircuitAttendanceResponse(_CamelModel):
    attendance_data: list[CircuitSlot]
    summary: CircuitAttendanceSummary
