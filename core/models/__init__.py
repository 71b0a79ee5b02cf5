# =============================================================================
# core/models/ - Pydantic Request and Response Schemas
# =============================================================================
# This package contains per-resource request schemas:
# - base.py: shared field types and the partial-update base class
# - exercise.py: exercise library
# - workout.py: workouts and their prescribed exercises
# - activity.py: scheduled activities
# - event.py: events
# - challenge.py: long-term challenges, goals and workout templates
# - enrollment.py: challenge enrollments
# - template.py: bulk creation template
# - community_challenge.py: timed community challenges
# - credit.py: credit ledger types
# - responses.py: response envelopes (response_model classes)
#
# These models define the "contract" between API and clients.
# =============================================================================

from .base import AdminRequest

from .exercise import (
    ExerciseCreate,
    ExerciseUpdate,
    VideoGender,
)

from .workout import (
    WorkoutCreate,
    WorkoutExerciseEntry,
    WorkoutAssignmentCreate,
    WorkoutUpdate,
)

from .activity import (
    ActivityCreate,
    ActivityUpdate,
    AttendeeAdd,
    MessageCreate,
)

from .event import (
    EventCreate,
    EventUpdate,
)

from .challenge import (
    ChallengeCreate,
    ChallengeStatus,
    ChallengeUpdate,
    ChallengeWorkoutTemplateCreate,
    ChallengeWorkoutTemplateUpdate,
    GoalCreate,
    GoalUpdate,
)

from .enrollment import (
    EnrollmentCreate,
    EnrollmentStatus,
    EnrollmentUpdate,
)

from .template import TemplateSave

from .community_challenge import (
    CommunityChallengeCreate,
    CommunityChallengeUpdate,
)

from .credit import CreditType

__all__ = [
    "AdminRequest",
    # Exercise
    "ExerciseCreate",
    "ExerciseUpdate",
    "VideoGender",
    # Workout
    "WorkoutCreate",
    "WorkoutExerciseEntry",
    "WorkoutAssignmentCreate",
    "WorkoutUpdate",
    # Activity
    "ActivityCreate",
    "ActivityUpdate",
    "AttendeeAdd",
    "MessageCreate",
    # Event
    "EventCreate",
    "EventUpdate",
    # Challenge
    "ChallengeCreate",
    "ChallengeStatus",
    "ChallengeUpdate",
    "ChallengeWorkoutTemplateCreate",
    "ChallengeWorkoutTemplateUpdate",
    "GoalCreate",
    "GoalUpdate",
    # Enrollment
    "EnrollmentCreate",
    "EnrollmentStatus",
    "EnrollmentUpdate",
    # Template
    "TemplateSave",
    # Community challenge
    "CommunityChallengeCreate",
    "CommunityChallengeUpdate",
    # Credits
    "CreditType",
]
