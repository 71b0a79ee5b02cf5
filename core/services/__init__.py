# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .storage_service import StorageService
from .exercise_service import ExerciseService
from .workout_service import WorkoutService
from .activity_service import ActivityService
from .attendance_service import AttendanceService
from .message_service import MessageService
from .event_service import EventService
from .challenge_service import ChallengeService
from .goal_service import GoalService
from .enrollment_service import EnrollmentService
from .challenge_workout_template_service import ChallengeWorkoutTemplateService
from .community_challenge_service import CommunityChallengeService
from .credit_service import CreditService
from .template_service import TemplateService
from .user_service import UserService

__all__ = [
    "StorageService",
    "ExerciseService",
    "WorkoutService",
    "ActivityService",
    "AttendanceService",
    "MessageService",
    "EventService",
    "ChallengeService",
    "GoalService",
    "EnrollmentService",
    "ChallengeWorkoutTemplateService",
    "CommunityChallengeService",
    "CreditService",
    "TemplateService",
    "UserService",
]
