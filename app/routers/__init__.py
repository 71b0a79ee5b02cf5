# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by resource:
# - health.py: Health check endpoints
# - exercises.py: Exercise library, video upload and playback URLs
# - workouts.py: Workouts, their exercise lists and member assignments
# - activities.py: Scheduled activities, attendees, messages, the coach PT
#   schedule and the Circuits attendance report
# - events.py: Events, cover image upload and image URLs
# - challenges.py: Long-term challenges, goals, enrollments and workout templates
# - community_challenges.py: Timed community challenges and their submissions
# - credits.py: Credit transaction ledgers
# - templates.py: Per-admin bulk creation template
# - users.py: Member directory and avatars
# - deep_links.py: Shared-link pages and the app association document
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import exercises
from . import workouts
from . import activities
from . import events
from . import challenges
from . import community_challenges
from . import credits
from . import templates
from . import users
from . import deep_links

__all__ = [
    "health",
    "exercises",
    "workouts",
    "activities",
    "events",
    "challenges",
    "community_challenges",
    "credits",
    "templates",
    "users",
    "deep_links",
]
