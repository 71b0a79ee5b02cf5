# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Liveness and readiness for load balancers and uptime monitors.
#
# Readiness looks at what the admin API actually depends on:
# - the profiles table (every admin guard check reads roles and profiles)
# - each storage bucket the upload and signed-URL endpoints use
#
# Event images are looked up across several historical buckets, so only one
# of those needs to exist for the service to be ready.
# =============================================================================

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app import __version__
from app.config import settings
from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso

router = APIRouter()

HEALTHY = "healthy"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str = Field(..., example="healthy")
    timestamp: str
    environment: str = Field(..., example="production")
    version: str = Field(..., example=__version__)


class ReadinessResponse(BaseModel):
    """Readiness check response, one entry per dependency."""
    status: str = Field(..., example="ready")
    database: str = Field(..., example=HEALTHY)
    buckets: dict[str, str] = Field(
        ...,
        example={"exercise-videos": HEALTHY, "avatars": HEALTHY, "challenges": HEALTHY},
        description="Bucket name -> healthy / missing: <reason>",
    )
    event_image_bucket: str | None = Field(
        default=None,
        description="First event image bucket that exists, if any",
    )
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


# =============================================================================
# Checks
# =============================================================================

def _check_database() -> str:
    try:
        SupabaseClient.get_client().table("profiles").select("id").limit(1).execute()
        return HEALTHY
    except Exception as e:
        return f"unhealthy: {str(e)[:50]}"


def _check_bucket(name: str) -> str:
    try:
        SupabaseClient.get_client().storage.get_bucket(name)
        return HEALTHY
    except Exception as e:
        return f"missing: {str(e)[:50]}"


def _required_buckets() -> list[str]:
    """Buckets that must exist, in a stable order without duplicates."""
    names = [
        settings.EXERCISE_VIDEO_BUCKET,
        settings.AVATAR_BUCKET,
        settings.CHALLENGE_IMAGE_BUCKET,
    ]
    return list(dict.fromkeys(names))


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic health status; does not touch the backend."""
    return HealthResponse(
        status="healthy",
        timestamp=utc_now_iso(),
        environment=settings.ENVIRONMENT,
        version=__version__,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness check endpoint.

    Ready when the database answers, every required bucket exists and at
    least one event image bucket exists. Otherwise "degraded", with the
    failing dependency named in the body.
    """
    database = _check_database()

    buckets = {name: _check_bucket(name) for name in _required_buckets()}
    event_image_bucket = None
    for name in settings.event_image_buckets_list:
        status = buckets[name] if name in buckets else _check_bucket(name)
        if status == HEALTHY:
            event_image_bucket = name
            break

    ready = (
        database == HEALTHY
        and all(status == HEALTHY for status in buckets.values())
        and event_image_bucket is not None
    )

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        database=database,
        buckets=buckets,
        event_image_bucket=event_image_bucket,
        timestamp=utc_now_iso(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """Whether the process is up. Used for restart decisions."""
    return LivenessResponse(status="alive", timestamp=utc_now_iso())
