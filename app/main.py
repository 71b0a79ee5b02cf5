# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the OMR Hub admin API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import settings
from app.exceptions import (
    OMRHubException,
    omrhub_exception_handler,
    validation_exception_handler,
)
from app.routers import (
    activities,
    challenges,
    community_challenges,
    credits,
    deep_links,
    events,
    exercises,
    health,
    templates,
    users,
    workouts,
)
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown. The Supabase client is created lazily on
    first use, so there is nothing to open or close here.
    """
    logger.info(f"Starting OMR Hub Admin API in {settings.ENVIRONMENT} mode")
    logger.info(f"CORS origins: {settings.cors_origins_list}")

    yield

    logger.info("Shutting down OMR Hub Admin API")


# Create FastAPI application
app = FastAPI(
    title="OMR Hub Admin API",
    description="""
## OMR Hub Administration API

Back office for the OMR Hub fitness community app. Every `/api/admin`
endpoint requires a Supabase session token belonging to an administrator.

### Resources

| Resource | Path |
|----------|------|
| **Exercises** | `/api/admin/exercises` |
| **Workouts** | `/api/admin/workouts` |
| **Activities** | `/api/admin/activities`, `/api/admin/coach/pt-schedule` |
| **Events** | `/api/admin/events` |
| **Challenges** | `/api/admin/challenges` (goals, enrollments) |
| **Bulk template** | `/api/admin/bulk-template` |
| **Users** | `/api/admin/users` |

### Conventions

- Success responses wrap the resource under a named key:
  `{"exercise": {...}}`, `{"exercises": [...]}`
- Failures return `{"error": str, "code": str, "details"?: str}`
  with 400 (validation), 401, 403, 404 or 500
- Updates are partial: fields left out of the body are unchanged
- Media is returned as storage paths; signed URLs last one hour

### Quick Start

```bash
curl http://localhost:8000/api/admin/exercises \\
  -H "Authorization: Bearer $SUPABASE_ACCESS_TOKEN"
```
""",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Auth", "description": "Confirm the caller is an administrator"},
        {"name": "Exercises", "description": "Exercise library and demonstration videos"},
        {"name": "Workouts", "description": "Workouts and their prescribed exercises"},
        {"name": "Activities", "description": "Scheduled activities and attendance"},
        {"name": "Coach", "description": "Coach PT schedule"},
        {"name": "Events", "description": "Events, attendance and cover images"},
        {"name": "Challenges", "description": "Long-term challenges, goals and enrollments"},
        {"name": "Templates", "description": "Bulk creation template"},
        {"name": "Users", "description": "Member directory"},
        {"name": "Deep Links", "description": "Shared-link pages and app association"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(OMRHubException)
async def handle_omrhub_exception(request: Request, exc: OMRHubException):
    """Handle custom OMR Hub exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details})")
    return await omrhub_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies, queries and forms."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

ADMIN_PREFIX = "/api/admin"

# Authentication endpoints
app.include_router(
    auth_routes.router,
    prefix=f"{ADMIN_PREFIX}/auth",
    tags=["Auth"]
)

# Health check endpoints
app.include_router(
    health.router,
    prefix="/api/v1",
    tags=["Health"]
)

# Exercise library endpoints
app.include_router(
    exercises.router,
    prefix=f"{ADMIN_PREFIX}/exercises",
    tags=["Exercises"]
)

# Workout endpoints
app.include_router(
    workouts.router,
    prefix=f"{ADMIN_PREFIX}/workouts",
    tags=["Workouts"]
)

# Workout assignment endpoints
app.include_router(
    workouts.assignments_router,
    prefix=f"{ADMIN_PREFIX}/workout-assignments",
    tags=["Workouts"]
)

# Activity (schedule) endpoints
app.include_router(
    activities.router,
    prefix=f"{ADMIN_PREFIX}/activities",
    tags=["Activities"]
)

# Coach endpoints
app.include_router(
    activities.coach_router,
    prefix=f"{ADMIN_PREFIX}/coach",
    tags=["Coach"]
)

# Schedule report endpoints
app.include_router(
    activities.schedule_router,
    prefix=f"{ADMIN_PREFIX}/schedule",
    tags=["Schedule"]
)

# Event endpoints
app.include_router(
    events.router,
    prefix=f"{ADMIN_PREFIX}/events",
    tags=["Events"]
)

# Challenge, goal and enrollment endpoints
app.include_router(
    challenges.router,
    prefix=f"{ADMIN_PREFIX}/challenges",
    tags=["Challenges"]
)

# Timed community challenge endpoints
app.include_router(
    community_challenges.router,
    prefix=f"{ADMIN_PREFIX}/challenges",
    tags=["Community Challenges"]
)

# Bulk creation template endpoints
app.include_router(
    templates.router,
    prefix=f"{ADMIN_PREFIX}/bulk-template",
    tags=["Templates"]
)

# User directory endpoints
app.include_router(
    users.router,
    prefix=f"{ADMIN_PREFIX}/users",
    tags=["Users"]
)

# Credit ledger endpoints
app.include_router(
    credits.router,
    prefix=f"{ADMIN_PREFIX}/credits",
    tags=["Credits"]
)

# Deep link pages and app association (served from the site root)
app.include_router(
    deep_links.router,
    tags=["Deep Links"]
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """
    Root endpoint - returns API info.
    """
    return {
        "name": "OMR Hub Admin API",
        "version": __version__,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
