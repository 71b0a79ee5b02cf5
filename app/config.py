# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="dev-jwt-secret-change-in-production",
        description="Legacy HS256 secret used to verify Supabase access tokens"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Media Upload Settings
    # -------------------------------------------------------------------------

    MAX_VIDEO_UPLOAD_SIZE_MB: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Maximum exercise video upload size in MB"
    )

    MAX_IMAGE_UPLOAD_SIZE_MB: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum image upload size in MB"
    )

    SIGNED_URL_EXPIRY_SECONDS: int = Field(
        default=3600,
        ge=60,
        description="Lifetime of signed retrieval URLs"
    )

    EXERCISE_VIDEO_BUCKET: str = Field(
        default="exercise-videos",
        description="Storage bucket for exercise demonstration videos"
    )

    # Tried in order; the first bucket that accepts the request wins
    EVENT_IMAGE_BUCKETS: str = Field(
        default="activity-images,activity-image,images,event-images,avatars",
        description="Candidate buckets for event images (comma-separated, tried in order)"
    )

    AVATAR_BUCKET: str = Field(
        default="avatars",
        description="Storage bucket for profile images"
    )

    CHALLENGE_IMAGE_BUCKET: str = Field(
        default="challenges",
        description="Public storage bucket for challenge artwork"
    )

    # -------------------------------------------------------------------------
    # Challenge Settings
    # -------------------------------------------------------------------------

    DEFAULT_CALORIE_MULTIPLIER: float = Field(
        default=15,
        gt=0,
        description="Calories per pound of bodyweight when a challenge sets none"
    )

    # -------------------------------------------------------------------------
    # Native App / Deep Links
    # -------------------------------------------------------------------------

    APP_STORE_ID: str = Field(
        default="6755069825",
        description="App Store identifier used in the smart app banner"
    )

    APPLE_APP_ID: str = Field(
        default="S7NY9U87TZ.com.omrhub.app",
        description="Team ID + bundle ID claimed in apple-app-site-association"
    )

    APP_STORE_URL: str = Field(
        default="https://apps.apple.com/gb/app/omr-hub/id6755069825",
        description="Store listing offered when the app is not installed"
    )

    DEEP_LINK_SCHEME: str = Field(
        default="omrhub",
        description="Custom URL scheme registered by the native app"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://admin.omrhub.com" -> ["http://localhost:3000", "https://admin.omrhub.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def event_image_buckets_list(self) -> list[str]:
        """Event image buckets in the order they are tried."""
        return [bucket.strip() for bucket in self.EVENT_IMAGE_BUCKETS.split(",") if bucket.strip()]

    @property
    def max_video_upload_bytes(self) -> int:
        return self.MAX_VIDEO_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def max_image_upload_bytes(self) -> int:
        return self.MAX_IMAGE_UPLOAD_SIZE_MB * 1024 * 1024

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
