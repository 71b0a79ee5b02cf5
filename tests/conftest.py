# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Replaces the Supabase client with an in-memory fake
# - Provides an admin identity and an authenticated TestClient
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from unittest.mock import patch
from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from app.auth import AdminIdentity, require_admin
from app.main import app
from tests.fakes import FakeSupabase

ADMIN_ID = "11111111-1111-1111-1111-111111111111"
MEMBER_ID = "22222222-2222-2222-2222-222222222222"

DEFAULT_BUCKETS = ["exercise-videos", "avatars", "challenges"]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_supabase():
    """In-memory Supabase client installed for the duration of a test."""
    fake = FakeSupabase(buckets=DEFAULT_BUCKETS)
    with patch("lib.supabase_client.SupabaseClient.get_client", return_value=fake):
        yield fake


@pytest.fixture
def admin():
    """The administrator every authenticated test request runs as."""
    return AdminIdentity(
        id=UUID(ADMIN_ID),
        email="coach@omrhub.test",
        first_name="Olly",
        last_name="Marsh",
    )


@pytest.fixture
def client(fake_supabase, admin):
    """TestClient with the admin guard resolved to `admin`."""
    app.dependency_overrides[require_admin] = lambda: admin
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(fake_supabase):
    """TestClient that goes through the real admin guard."""
    app.dependency_overrides.clear()
    with TestClient(app) as test_client:
        yield test_client
