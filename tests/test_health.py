# =============================================================================
# tests/test_health.py - Health Endpoint Tests
# =============================================================================
# The default fake has the exercise-videos, avatars and challenges buckets;
# avatars doubles as the event image bucket.
# =============================================================================

from app import __version__

READY = "/api/v1/health/ready"


class TestHealth:
    """Test the /api/v1/health endpoints."""

    def test_health(self, anonymous_client, fake_supabase):
        """Test that the basic health check reports the version without backend calls."""
        response = anonymous_client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == __version__
        assert fake_supabase.calls == []

    def test_live(self, anonymous_client):
        """Test the liveness check."""
        assert anonymous_client.get("/api/v1/health/live").json()["status"] == "alive"


class TestReadiness:
    """Test GET /api/v1/health/ready."""

    def test_ready(self, anonymous_client, fake_supabase):
        """Test that every configured bucket is checked by name."""
        body = anonymous_client.get(READY).json()

        assert body["status"] == "ready"
        assert body["database"] == "healthy"
        assert body["buckets"] == {
            "exercise-videos": "healthy",
            "avatars": "healthy",
            "challenges": "healthy",
        }
        assert body["event_image_bucket"] == "avatars"
        checked = [call["bucket"] for call in fake_supabase.storage.calls if call["op"] == "get_bucket"]
        assert checked[:3] == ["exercise-videos", "avatars", "challenges"]
        # Legacy event buckets before avatars are checked and skipped
        assert {"activity-images", "activity-image", "images", "event-images"} <= set(checked)

    def test_first_event_bucket_found(self, anonymous_client, fake_supabase):
        """Test that the event image lookup stops at the first existing bucket."""
        fake_supabase.storage.buckets["activity-image"] = {}

        body = anonymous_client.get(READY).json()

        assert body["event_image_bucket"] == "activity-image"
        checked = [call["bucket"] for call in fake_supabase.storage.calls if call["op"] == "get_bucket"]
        assert "images" not in checked

    def test_missing_bucket_degrades(self, anonymous_client, fake_supabase):
        """Test that a missing required bucket is named in the response."""
        del fake_supabase.storage.buckets["challenges"]

        body = anonymous_client.get(READY).json()

        assert body["status"] == "degraded"
        assert body["buckets"]["challenges"].startswith("missing")
        assert body["buckets"]["exercise-videos"] == "healthy"

    def test_no_event_bucket_degrades(self, anonymous_client, fake_supabase):
        """Test that the service is degraded when no event image bucket exists."""
        fake_supabase.storage.buckets = {"exercise-videos": {}, "challenges": {}}

        body = anonymous_client.get(READY).json()

        assert body["status"] == "degraded"
        assert body["event_image_bucket"] is None

    def test_degraded_when_database_down(self, anonymous_client, fake_supabase):
        """Test that a failing database marks the service degraded."""
        fake_supabase.failing_tables.add("profiles")

        body = anonymous_client.get(READY).json()

        assert body["status"] == "degraded"
        assert body["database"].startswith("unhealthy")
        assert body["buckets"]["avatars"] == "healthy"
