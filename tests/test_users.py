# =============================================================================
# tests/test_users.py - User Directory Tests
# =============================================================================
# This module contains tests for:
# - Directory listing with emails, credits and subscriptions
# - Email batching and failed batches
# - The member detail view
# - Profile image URLs
# =============================================================================

from datetime import timedelta

import pytest

from core.services.user_service import EMAIL_BATCH_SIZE, UserService
from lib.utils import today
from tests.conftest import ADMIN_ID, MEMBER_ID

BASE = "/api/admin/users"


def _emails_from(params):
    return [{"user_id": uid, "email": f"{uid[:4]}@omrhub.test"} for uid in params["user_ids"]]


class TestListUsers:
    """Test GET /api/admin/users."""

    def test_directory_entry(self, client, fake_supabase):
        """Test that each member carries email, credits and subscription end."""
        soon = (today() + timedelta(days=30)).isoformat()
        later = (today() + timedelta(days=60)).isoformat()
        expired = (today() - timedelta(days=1)).isoformat()

        fake_supabase.seed("profiles", {"id": MEMBER_ID, "first_name": "Sam", "is_guest": None})
        fake_supabase.seed("credits", {"user_id": MEMBER_ID, "balance": 5})
        fake_supabase.seed("pt_credits", {"user_id": MEMBER_ID, "balance": 2})
        fake_supabase.seed(
            "unlimited_subscriptions",
            {"user_id": MEMBER_ID, "end_date": soon},
            {"user_id": MEMBER_ID, "end_date": later},
            {"user_id": MEMBER_ID, "end_date": expired},
        )
        fake_supabase.rpc_handlers["get_user_emails_batch"] = _emails_from

        response = client.get(BASE)

        assert response.status_code == 200
        [user] = response.json()["users"]
        assert user["email"] == "2222@omrhub.test"
        assert user["circuits_credits"] == 5
        assert user["pt_credits"] == 2
        assert user["joint_pt_credits"] == 0
        assert user["subscription_end_date"] == later
        assert user["is_guest"] is False

    def test_failed_email_lookup_still_lists(self, client, fake_supabase):
        """Test that an email RPC failure leaves email null but lists users."""
        fake_supabase.seed("profiles", {"id": MEMBER_ID, "first_name": "Sam"})

        response = client.get(BASE)

        assert response.status_code == 200
        assert response.json()["users"][0]["email"] is None


class TestFetchEmails:
    """Test UserService.fetch_emails batching."""

    def test_batches_and_skips_failures(self, fake_supabase):
        """Test that users are looked up in batches and a failed batch is skipped."""
        user_ids = [f"user-{i:04d}" for i in range(EMAIL_BATCH_SIZE * 2 + 5)]
        batches = []

        def handler(params):
            batches.append(len(params["user_ids"]))
            if len(batches) == 2:
                raise RuntimeError("statement timeout")
            return [{"user_id": uid, "email": f"{uid}@x.test"} for uid in params["user_ids"]]

        fake_supabase.rpc_handlers["get_user_emails_batch"] = handler

        emails = UserService.fetch_emails(user_ids)

        assert batches == [EMAIL_BATCH_SIZE, EMAIL_BATCH_SIZE, 5]
        assert len(emails) == EMAIL_BATCH_SIZE + 5
        assert user_ids[EMAIL_BATCH_SIZE] not in emails


class TestUserDetail:
    """Test GET /api/admin/users/{id}."""

    @pytest.fixture
    def member(self, fake_supabase):
        past = (today() - timedelta(days=3)).isoformat() + "T10:00:00+00:00"
        future = (today() + timedelta(days=3)).isoformat() + "T10:00:00+00:00"

        fake_supabase.seed("profiles", {"id": MEMBER_ID, "first_name": "Sam"})
        fake_supabase.seed("joint_pt_credits", {"user_id": MEMBER_ID, "balance": 1})
        fake_supabase.seed(
            "activities",
            {"title": "Old PT", "host_user_id": MEMBER_ID, "start_at": past},
            {"title": "Next PT", "created_by": MEMBER_ID, "start_at": future},
            {"title": "Not theirs", "host_user_id": ADMIN_ID, "start_at": future},
        )
        events = fake_supabase.seed(
            "events",
            {"title": "Past Race", "start_at": past, "end_at": past},
            {"title": "Next Race", "start_at": future},
        )
        fake_supabase.seed(
            "event_attendance",
            *[{"event_id": e["id"], "user_id": MEMBER_ID, "status": "attending"} for e in events],
        )
        [workout] = fake_supabase.seed("workouts", {"name": "Leg Day", "user_id": ADMIN_ID})
        fake_supabase.seed("workout_assignments", {
            "workout_id": workout["id"], "assigned_to_user_id": MEMBER_ID,
        })
        [community] = fake_supabase.seed("community_challenges", {"title": "Plank Off"})
        fake_supabase.seed("community_challenge_submissions", {
            "challenge_id": community["id"], "user_id": MEMBER_ID, "value": 180,
        })

    def test_detail(self, client, member):
        """Test the member page sections."""
        response = client.get(f"{BASE}/{MEMBER_ID}")

        assert response.status_code == 200
        body = response.json()
        assert body["profile"]["first_name"] == "Sam"
        assert body["credits"] == {"circuits": 0, "pt": 0, "joint_pt": 1}
        assert [a["title"] for a in body["activities"]["past"]] == ["Old PT"]
        assert [a["title"] for a in body["activities"]["upcoming"]] == ["Next PT"]
        assert [e["title"] for e in body["events"]["past"]] == ["Past Race"]
        assert [e["title"] for e in body["events"]["upcoming"]] == ["Next Race"]
        assert len(body["events"]["all"]) == 2
        assert body["events"]["all"][0]["attendance_count"] == 1
        assert body["workouts"] == []
        assert body["assigned_workouts"][0]["workout"]["name"] == "Leg Day"
        assert body["challenges"][0]["challenge"]["title"] == "Plank Off"

    def test_unknown_user(self, client):
        """Test that a member without a profile is a 404."""
        assert client.get(f"{BASE}/nobody").status_code == 404


class TestProfileImage:
    """Test GET /api/admin/users/profile-image."""

    def test_signed_from_avatars(self, client, fake_supabase):
        """Test that avatars are signed from the avatars bucket."""
        fake_supabase.storage.buckets["avatars"]["u/1.jpg"] = b"jpeg"

        response = client.get(f"{BASE}/profile-image", params={"path": "u/1.jpg"})

        assert response.status_code == 200
        assert "/object/sign/avatars/u/1.jpg" in response.json()["url"]

    def test_full_url_passthrough(self, client, fake_supabase):
        """Test that an absolute avatar URL is returned unchanged."""
        url = "https://lh3.googleusercontent.com/a/photo.jpg"

        assert client.get(f"{BASE}/profile-image", params={"path": url}).json() == {"url": url}
        assert fake_supabase.storage.calls == []
