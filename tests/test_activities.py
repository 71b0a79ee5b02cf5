# =============================================================================
# tests/test_activities.py - Activity and PT Schedule Tests
# =============================================================================
# This module contains tests for:
# - Creating organised activities and booking attendees
# - Host profile / attendance enrichment
# - Date and type filters
# - The coach PT schedule
# - Deleting an activity with its messages and attendance
# - Adding and removing attendees, and the message thread
# - The Circuits attendance report
# =============================================================================

from tests.conftest import ADMIN_ID, MEMBER_ID

BASE = "/api/admin/activities"


class TestCreateActivity:
    """Test POST /api/admin/activities."""

    def test_defaults_and_admin_host(self, client, fake_supabase):
        """Test that an activity is organised, admin-hosted and defaulted."""
        response = client.post(BASE, json={
            "title": "Saturday Circuits",
            "start_at": "2025-03-01T09:00:00Z",
            "route_link": "https://maps.example.com/route",
        })

        assert response.status_code == 200
        activity = response.json()["activity"]
        assert activity["host_user_id"] == ADMIN_ID
        assert activity["created_by"] == ADMIN_ID
        assert activity["created_by_admin"] is True
        assert activity["kind"] == "organised"
        assert activity["activity_type"] == "Circuits"
        assert activity["cost"] == 1
        assert activity["route_url"] == "https://maps.example.com/route"
        assert "route_link" not in activity

    def test_explicit_host_kept(self, client):
        """Test that a named host is not replaced by the admin."""
        response = client.post(BASE, json={
            "title": "PT", "start_at": "2025-03-01T09:00:00Z", "host_user_id": MEMBER_ID,
        })

        assert response.json()["activity"]["host_user_id"] == MEMBER_ID

    def test_attendees_booked(self, client, fake_supabase):
        """Test that initial attendees are stored as attending."""
        response = client.post(BASE, json={
            "title": "Run Club",
            "start_at": "2025-03-01T07:00:00Z",
            "attendees": [MEMBER_ID],
        })

        activity_id = response.json()["activity"]["id"]
        [booking] = fake_supabase.rows("activity_attendance", activity_id=activity_id)
        assert booking["user_id"] == MEMBER_ID
        assert booking["status"] == "attending"

    def test_attendee_failure_keeps_activity(self, client, fake_supabase):
        """Test that a failed attendee insert does not fail the create."""
        fake_supabase.failing_tables.add("activity_attendance")

        response = client.post(BASE, json={
            "title": "Run Club",
            "start_at": "2025-03-01T07:00:00Z",
            "attendees": [MEMBER_ID],
        })

        assert response.status_code == 200
        assert len(fake_supabase.rows("activities")) == 1

    def test_missing_start_at(self, client):
        """Test that start_at is required."""
        response = client.post(BASE, json={"title": "No time"})

        assert response.status_code == 400
        assert "start_at" in response.json()["error"]


class TestReadActivities:
    """Test listing and fetching activities."""

    def test_get_enriched(self, client, fake_supabase):
        """Test that an activity comes back with host profile and attendance."""
        fake_supabase.seed(
            "profiles",
            {"id": ADMIN_ID, "first_name": "Olly", "last_name": "Marsh"},
            {"id": MEMBER_ID, "first_name": "Sam", "last_name": "Lee"},
        )
        [activity] = fake_supabase.seed("activities", {
            "title": "Circuits", "start_at": "2025-03-01T09:00:00+00:00", "host_user_id": ADMIN_ID,
        })
        fake_supabase.seed("activity_attendance", {
            "activity_id": activity["id"], "user_id": MEMBER_ID, "status": "attending",
        })

        response = client.get(f"{BASE}/{activity['id']}")

        assert response.status_code == 200
        body = response.json()["activity"]
        assert body["host_profile"]["first_name"] == "Olly"
        assert body["attendance"] == [{
            "user_id": MEMBER_ID,
            "status": "attending",
            "profiles": {"id": MEMBER_ID, "first_name": "Sam", "last_name": "Lee"},
        }]

    def test_no_attendance_is_empty_list(self, client, fake_supabase):
        """Test that an activity without bookings has an empty attendance list."""
        [activity] = fake_supabase.seed("activities", {"title": "Solo", "start_at": "2025-03-01"})

        body = client.get(f"{BASE}/{activity['id']}").json()["activity"]

        assert body["attendance"] == []
        assert body["host_profile"] is None

    def test_filters(self, client, fake_supabase):
        """Test type and date filters on the list."""
        fake_supabase.seed(
            "activities",
            {"title": "Feb", "start_at": "2025-02-10T09:00:00+00:00", "activity_type": "Circuits"},
            {"title": "Mar", "start_at": "2025-03-10T09:00:00+00:00", "activity_type": "Circuits"},
            {"title": "Mar PT", "start_at": "2025-03-11T09:00:00+00:00", "activity_type": "PT"},
        )

        response = client.get(BASE, params={
            "activity_type": "Circuits", "start_date": "2025-03-01", "end_date": "2025-03-31",
        })

        titles = [a["title"] for a in response.json()["activities"]]
        assert titles == ["Mar"]

    def test_missing_is_404(self, client):
        """Test that an unknown activity is a 404."""
        assert client.get(f"{BASE}/missing").status_code == 404


class TestUpdateDeleteActivity:
    """Test PUT and DELETE /api/admin/activities/{id}."""

    def test_partial_update(self, client, fake_supabase):
        """Test that only supplied fields change and route_link maps to route_url."""
        [activity] = fake_supabase.seed("activities", {
            "title": "Circuits", "start_at": "2025-03-01T09:00:00+00:00", "cost": 1,
        })

        response = client.put(f"{BASE}/{activity['id']}", json={"route_link": "https://r.example"})

        assert response.status_code == 200
        stored = fake_supabase.rows("activities")[0]
        assert stored["route_url"] == "https://r.example"
        assert stored["title"] == "Circuits"
        assert stored["cost"] == 1

    def test_delete_cascades(self, client, fake_supabase):
        """Test that messages and attendance are removed with the activity."""
        [activity] = fake_supabase.seed("activities", {"title": "Circuits", "start_at": "2025-03-01"})
        [other] = fake_supabase.seed("activities", {"title": "Other", "start_at": "2025-03-02"})
        fake_supabase.seed(
            "activity_attendance",
            {"activity_id": activity["id"], "user_id": MEMBER_ID, "status": "attending"},
            {"activity_id": other["id"], "user_id": MEMBER_ID, "status": "attending"},
        )
        fake_supabase.seed("activity_messages", {"activity_id": activity["id"], "body": "See you there"})

        response = client.delete(f"{BASE}/{activity['id']}")

        assert response.status_code == 200
        assert [a["id"] for a in fake_supabase.rows("activities")] == [other["id"]]
        assert fake_supabase.rows("activity_messages") == []
        assert len(fake_supabase.rows("activity_attendance")) == 1


class TestPTSchedule:
    """Test GET /api/admin/coach/pt-schedule."""

    def test_hosted_or_created_pt_only(self, client, fake_supabase):
        """Test that only PT sessions the admin hosts or created are listed."""
        fake_supabase.seed(
            "activities",
            {"title": "Hosted", "activity_type": "PT", "host_user_id": ADMIN_ID,
             "created_by": MEMBER_ID, "start_at": "2025-03-01T09:00:00+00:00"},
            {"title": "Created", "activity_type": "PT", "host_user_id": MEMBER_ID,
             "created_by": ADMIN_ID, "start_at": "2025-03-02T09:00:00+00:00"},
            {"title": "Someone else", "activity_type": "PT", "host_user_id": MEMBER_ID,
             "created_by": MEMBER_ID, "start_at": "2025-03-03T09:00:00+00:00"},
            {"title": "Circuits", "activity_type": "Circuits", "host_user_id": ADMIN_ID,
             "created_by": ADMIN_ID, "start_at": "2025-03-04T09:00:00+00:00"},
        )

        response = client.get("/api/admin/coach/pt-schedule")

        assert response.status_code == 200
        titles = [a["title"] for a in response.json()["activities"]]
        assert titles == ["Hosted", "Created"]


class TestAttendees:
    """Test POST and DELETE /api/admin/activities/{id}/attendees."""

    def test_add_attendee(self, client, fake_supabase):
        """Test that a new attendee is booked as attending with their profile."""
        fake_supabase.seed("profiles", {"id": MEMBER_ID, "first_name": "Sam", "last_name": "Lee"})
        [activity] = fake_supabase.seed("activities", {"title": "Circuits", "start_at": "2025-03-01"})

        response = client.post(f"{BASE}/{activity['id']}/attendees", json={"user_id": MEMBER_ID})

        assert response.status_code == 200
        attendance = response.json()["attendance"]
        assert attendance["user_id"] == MEMBER_ID
        assert attendance["status"] == "attending"
        assert attendance["profiles"]["first_name"] == "Sam"
        [stored] = fake_supabase.rows("activity_attendance", activity_id=activity["id"])
        assert stored["user_id"] == MEMBER_ID

    def test_existing_attendee_status_updated(self, client, fake_supabase):
        """Test that booking an already-booked user changes the status in place."""
        [activity] = fake_supabase.seed("activities", {"title": "Circuits", "start_at": "2025-03-01"})
        fake_supabase.seed("activity_attendance", {
            "activity_id": activity["id"], "user_id": MEMBER_ID, "status": "attending",
        })

        response = client.post(f"{BASE}/{activity['id']}/attendees", json={
            "user_id": MEMBER_ID, "status": "not_attending",
        })

        assert response.json()["attendance"]["status"] == "not_attending"
        assert response.json()["attendance"]["profiles"] is None
        [stored] = fake_supabase.rows("activity_attendance")
        assert stored["status"] == "not_attending"
        assert "updated_at" in stored

    def test_user_id_required(self, client, fake_supabase):
        """Test that user_id is required."""
        [activity] = fake_supabase.seed("activities", {"title": "Circuits", "start_at": "2025-03-01"})

        response = client.post(f"{BASE}/{activity['id']}/attendees", json={"status": "attending"})

        assert response.status_code == 400
        assert "user_id" in response.json()["error"]

    def test_unknown_activity_is_404(self, client, fake_supabase):
        """Test that nobody can be booked onto a missing activity."""
        response = client.post(f"{BASE}/missing/attendees", json={"user_id": MEMBER_ID})

        assert response.status_code == 404
        assert fake_supabase.rows("activity_attendance") == []

    def test_remove_attendee(self, client, fake_supabase):
        """Test that only the named user's booking is removed."""
        [activity] = fake_supabase.seed("activities", {"title": "Circuits", "start_at": "2025-03-01"})
        fake_supabase.seed(
            "activity_attendance",
            {"activity_id": activity["id"], "user_id": MEMBER_ID, "status": "attending"},
            {"activity_id": activity["id"], "user_id": ADMIN_ID, "status": "attending"},
        )

        response = client.delete(f"{BASE}/{activity['id']}/attendees", params={"user_id": MEMBER_ID})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert [r["user_id"] for r in fake_supabase.rows("activity_attendance")] == [ADMIN_ID]

    def test_remove_requires_user_id(self, client, fake_supabase):
        """Test that the user_id query parameter is required."""
        response = client.delete(f"{BASE}/some-activity/attendees")

        assert response.status_code == 400

    def test_remove_unbooked_is_404(self, client, fake_supabase):
        """Test that removing someone who is not booked is a 404."""
        response = client.delete(f"{BASE}/some-activity/attendees", params={"user_id": MEMBER_ID})

        assert response.status_code == 404


class TestMessages:
    """Test GET and POST /api/admin/activities/{id}/messages."""

    def test_list_oldest_first_with_profiles(self, client, fake_supabase):
        """Test that messages are oldest first and carry the author profile."""
        fake_supabase.seed("profiles", {"id": MEMBER_ID, "first_name": "Sam", "last_name": "Lee"})
        [activity] = fake_supabase.seed("activities", {"title": "Circuits", "start_at": "2025-03-01"})
        fake_supabase.seed(
            "activity_messages",
            {"activity_id": activity["id"], "user_id": MEMBER_ID, "message": "Second",
             "created_at": "2025-02-20T10:00:00+00:00"},
            {"activity_id": activity["id"], "user_id": MEMBER_ID, "message": "First",
             "created_at": "2025-02-19T10:00:00+00:00"},
            {"activity_id": "another", "user_id": MEMBER_ID, "message": "Elsewhere"},
        )

        response = client.get(f"{BASE}/{activity['id']}/messages")

        assert response.status_code == 200
        messages = response.json()["messages"]
        assert [m["message"] for m in messages] == ["First", "Second"]
        assert messages[0]["profiles"]["first_name"] == "Sam"

    def test_backend_failure_is_500(self, client, fake_supabase):
        """Test that a failed read is reported rather than shown as an empty thread."""
        fake_supabase.failing_tables.add("activity_messages")

        response = client.get(f"{BASE}/any/messages")

        assert response.status_code == 500

    def test_post_as_admin(self, client, fake_supabase):
        """Test that a message is stored trimmed and authored by the admin."""
        fake_supabase.seed("profiles", {"id": ADMIN_ID, "first_name": "Olly", "last_name": "Marsh"})
        [activity] = fake_supabase.seed("activities", {"title": "Circuits", "start_at": "2025-03-01"})

        response = client.post(f"{BASE}/{activity['id']}/messages", json={"message": "  Bring water  "})

        assert response.status_code == 200
        message = response.json()["message"]
        assert message["message"] == "Bring water"
        assert message["user_id"] == ADMIN_ID
        assert message["profiles"]["first_name"] == "Olly"
        [stored] = fake_supabase.rows("activity_messages")
        assert stored["activity_id"] == activity["id"]

    def test_blank_message_rejected(self, client, fake_supabase):
        """Test that a whitespace-only message is rejected."""
        [activity] = fake_supabase.seed("activities", {"title": "Circuits", "start_at": "2025-03-01"})

        response = client.post(f"{BASE}/{activity['id']}/messages", json={"message": "   "})

        assert response.status_code == 400
        assert fake_supabase.rows("activity_messages") == []


class TestCircuitAttendance:
    """Test GET /api/admin/schedule/circuit-attendance."""

    URL = "/api/admin/schedule/circuit-attendance"

    def test_grouped_by_day_and_time(self, client, fake_supabase):
        """Test that sessions sharing a start time are grouped and only attending counts."""
        early_a, early_b, evening, pt = fake_supabase.seed(
            "activities",
            {"title": "Early A", "activity_type": "Circuits", "start_at": "2025-03-03T06:30:00+00:00"},
            {"title": "Early B", "activity_type": "Circuits", "start_at": "2025-03-03T06:30:00+00:00"},
            {"title": "Evening", "activity_type": "Circuits", "start_at": "2025-03-03T18:00:00+00:00"},
            {"title": "PT", "activity_type": "PT", "start_at": "2025-03-03T06:30:00+00:00"},
        )
        fake_supabase.seed(
            "activity_attendance",
            {"activity_id": early_a["id"], "user_id": MEMBER_ID, "status": "attending"},
            {"activity_id": early_a["id"], "user_id": ADMIN_ID, "status": "attending"},
            {"activity_id": early_a["id"], "user_id": "33333333", "status": "not_attending"},
            {"activity_id": early_b["id"], "user_id": MEMBER_ID, "status": "attending"},
            {"activity_id": pt["id"], "user_id": MEMBER_ID, "status": "attending"},
        )

        response = client.get(self.URL)

        assert response.status_code == 200
        body = response.json()
        morning, night = body["attendanceData"]
        assert morning["day"] == "Monday"
        assert morning["timeSlot"] == "6:30 AM"
        assert morning["totalAttendance"] == 3
        assert [a["attendanceCount"] for a in morning["activities"]] == [2, 1]
        assert morning["activities"][0]["start_at"] == "2025-03-03T06:30:00+00:00"
        assert night["timeSlot"] == "6:00 PM"
        assert night["activities"][0]["id"] == evening["id"]
        assert night["totalAttendance"] == 0
        assert body["summary"] == {
            "totalSessions": 3,
            "totalAttendance": 3,
            "averageAttendance": 1.0,
        }

    def test_average_rounded_to_one_place(self, client, fake_supabase):
        """Test that the average attendance is rounded to one decimal place."""
        sessions = fake_supabase.seed(
            "activities",
            *[
                {"title": f"S{i}", "activity_type": "Circuits", "start_at": f"2025-03-0{i}T09:00:00+00:00"}
                for i in (1, 2, 3)
            ],
        )
        fake_supabase.seed("activity_attendance", {
            "activity_id": sessions[0]["id"], "user_id": MEMBER_ID, "status": "attending",
        })

        summary = client.get(self.URL).json()["summary"]

        assert summary["averageAttendance"] == 0.3

    def test_no_sessions(self, client, fake_supabase):
        """Test that an empty schedule gives an empty report."""
        body = client.get(self.URL).json()

        assert body["attendanceData"] == []
        assert body["summary"] == {"totalSessions": 0, "totalAttendance": 0, "averageAttendance": 0}
