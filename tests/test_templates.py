# =============================================================================
# tests/test_templates.py - Bulk Creation Template Tests
# =============================================================================

from tests.conftest import ADMIN_ID, MEMBER_ID

BASE = "/api/admin/bulk-template"


class TestBulkTemplate:
    """Test GET and POST /api/admin/bulk-template."""

    def test_none_saved(self, client):
        """Test that an admin without a template gets null."""
        response = client.get(BASE)

        assert response.status_code == 200
        assert response.json() == {"template": None}

    def test_second_save_updates_in_place(self, client, fake_supabase):
        """Test that saving twice keeps a single row with the latest data."""
        first = [{"day": "monday", "time": "06:30", "activity_type": "Circuits"}]
        second = [{"day": "tuesday", "time": "18:00", "activity_type": "PT"}]

        created = client.post(BASE, json={"template_data": first}).json()["template"]
        updated = client.post(BASE, json={"template_data": second}).json()["template"]

        rows = fake_supabase.rows("bulk_creation_templates", user_id=ADMIN_ID)
        assert len(rows) == 1
        assert updated["id"] == created["id"]
        assert rows[0]["template_data"] == second
        assert client.get(BASE).json()["template"]["template_data"] == second

    def test_latest_of_several_wins(self, client, fake_supabase):
        """Test that the most recently updated row is read and is the one saved to."""
        older, newer = fake_supabase.seed(
            "bulk_creation_templates",
            {"user_id": ADMIN_ID, "template_data": [{"day": "monday"}],
             "updated_at": "2025-01-01T08:00:00+00:00"},
            {"user_id": ADMIN_ID, "template_data": [{"day": "friday"}],
             "updated_at": "2025-02-01T08:00:00+00:00"},
        )

        assert client.get(BASE).json()["template"]["id"] == newer["id"]

        saved = client.post(BASE, json={"template_data": [{"day": "sunday"}]}).json()["template"]

        assert saved["id"] == newer["id"]
        rows = {row["id"]: row for row in fake_supabase.rows("bulk_creation_templates")}
        assert len(rows) == 2
        assert rows[newer["id"]]["template_data"] == [{"day": "sunday"}]
        assert rows[older["id"]]["template_data"] == [{"day": "monday"}]

    def test_templates_are_per_admin(self, client, fake_supabase):
        """Test that another admin's template is neither read nor overwritten."""
        fake_supabase.seed("bulk_creation_templates", {
            "user_id": MEMBER_ID, "template_data": [{"day": "friday"}],
        })

        assert client.get(BASE).json()["template"] is None

        client.post(BASE, json={"template_data": [{"day": "monday"}]})

        assert fake_supabase.rows("bulk_creation_templates", user_id=MEMBER_ID)[0]["template_data"] == [
            {"day": "friday"}
        ]
        assert len(fake_supabase.rows("bulk_creation_templates")) == 2

    def test_template_data_required(self, client):
        """Test that template_data must be supplied as a list."""
        assert client.post(BASE, json={}).status_code == 400
        assert client.post(BASE, json={"template_data": "monday"}).status_code == 400
