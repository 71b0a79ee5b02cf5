# =============================================================================
# tests/test_models.py - Pydantic Model Validation Tests
# =============================================================================
# This module contains unit tests for the request schemas in core/models/.
# Tests verify:
# - Required fields and defaults
# - Unknown fields are rejected
# - Partial updates only report the fields that were sent
# - Cross-field rules (date range, macro split)
# - Response envelopes pass stored columns through
# =============================================================================

from datetime import date

import pytest
from pydantic import ValidationError

from core.models import (
    ActivityCreate,
    ChallengeCreate,
    ChallengeStatus,
    ChallengeUpdate,
    CommunityChallengeCreate,
    CreditType,
    EnrollmentUpdate,
    ExerciseCreate,
    ExerciseUpdate,
    GoalCreate,
    VideoGender,
    WorkoutCreate,
)
from core.models.responses import CircuitAttendanceResponse, ExerciseResponse
from core.services.challenge_service import ChallengeService


# =============================================================================
# Create schemas
# =============================================================================

class TestExerciseCreate:
    """Test ExerciseCreate model validation."""

    def test_defaults(self):
        """Test that blank gender and type fall back to their defaults."""
        exercise = ExerciseCreate(title="Squat", gender="", exercise_type=None)

        assert exercise.gender == "both"
        assert exercise.exercise_type == "strength"

    def test_title_stripped(self):
        assert ExerciseCreate(title="  Squat ").title == "Squat"

    def test_unknown_field(self):
        """Test that extra fields are forbidden."""
        with pytest.raises(ValidationError) as exc_info:
            ExerciseCreate(title="Squat", created_by_user_id="someone")

        assert "created_by_user_id" in str(exc_info.value)


class TestActivityCreate:
    """Test ActivityCreate model validation."""

    def test_requires_title_and_start(self):
        with pytest.raises(ValidationError):
            ActivityCreate(title="Circuits")

    def test_defaults(self):
        activity = ActivityCreate(title="Circuits", start_at="2025-03-01T09:00:00Z", cost="")

        assert activity.cost == 1
        assert activity.activity_type == "Circuits"
        assert activity.visibility == "private"
        assert activity.attendees == []

    def test_coordinates_coerced(self):
        activity = ActivityCreate(
            title="Run", start_at="2025-03-01T09:00:00Z", location_lat="51.5", location_lng=""
        )

        assert activity.location_lat == 51.5
        assert activity.location_lng is None


class TestWorkoutCreate:
    def test_nested_entries_validated(self):
        workout = WorkoutCreate(name="Legs", exercises=[{"exercise_id": "ex-1", "reps": "10"}])

        assert workout.exercises[0].reps == 10
        assert workout.exercises[0].order_index is None

    def test_non_numeric_sets(self):
        with pytest.raises(ValidationError):
            WorkoutCreate(name="Legs", exercises=[{"exercise_id": "ex-1", "sets": "lots"}])


# =============================================================================
# Cross-field rules
# =============================================================================

class TestChallengeRules:
    """Test the challenge date range and macro split rules."""

    def test_end_before_start(self):
        with pytest.raises(ValidationError):
            ChallengeCreate(title="X", start_at="2025-03-01T00:00:00Z", end_at="2025-02-01T00:00:00Z")

    def test_same_day_allowed(self):
        challenge = ChallengeCreate(
            title="X", start_at="2025-03-01T00:00:00Z", end_at="2025-03-01T00:00:00Z"
        )
        assert challenge.title == "X"

    def test_macro_split(self):
        with pytest.raises(ValidationError):
            ChallengeCreate(
                title="X",
                start_at="2025-03-01T00:00:00Z",
                end_at="2025-04-01T00:00:00Z",
                default_protein_percent=50,
                default_carbs_percent=50,
                default_fat_percent=10,
            )

    def test_update_checks_only_supplied_dates(self):
        """Test that an update with one date skips the range check."""
        update = ChallengeUpdate(end_at="2020-01-01T00:00:00Z")
        assert update.changes() == {"end_at": "2020-01-01T00:00:00Z"}

    def test_goal_macro_split(self):
        with pytest.raises(ValidationError):
            GoalCreate(
                goal_name="Cut", calorie_adjustment=-500,
                protein_percent=40, carbs_percent=40, fat_percent=40,
            )


class TestChallengeStatus:
    """Test ChallengeService.status_of."""

    CHALLENGE = {"start_at": "2025-03-01T00:00:00+00:00", "end_at": "2025-03-31T23:00:00+00:00"}

    @pytest.mark.parametrize("on,expected", [
        ("2025-02-28", ChallengeStatus.UPCOMING),
        ("2025-03-01", ChallengeStatus.ACTIVE),
        ("2025-03-31", ChallengeStatus.ACTIVE),
        ("2025-04-01", ChallengeStatus.PAST),
    ])
    def test_status(self, on, expected):
        assert ChallengeService.status_of(self.CHALLENGE, date.fromisoformat(on)) == expected

    def test_open_ended(self):
        """Test that a challenge without an end date never becomes past."""
        challenge = {"start_at": "2025-03-01T00:00:00+00:00", "end_at": None}

        assert ChallengeService.status_of(challenge, date(2030, 1, 1)) == ChallengeStatus.ACTIVE
        assert ChallengeService.status_of(challenge, date(2025, 2, 1)) == ChallengeStatus.UPCOMING


# =============================================================================
# Partial updates
# =============================================================================

class TestPartialUpdates:
    """Test the changes() contract of update schemas."""

    def test_only_sent_fields(self):
        """Test that omitted fields are not reported as changes."""
        assert ExerciseUpdate(description="New").changes() == {"description": "New"}

    def test_explicit_null_reported(self):
        """Test that an explicit null clears the field."""
        assert ExerciseUpdate(description=None).changes() == {"description": None}

    def test_empty_update(self):
        assert ExerciseUpdate().changes() == {}

    @pytest.mark.parametrize("field", ["title", "is_custom"])
    def test_required_fields_cannot_be_cleared(self, field):
        with pytest.raises(ValidationError):
            ExerciseUpdate(**{field: None})

    def test_enrollment_status_not_updatable(self):
        """Test that status can only change through approval."""
        with pytest.raises(ValidationError):
            EnrollmentUpdate(status="onboarded")

    def test_video_gender_values(self):
        assert {g.value for g in VideoGender} == {"male", "female"}


class TestCommunityChallengeCreate:
    """Test community challenge date handling."""

    def test_timestamp_reduced_to_day(self):
        """Test that a timestamp keeps only its calendar day."""
        model = CommunityChallengeCreate(
            title="Plank", challenge_type="plank",
            start_date="2025-03-10T18:30:00Z", end_date="2025-03-10",
        )

        assert model.values()["start_date"] == "2025-03-10"

    def test_end_before_start(self):
        """Test that the end day may not precede the start day."""
        with pytest.raises(ValidationError):
            CommunityChallengeCreate(
                title="Plank", challenge_type="plank",
                start_date="2025-03-10", end_date="2025-03-09",
            )


class TestCreditType:
    """Test the credit type to ledger mapping."""

    @pytest.mark.parametrize("credit_type,table", [
        ("circuits", "credit_transactions"),
        ("pt", "pt_credit_transactions"),
        ("partner-pt", "joint_pt_credit_transactions"),
    ])
    def test_ledger_table(self, credit_type, table):
        assert CreditType(credit_type).ledger_table == table


class TestResponseModels:
    """Test the response envelopes."""

    def test_record_keeps_every_column(self):
        """Test that columns beyond id survive serialisation."""
        envelope = ExerciseResponse.model_validate({
            "exercise": {"id": "e1", "title": "Squat", "video_male": None, "sets": 4},
        })

        assert envelope.model_dump() == {
            "exercise": {"id": "e1", "title": "Squat", "video_male": None, "sets": 4},
        }

    def test_circuit_report_uses_camel_case(self):
        """Test that the attendance report serialises with camelCase keys."""
        report = CircuitAttendanceResponse.model_validate({
            "attendance_data": [{
                "day": "Monday",
                "time_slot": "6:30 AM",
                "date": "2025-03-03T06:30:00+00:00",
                "activities": [{
                    "id": "a1", "title": "Circuits", "start_at": "2025-03-03T06:30:00+00:00",
                    "end_at": None, "location_name": "Park", "attendance_count": 2,
                }],
                "total_attendance": 2,
            }],
            "summary": {"total_sessions": 1, "total_attendance": 2, "average_attendance": 2.0},
        })

        body = report.model_dump(by_alias=True)
        slot = body["attendanceData"][0]
        assert slot["timeSlot"] == "6:30 AM"
        assert slot["totalAttendance"] == 2
        assert slot["activities"][0]["attendanceCount"] == 2
        assert slot["activities"][0]["start_at"] == "2025-03-03T06:30:00+00:00"
        assert slot["activities"][0]["location_name"] == "Park"
        assert body["summary"]["averageAttendance"] == 2.0

    def test_openapi_documents_envelopes(self, anonymous_client):
        """Test that list and single-record routes publish their response schemas."""
        schema = anonymous_client.get("/openapi.json").json()

        def response_ref(path, method):
            content = schema["paths"][path][method]["responses"]["200"]["content"]
            return content["application/json"]["schema"]["$ref"].rsplit("/", 1)[-1]

        assert response_ref("/api/admin/exercises", "get") == "ExerciseListResponse"
        assert response_ref("/api/admin/exercises/{exercise_id}", "get") == "ExerciseResponse"
        assert response_ref("/api/admin/credits", "get") == "CreditTransactionListResponse"
        assert "example" in schema["components"]["schemas"]["Record"]
