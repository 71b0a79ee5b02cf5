# =============================================================================
# core/services/challenge_service.py - Long-Term Challenge Business Logic
# =============================================================================
# Handles challenge CRUD operations. Only long-term challenges
# (is_long_term_challenge = true) are visible through this service.
# =============================================================================

import logging
from datetime import date
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import parse_datetime, today
from core.models.challenge import ChallengeCreate, ChallengeStatus, ChallengeUpdate
from core.models.enrollment import EnrollmentStatus
from app.config import settings
from app.exceptions import BackendError, ConflictingStateError, ResourceNotFoundError

logger = logging.getLogger(__name__)

TABLE = "challenges"
LONG_TERM = {"is_long_term_challenge": True}


class ChallengeService:
    """
    Service for long-term challenge operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def status_of(challenge: dict[str, Any], on: date | None = None) -> ChallengeStatus:
        """
        Phase of a challenge relative to a calendar date (default today).

        A challenge is active from its start date through its end date,
        both inclusive. A challenge without an end date is open-ended and
        never becomes past.
        """
        on = on or today()
        start_at = challenge.get("start_at")
        end_at = challenge.get("end_at")

        if start_at and parse_datetime(start_at).date() > on:
            return ChallengeStatus.UPCOMING
        if end_at and parse_datetime(end_at).date() < on:
            return ChallengeStatus.PAST
        return ChallengeStatus.ACTIVE

    @staticmethod
    def list_challenges(status: ChallengeStatus | None = None) -> list[dict[str, Any]]:
        """
        List long-term challenges, newest start first, with enrollment counts.

        Args:
            status: Only challenges in this phase as of today
        """
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select("*")
                .eq("is_long_term_challenge", True)
                .order("start_at", desc=True)
                .execute()
            )
            challenges = response.data or []

            if status:
                on = today()
                challenges = [
                    c for c in challenges if ChallengeService.status_of(c, on) == status
                ]

            enrollments = SupabaseClient.fetch_in(
                "challenge_enrollments",
                "challenge_id",
                [c["id"] for c in challenges],
                columns="challenge_id, status",
            )

        except Exception as e:
            logger.error(f"Failed to list challenges: {e}")
            raise BackendError("Failed to fetch challenges", e)

        counts: dict[str, dict[str, int]] = {}
        for enrollment in enrollments:
            current = counts.setdefault(
                enrollment["challenge_id"], {"total": 0, "onboarded": 0, "pending": 0}
            )
            current["total"] += 1
            if enrollment.get("status") == EnrollmentStatus.ONBOARDED.value:
                current["onboarded"] += 1
            else:
                current["pending"] += 1

        result = []
        for challenge in challenges:
            current = counts.get(challenge["id"], {"total": 0, "onboarded": 0, "pending": 0})
            result.append({
                **challenge,
                "enrollment_count": current["total"],
                "onboarded_count": current["onboarded"],
                "pending_count": current["pending"],
            })
        return result

    @staticmethod
    def get_challenge(challenge_id: str) -> dict[str, Any]:
        """
        Get a long-term challenge with enrollment, goal and community
        challenge counts.

        Raises:
            ResourceNotFoundError: If no long-term challenge has this ID
        """
        try:
            challenge = SupabaseClient.fetch_by_id(TABLE, challenge_id, filters=LONG_TERM)
            if not challenge:
                raise ResourceNotFoundError("Challenge", challenge_id)

            challenge["enrollment_count"] = SupabaseClient.count_rows(
                "challenge_enrollments", "challenge_id", challenge_id
            )
            challenge["goals_count"] = SupabaseClient.count_rows(
                "challenge_goals", "challenge_id", challenge_id
            )
            challenge["community_challenges_count"] = SupabaseClient.count_rows(
                "community_challenges", "challenge_id", challenge_id
            )

        except ResourceNotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to fetch challenge {challenge_id}: {e}")
            raise BackendError("Failed to fetch challenge", e)

        return challenge

    @staticmethod
    def create_challenge(data: ChallengeCreate, admin_id: str) -> dict[str, Any]:
        """
        Create a long-term challenge.

        Args:
            data: Validated request body (dates and macro split already checked)
            admin_id: Creator, stored as created_by
        """
        row = data.values()
        if not row.get("calorie_multiplier"):
            row["calorie_multiplier"] = settings.DEFAULT_CALORIE_MULTIPLIER
        row["is_long_term_challenge"] = True
        row["created_by"] = admin_id

        try:
            challenge = SupabaseClient.insert_row(TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create challenge: {e}")
            raise BackendError("Failed to create challenge", e)

        logger.info(f"Created challenge: {challenge['id']} ({challenge.get('title')})")
        return challenge

    @staticmethod
    def update_challenge(challenge_id: str, data: ChallengeUpdate) -> dict[str, Any]:
        """
        Update only the fields present in the request.

        Clearing calorie_multiplier (null or 0) resets it to the default.

        Raises:
            ResourceNotFoundError: If no long-term challenge has this ID
        """
        changes = data.changes()
        if not changes:
            return ChallengeService.get_challenge(challenge_id)

        if "calorie_multiplier" in changes and not changes["calorie_multiplier"]:
            changes["calorie_multiplier"] = settings.DEFAULT_CALORIE_MULTIPLIER

        try:
            rows = SupabaseClient.update_rows(
                TABLE, changes, {"id": challenge_id, **LONG_TERM}
            )
        except Exception as e:
            logger.error(f"Failed to update challenge {challenge_id}: {e}")
            raise BackendError("Failed to update challenge", e)

        if not rows:
            raise ResourceNotFoundError("Challenge", challenge_id)

        logger.info(f"Updated challenge: {challenge_id}")
        return rows[0]

    @staticmethod
    def delete_challenge(challenge_id: str) -> None:
        """
        Delete a long-term challenge that nobody is enrolled on.

        Raises:
            ConflictingStateError: If the challenge has enrollments
            ResourceNotFoundError: If no long-term challenge has this ID
        """
        try:
            enrollment_count = SupabaseClient.count_rows(
                "challenge_enrollments", "challenge_id", challenge_id
            )
            if enrollment_count > 0:
                raise ConflictingStateError("Cannot delete challenge with existing enrollments")

            deleted = SupabaseClient.delete_rows(TABLE, {"id": challenge_id, **LONG_TERM})

        except ConflictingStateError:
            raise
        except Exception as e:
            logger.error(f"Failed to delete challenge {challenge_id}: {e}")
            raise BackendError("Failed to delete challenge", e)

        if not deleted:
            raise ResourceNotFoundError("Challenge", challenge_id)

        logger.info(f"Deleted challenge: {challenge_id}")
