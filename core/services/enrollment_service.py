# =============================================================================
# core/services/enrollment_service.py - Challenge Enrollment Business Logic
# =============================================================================
# Handles enrollment CRUD operations and approval.
#
# Nutrition targets:
#   calculated_calories = round(bodyweight_kg * 2.2 * multiplier + adjustment)
# where multiplier is the challenge's calorie_multiplier (default 15).
# Macro split and minimum steps are copied from the challenge defaults when
# the user enrolls.
#
# Every lookup and mutation by enrollment ID is also scoped by the parent
# challenge ID, so an enrollment can never be reached through another
# challenge.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import round_half_up, today
from core.models.enrollment import (
    KG_TO_LB,
    EnrollmentCreate,
    EnrollmentStatus,
    EnrollmentUpdate,
)
from app.config import settings
from app.exceptions import BackendError, ResourceNotFoundError

logger = logging.getLogger(__name__)

TABLE = "challenge_enrollments"

CHALLENGE_DEFAULT_COLUMNS = (
    "calorie_multiplier, default_protein_percent, default_carbs_percent, "
    "default_fat_percent, default_min_steps"
)


class EnrollmentService:
    """
    Service for challenge enrollment operations.

    Status flow: pending -> onboarded (via approve_enrollment only).
    """

    @staticmethod
    def calculate_calories(
        bodyweight_kg: float,
        calorie_adjustment: float | None,
        multiplier: float | None,
    ) -> int:
        """
        Daily calorie target for an enrollment.

        Example:
            calculate_calories(80, -500, 15)  # 80 * 2.2 * 15 - 500 = 2140
        """
        multiplier = multiplier or settings.DEFAULT_CALORIE_MULTIPLIER
        return round_half_up(bodyweight_kg * KG_TO_LB * multiplier + (calorie_adjustment or 0))

    @staticmethod
    def _attach_user(enrollments: list[dict[str, Any]]) -> list[dict[str, Any]]:
        profiles = SupabaseClient.fetch_profiles_map(e.get("user_id") for e in enrollments)
        return [{**e, "user": profiles.get(e.get("user_id"))} for e in enrollments]

    @staticmethod
    def _attach_user_and_goal(enrollment: dict[str, Any]) -> dict[str, Any]:
        enrollment = EnrollmentService._attach_user([enrollment])[0]
        goal = None
        if enrollment.get("goal_id"):
            goal = SupabaseClient.fetch_by_id("challenge_goals", enrollment["goal_id"])
        return {**enrollment, "goal": goal}

    @staticmethod
    def _fetch_scoped(challenge_id: str, enrollment_id: str) -> dict[str, Any] | None:
        return SupabaseClient.fetch_by_id(
            TABLE, enrollment_id, filters={"challenge_id": challenge_id}
        )

    @staticmethod
    def list_enrollments(
        challenge_id: str,
        status: EnrollmentStatus | None = None,
    ) -> list[dict[str, Any]]:
        """List a challenge's enrollments, newest first, each with its user."""
        client = SupabaseClient.get_client()

        try:
            query = client.table(TABLE).select("*").eq("challenge_id", challenge_id)
            if status:
                query = query.eq("status", status.value)

            response = query.order("enrolled_at", desc=True).execute()
            return EnrollmentService._attach_user(response.data or [])

        except Exception as e:
            logger.error(f"Failed to list enrollments for challenge {challenge_id}: {e}")
            raise BackendError("Failed to fetch enrollments", e)

    @staticmethod
    def get_enrollment(challenge_id: str, enrollment_id: str) -> dict[str, Any]:
        """
        Get an enrollment of a challenge with its user and goal.

        Raises:
            ResourceNotFoundError: If the enrollment is not on this challenge
        """
        try:
            enrollment = EnrollmentService._fetch_scoped(challenge_id, enrollment_id)
            if enrollment:
                enrollment = EnrollmentService._attach_user_and_goal(enrollment)
        except Exception as e:
            logger.error(f"Failed to fetch enrollment {enrollment_id}: {e}")
            raise BackendError("Failed to fetch enrollment", e)

        if not enrollment:
            raise ResourceNotFoundError("Enrollment", enrollment_id)
        return enrollment

    @staticmethod
    def create_enrollment(challenge_id: str, data: EnrollmentCreate) -> dict[str, Any]:
        """
        Enroll a user on a challenge as pending.

        Raises:
            ResourceNotFoundError: If the challenge does not exist
        """
        try:
            challenge = SupabaseClient.fetch_by_id(
                "challenges", challenge_id, columns=CHALLENGE_DEFAULT_COLUMNS
            )
        except Exception as e:
            logger.error(f"Failed to fetch challenge {challenge_id}: {e}")
            raise BackendError("Failed to create enrollment", e)

        if not challenge:
            raise ResourceNotFoundError("Challenge", challenge_id)

        row = data.values()
        row["calorie_adjustment"] = row.get("calorie_adjustment") or 0
        row.update({
            "challenge_id": challenge_id,
            "calculated_calories": EnrollmentService.calculate_calories(
                data.bodyweight_kg,
                row["calorie_adjustment"],
                challenge.get("calorie_multiplier"),
            ),
            "protein_percent": challenge.get("default_protein_percent"),
            "carbs_percent": challenge.get("default_carbs_percent"),
            "fat_percent": challenge.get("default_fat_percent"),
            "min_steps": challenge.get("default_min_steps"),
            "status": EnrollmentStatus.PENDING.value,
        })

        try:
            enrollment = SupabaseClient.insert_row(TABLE, row)
            enrollment = EnrollmentService._attach_user([enrollment])[0]
        except Exception as e:
            logger.error(f"Failed to create enrollment on challenge {challenge_id}: {e}")
            raise BackendError("Failed to create enrollment", e)

        logger.info(f"Enrolled user {data.user_id} on challenge {challenge_id}")
        return enrollment

    @staticmethod
    def update_enrollment(
        challenge_id: str,
        enrollment_id: str,
        data: EnrollmentUpdate,
    ) -> dict[str, Any]:
        """
        Update only the fields present in the request.

        Calories are recalculated when bodyweight or adjustment changes.

        Raises:
            ResourceNotFoundError: If the enrollment is not on this challenge
        """
        try:
            current = EnrollmentService._fetch_scoped(challenge_id, enrollment_id)
        except Exception as e:
            logger.error(f"Failed to fetch enrollment {enrollment_id}: {e}")
            raise BackendError("Failed to update enrollment", e)

        if not current:
            raise ResourceNotFoundError("Enrollment", enrollment_id)

        changes = data.changes()
        if not changes:
            return EnrollmentService.get_enrollment(challenge_id, enrollment_id)

        try:
            if "bodyweight_kg" in changes or "calorie_adjustment" in changes:
                challenge = SupabaseClient.fetch_by_id(
                    "challenges", challenge_id, columns="calorie_multiplier"
                ) or {}
                changes["calculated_calories"] = EnrollmentService.calculate_calories(
                    changes.get("bodyweight_kg", current.get("bodyweight_kg")),
                    changes.get("calorie_adjustment", current.get("calorie_adjustment")),
                    challenge.get("calorie_multiplier"),
                )

            rows = SupabaseClient.update_rows(
                TABLE, changes, {"id": enrollment_id, "challenge_id": challenge_id}
            )
            if rows:
                rows[0] = EnrollmentService._attach_user_and_goal(rows[0])

        except Exception as e:
            logger.error(f"Failed to update enrollment {enrollment_id}: {e}")
            raise BackendError("Failed to update enrollment", e)

        if not rows:
            raise ResourceNotFoundError("Enrollment", enrollment_id)

        logger.info(f"Updated enrollment: {enrollment_id}")
        return rows[0]

    @staticmethod
    def approve_enrollment(challenge_id: str, enrollment_id: str) -> dict[str, Any]:
        """
        Mark an enrollment as onboarded, starting today.

        The start date is always the approval date (UTC), whatever the
        enrollment already holds. The update matches on both IDs, so an
        enrollment of another challenge is reported as not found and left
        untouched.

        Raises:
            ResourceNotFoundError: If the enrollment is not on this challenge
        """
        changes = {
            "status": EnrollmentStatus.ONBOARDED.value,
            "start_date": today().isoformat(),
        }

        try:
            rows = SupabaseClient.update_rows(
                TABLE, changes, {"id": enrollment_id, "challenge_id": challenge_id}
            )
            if rows:
                rows[0] = EnrollmentService._attach_user([rows[0]])[0]
        except Exception as e:
            logger.error(f"Failed to approve enrollment {enrollment_id}: {e}")
            raise BackendError("Failed to approve enrollment", e)

        if not rows:
            raise ResourceNotFoundError("Enrollment", enrollment_id)

        logger.info(f"Approved enrollment {enrollment_id} on challenge {challenge_id}")
        return rows[0]

    @staticmethod
    def delete_enrollment(challenge_id: str, enrollment_id: str) -> None:
        """
        Delete an enrollment of a challenge.

        Raises:
            ResourceNotFoundError: If the enrollment is not on this challenge
        """
        try:
            deleted = SupabaseClient.delete_rows(
                TABLE, {"id": enrollment_id, "challenge_id": challenge_id}
            )
        except Exception as e:
            logger.error(f"Failed to delete enrollment {enrollment_id}: {e}")
            raise BackendError("Failed to delete enrollment", e)

        if not deleted:
            raise ResourceNotFoundError("Enrollment", enrollment_id)

        logger.info(f"Deleted enrollment: {enrollment_id}")
