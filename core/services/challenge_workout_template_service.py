# =============================================================================
# core/services/challenge_workout_template_service.py - Workout Template Logic
# =============================================================================
# Workout templates belong to a challenge; every mutation is scoped by both
# the template ID and the parent challenge ID.
#
# Templates list by fitness level, then week, with the all-weeks template
# (week_number null) ahead of the numbered weeks.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from core.models.challenge import ChallengeWorkoutTemplateCreate, ChallengeWorkoutTemplateUpdate
from app.exceptions import BackendError, ResourceNotFoundError

logger = logging.getLogger(__name__)

TABLE = "challenge_workout_templates"
CHALLENGES_TABLE = "challenges"


class ChallengeWorkoutTemplateService:
    """Service for challenge workout templates."""

    @staticmethod
    def list_templates(
        challenge_id: str,
        week_number: int | None = None,
        fitness_level: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        List a challenge's workout templates.

        Args:
            week_number: Keep that week's templates and the all-weeks ones
            fitness_level: Keep one fitness level
        """
        client = SupabaseClient.get_client()

        try:
            query = client.table(TABLE).select("*").eq("challenge_id", challenge_id)
            if week_number is not None:
                query = query.or_(f"week_number.eq.{week_number},week_number.is.null")
            if fitness_level:
                query = query.eq("fitness_level", fitness_level)

            response = (
                query.order("fitness_level")
                .order("week_number", nullsfirst=True)
                .execute()
            )
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to list workout templates for {challenge_id}: {e}")
            raise BackendError("Failed to fetch workout templates", e)

    @staticmethod
    def create_template(
        challenge_id: str,
        data: ChallengeWorkoutTemplateCreate,
    ) -> dict[str, Any]:
        """
        Add a workout template to a challenge.

        Raises:
            ResourceNotFoundError: If the challenge does not exist
        """
        row = data.values()
        row["challenge_id"] = challenge_id

        try:
            if not SupabaseClient.fetch_by_id(CHALLENGES_TABLE, challenge_id, columns="id"):
                raise ResourceNotFoundError("Challenge", challenge_id)
            template = SupabaseClient.insert_row(TABLE, row)

        except ResourceNotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to create workout template on {challenge_id}: {e}")
            raise BackendError("Failed to create workout template", e)

        logger.info(
            f"Created workout template {template['id']} "
            f"({data.fitness_level}, week {data.week_number or 'all'}) on challenge {challenge_id}"
        )
        return template

    @staticmethod
    def update_template(
        challenge_id: str,
        template_id: str,
        data: ChallengeWorkoutTemplateUpdate,
    ) -> dict[str, Any]:
        """
        Update only the fields present in the request.

        Raises:
            ResourceNotFoundError: If the template is not on this challenge
        """
        changes = data.changes()

        try:
            if not changes:
                template = SupabaseClient.fetch_by_id(
                    TABLE, template_id, filters={"challenge_id": challenge_id}
                )
                rows = [template] if template else []
            else:
                rows = SupabaseClient.update_rows(
                    TABLE, changes, {"id": template_id, "challenge_id": challenge_id}
                )
        except Exception as e:
            logger.error(f"Failed to update workout template {template_id}: {e}")
            raise BackendError("Failed to update workout template", e)

        if not rows:
            raise ResourceNotFoundError("Workout template", template_id)

        logger.info(f"Updated workout template: {template_id}")
        return rows[0]

    @staticmethod
    def delete_template(challenge_id: str, template_id: str) -> None:
        """
        Delete a workout template of a challenge.

        Raises:
            ResourceNotFoundError: If the template is not on this challenge
        """
        try:
            deleted = SupabaseClient.delete_rows(
                TABLE, {"id": template_id, "challenge_id": challenge_id}
            )
        except Exception as e:
            logger.error(f"Failed to delete workout template {template_id}: {e}")
            raise BackendError("Failed to delete workout template", e)

        if not deleted:
            raise ResourceNotFoundError("Workout template", template_id)

        logger.info(f"Deleted workout template: {template_id}")
