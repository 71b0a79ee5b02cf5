# =============================================================================
# core/services/goal_service.py - Challenge Goal Business Logic
# =============================================================================
# Goals belong to a challenge; every lookup and mutation is scoped by both
# the goal ID and the parent challenge ID.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from core.models.challenge import GoalCreate, GoalUpdate
from app.exceptions import BackendError, ResourceNotFoundError

logger = logging.getLogger(__name__)

TABLE = "challenge_goals"


class GoalService:
    """Service for challenge goal operations."""

    @staticmethod
    def list_goals(challenge_id: str) -> list[dict[str, Any]]:
        """List a challenge's goals in display order."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select("*")
                .eq("challenge_id", challenge_id)
                .order("display_order")
                .execute()
            )
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to list goals for challenge {challenge_id}: {e}")
            raise BackendError("Failed to fetch goals", e)

    @staticmethod
    def get_goal(challenge_id: str, goal_id: str) -> dict[str, Any]:
        """
        Get a goal of a challenge.

        Raises:
            ResourceNotFoundError: If the goal does not exist on this challenge
        """
        try:
            goal = SupabaseClient.fetch_by_id(
                TABLE, goal_id, filters={"challenge_id": challenge_id}
            )
        except Exception as e:
            logger.error(f"Failed to fetch goal {goal_id}: {e}")
            raise BackendError("Failed to fetch goal", e)

        if not goal:
            raise ResourceNotFoundError("Goal", goal_id)
        return goal

    @staticmethod
    def create_goal(challenge_id: str, data: GoalCreate) -> dict[str, Any]:
        """Create a goal on a challenge."""
        row = data.values()
        row["challenge_id"] = challenge_id
        if row.get("display_order") is None:
            row["display_order"] = 0

        try:
            goal = SupabaseClient.insert_row(TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create goal for challenge {challenge_id}: {e}")
            raise BackendError("Failed to create goal", e)

        logger.info(f"Created goal: {goal['id']} on challenge {challenge_id}")
        return goal

    @staticmethod
    def update_goal(challenge_id: str, goal_id: str, data: GoalUpdate) -> dict[str, Any]:
        """
        Update only the fields present in the request.

        Raises:
            ResourceNotFoundError: If the goal does not exist on this challenge
        """
        changes = data.changes()
        if not changes:
            return GoalService.get_goal(challenge_id, goal_id)

        try:
            rows = SupabaseClient.update_rows(
                TABLE, changes, {"id": goal_id, "challenge_id": challenge_id}
            )
        except Exception as e:
            logger.error(f"Failed to update goal {goal_id}: {e}")
            raise BackendError("Failed to update goal", e)

        if not rows:
            raise ResourceNotFoundError("Goal", goal_id)

        logger.info(f"Updated goal: {goal_id}")
        return rows[0]

    @staticmethod
    def delete_goal(challenge_id: str, goal_id: str) -> None:
        """
        Delete a goal of a challenge.

        Raises:
            ResourceNotFoundError: If the goal does not exist on this challenge
        """
        try:
            deleted = SupabaseClient.delete_rows(
                TABLE, {"id": goal_id, "challenge_id": challenge_id}
            )
        except Exception as e:
            logger.error(f"Failed to delete goal {goal_id}: {e}")
            raise BackendError("Failed to delete goal", e)

        if not deleted:
            raise ResourceNotFoundError("Goal", goal_id)

        logger.info(f"Deleted goal: {goal_id}")
