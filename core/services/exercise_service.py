# =============================================================================
# core/services/exercise_service.py - Exercise Library Business Logic
# =============================================================================
# Handles exercise CRUD operations.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso
from core.models.exercise import ExerciseCreate, ExerciseUpdate
from app.exceptions import BackendError, ResourceNotFoundError

logger = logging.getLogger(__name__)

TABLE = "exercises"


class ExerciseService:
    """
    Service for exercise library operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def list_exercises() -> list[dict[str, Any]]:
        """
        List every exercise, ordered by title.

        Returns:
            List of exercise dicts (empty when there are none)
        """
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select("*")
                .order("title")
                .execute()
            )
            return response.data or []

        except Exception as e:
            logger.error(f"Failed to list exercises: {e}")
            raise BackendError("Failed to fetch exercises", e)

    @staticmethod
    def get_exercise(exercise_id: str) -> dict[str, Any]:
        """
        Get an exercise by ID.

        Raises:
            ResourceNotFoundError: If no exercise has this ID
        """
        try:
            exercise = SupabaseClient.fetch_by_id(TABLE, exercise_id)
        except Exception as e:
            logger.error(f"Failed to fetch exercise {exercise_id}: {e}")
            raise BackendError("Failed to fetch exercise", e)

        if not exercise:
            raise ResourceNotFoundError("Exercise", exercise_id)
        return exercise

    @staticmethod
    def create_exercise(data: ExerciseCreate, admin_id: str) -> dict[str, Any]:
        """
        Create an exercise with every omitted field defaulted.

        Args:
            data: Validated request body
            admin_id: Creator, stored as created_by_user_id

        Returns:
            Created exercise dict including id and timestamps
        """
        row = data.values()
        row["created_by_user_id"] = admin_id

        try:
            exercise = SupabaseClient.insert_row(TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create exercise: {e}")
            raise BackendError("Failed to create exercise", e)

        logger.info(f"Created exercise: {exercise.get('id')} ({exercise.get('title')})")
        return exercise

    @staticmethod
    def update_exercise(exercise_id: str, data: ExerciseUpdate) -> dict[str, Any]:
        """
        Update only the fields present in the request.

        Raises:
            ResourceNotFoundError: If no exercise has this ID
        """
        changes = data.changes()
        if not changes:
            return ExerciseService.get_exercise(exercise_id)

        changes["updated_at"] = utc_now_iso()

        try:
            rows = SupabaseClient.update_rows(TABLE, changes, {"id": exercise_id})
        except Exception as e:
            logger.error(f"Failed to update exercise {exercise_id}: {e}")
            raise BackendError("Failed to update exercise", e)

        if not rows:
            raise ResourceNotFoundError("Exercise", exercise_id)

        logger.info(f"Updated exercise: {exercise_id}")
        return rows[0]

    @staticmethod
    def delete_exercise(exercise_id: str) -> None:
        """
        Delete an exercise.

        Raises:
            ResourceNotFoundError: If no exercise has this ID
        """
        try:
            deleted = SupabaseClient.delete_rows(TABLE, {"id": exercise_id})
        except Exception as e:
            logger.error(f"Failed to delete exercise {exercise_id}: {e}")
            raise BackendError("Failed to delete exercise", e)

        if not deleted:
            raise ResourceNotFoundError("Exercise", exercise_id)

        logger.info(f"Deleted exercise: {exercise_id}")
