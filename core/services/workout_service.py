# =============================================================================
# core/services/workout_service.py - Workout Business Logic
# =============================================================================
# Handles workout CRUD operations and assigning workouts to members.
#
# A workout's prescribed exercises live in workout_exercises. They are read
# back as a nested `exercises` list (ordered by order_index), each entry
# carrying its `exercise` record.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso
from core.models.workout import (
    WorkoutAssignmentCreate,
    WorkoutCreate,
    WorkoutExerciseEntry,
    WorkoutUpdate,
)
from app.exceptions import BackendError, ResourceNotFoundError

logger = logging.getLogger(__name__)

TABLE = "workouts"
EXERCISES_TABLE = "workout_exercises"
ASSIGNMENTS_TABLE = "workout_assignments"

# Prescription columns carried over when a workout is copied for a member
COPIED_EXERCISE_COLUMNS = tuple(WorkoutExerciseEntry.model_fields)


def _order_key(entry: dict[str, Any]) -> tuple[bool, int]:
    order_index = entry.get("order_index")
    return (order_index is None, order_index or 0)


class WorkoutService:
    """
    Service for workout operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def attach_exercises(workouts: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Attach the nested `exercises` list to each workout.

        Two queries regardless of how many workouts are passed in.
        """
        if not workouts:
            return workouts

        entries = SupabaseClient.fetch_in(
            EXERCISES_TABLE, "workout_id", [w["id"] for w in workouts]
        )
        exercises = {
            row["id"]: row
            for row in SupabaseClient.fetch_in(
                "exercises", "id", [e.get("exercise_id") for e in entries]
            )
        }

        by_workout: dict[str, list[dict[str, Any]]] = {}
        for entry in entries:
            nested = {**entry, "exercise": exercises.get(entry.get("exercise_id"))}
            by_workout.setdefault(entry["workout_id"], []).append(nested)

        return [
            {**workout, "exercises": sorted(by_workout.get(workout["id"], []), key=_order_key)}
            for workout in workouts
        ]

    @staticmethod
    def list_workouts() -> list[dict[str, Any]]:
        """List every workout, newest first, with nested exercises."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
            return WorkoutService.attach_exercises(response.data or [])

        except Exception as e:
            logger.error(f"Failed to list workouts: {e}")
            raise BackendError("Failed to fetch workouts", e)

    @staticmethod
    def get_workout(workout_id: str) -> dict[str, Any]:
        """
        Get a workout by ID, with nested exercises.

        Raises:
            ResourceNotFoundError: If no workout has this ID
        """
        try:
            workout = SupabaseClient.fetch_by_id(TABLE, workout_id)
            if workout:
                workout = WorkoutService.attach_exercises([workout])[0]
        except Exception as e:
            logger.error(f"Failed to fetch workout {workout_id}: {e}")
            raise BackendError("Failed to fetch workout", e)

        if not workout:
            raise ResourceNotFoundError("Workout", workout_id)
        return workout

    @staticmethod
    def _insert_exercises(workout_id: str, entries: list[WorkoutExerciseEntry]) -> None:
        """Insert prescribed exercises; order_index defaults to list position."""
        if not entries:
            return

        rows = []
        for index, entry in enumerate(entries):
            row = entry.values()
            row["workout_id"] = workout_id
            if row.get("order_index") is None:
                row["order_index"] = index
            rows.append(row)

        client = SupabaseClient.get_client()
        client.table(EXERCISES_TABLE).insert(rows).execute()
        logger.debug(f"Inserted {len(rows)} exercises into workout {workout_id}")

    @staticmethod
    def create_workout(data: WorkoutCreate, admin_id: str) -> dict[str, Any]:
        """
        Create a workout and its prescribed exercises.

        Args:
            data: Validated request body
            admin_id: Owner, stored as user_id

        Returns:
            Created workout dict with nested exercises
        """
        row = data.values()
        row.pop("exercises")
        row["user_id"] = admin_id

        try:
            workout = SupabaseClient.insert_row(TABLE, row)
            WorkoutService._insert_exercises(workout["id"], data.exercises)
            workout = WorkoutService.attach_exercises([workout])[0]
        except Exception as e:
            logger.error(f"Failed to create workout: {e}")
            raise BackendError("Failed to create workout", e)

        logger.info(f"Created workout: {workout['id']} with {len(data.exercises)} exercises")
        return workout

    @staticmethod
    def update_workout(workout_id: str, data: WorkoutUpdate) -> dict[str, Any]:
        """
        Update a workout.

        Only supplied fields are written. A supplied `exercises` list
        replaces the workout's exercises; an omitted one leaves them alone.

        Raises:
            ResourceNotFoundError: If no workout has this ID
        """
        changes = data.changes()
        if not changes:
            return WorkoutService.get_workout(workout_id)

        replace_exercises = "exercises" in changes
        changes.pop("exercises", None)
        changes["updated_at"] = utc_now_iso()

        try:
            rows = SupabaseClient.update_rows(TABLE, changes, {"id": workout_id})
            if rows and replace_exercises:
                SupabaseClient.delete_rows(EXERCISES_TABLE, {"workout_id": workout_id})
                WorkoutService._insert_exercises(workout_id, data.exercises or [])
        except Exception as e:
            logger.error(f"Failed to update workout {workout_id}: {e}")
            raise BackendError("Failed to update workout", e)

        if not rows:
            raise ResourceNotFoundError("Workout", workout_id)

        logger.info(f"Updated workout: {workout_id}")
        return WorkoutService.get_workout(workout_id)

    @staticmethod
    def delete_workout(workout_id: str) -> None:
        """
        Delete a workout and its prescribed exercises.

        Raises:
            ResourceNotFoundError: If no workout has this ID
        """
        try:
            SupabaseClient.delete_rows(EXERCISES_TABLE, {"workout_id": workout_id})
            deleted = SupabaseClient.delete_rows(TABLE, {"id": workout_id})
        except Exception as e:
            logger.error(f"Failed to delete workout {workout_id}: {e}")
            raise BackendError("Failed to delete workout", e)

        if not deleted:
            raise ResourceNotFoundError("Workout", workout_id)

        logger.info(f"Deleted workout: {workout_id}")

    @staticmethod
    def assign_workout(data: WorkoutAssignmentCreate, admin_id: str) -> dict[str, Any]:
        """
        Assign a workout to a member.

        The workout and its exercise list are copied into a new private,
        non-template workout owned by the member, and an assignment row links
        the original, the copy and the assigning admin.

        Returns:
            {"assignment": {...}, "assigned_workout": {...}}

        Raises:
            ResourceNotFoundError: If no workout has this ID
        """
        client = SupabaseClient.get_client()

        try:
            workout = SupabaseClient.fetch_by_id(TABLE, data.workout_id)
            if not workout:
                raise ResourceNotFoundError("Workout", data.workout_id)

            assigned_workout = SupabaseClient.insert_row(TABLE, {
                "user_id": data.assigned_to_user_id,
                "name": workout.get("name"),
                "description": workout.get("description"),
                "is_template": False,
                "visibility": "private",
            })

            entries = (
                client.table(EXERCISES_TABLE)
                .select("*")
                .eq("workout_id", data.workout_id)
                .order("order_index")
                .execute()
            ).data or []
            if entries:
                copies = [
                    {
                        "workout_id": assigned_workout["id"],
                        **{column: entry.get(column) for column in COPIED_EXERCISE_COLUMNS},
                    }
                    for entry in entries
                ]
                client.table(EXERCISES_TABLE).insert(copies).execute()

            assignment = SupabaseClient.insert_row(ASSIGNMENTS_TABLE, {
                "workout_id": data.workout_id,
                "assigned_to_user_id": data.assigned_to_user_id,
                "assigned_by_user_id": admin_id,
                "assigned_workout_id": assigned_workout["id"],
                "notes": data.notes,
            })

        except ResourceNotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to assign workout {data.workout_id}: {e}")
            raise BackendError("Failed to assign workout", e)

        logger.info(
            f"Assigned workout {data.workout_id} to {data.assigned_to_user_id} "
            f"as {assigned_workout['id']} ({len(entries)} exercises)"
        )
        return {"assignment": assignment, "assigned_workout": assigned_workout}
