# =============================================================================
# core/services/activity_service.py - Activity (Schedule) Business Logic
# =============================================================================
# Handles activity CRUD operations and the coach PT schedule.
#
# Activities are read back enriched with:
# - host_profile: profile summary of host_user_id (or null)
# - attendance: [{user_id, status, profiles}] from activity_attendance
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso
from core.models.activity import ATTENDING, ActivityCreate, ActivityUpdate, PT_ACTIVITY_TYPE
from app.exceptions import BackendError, ResourceNotFoundError

logger = logging.getLogger(__name__)

TABLE = "activities"
ATTENDANCE_TABLE = "activity_attendance"
MESSAGES_TABLE = "activity_messages"


def _to_storage_columns(row: dict[str, Any]) -> dict[str, Any]:
    """The API calls it route_link; the table column is route_url."""
    if "route_link" in row:
        row["route_url"] = row.pop("route_link")
    return row


class ActivityService:
    """
    Service for activity and schedule operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def attach_attendance(activities: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Attach host_profile and attendance to each activity.

        Issues one attendance query and one profile query in total.
        """
        if not activities:
            return activities

        attendance = SupabaseClient.fetch_in(
            ATTENDANCE_TABLE,
            "activity_id",
            [a["id"] for a in activities],
            columns="activity_id, user_id, status",
        )
        profiles = SupabaseClient.fetch_profiles_map(
            [row.get("user_id") for row in attendance]
            + [a.get("host_user_id") for a in activities]
        )

        by_activity: dict[str, list[dict[str, Any]]] = {}
        for row in attendance:
            by_activity.setdefault(row["activity_id"], []).append({
                "user_id": row.get("user_id"),
                "status": row.get("status"),
                "profiles": profiles.get(row.get("user_id")),
            })

        return [
            {
                **activity,
                "host_profile": profiles.get(activity.get("host_user_id")),
                "attendance": by_activity.get(activity["id"], []),
            }
            for activity in activities
        ]

    @staticmethod
    def list_activities(
        activity_type: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        List activities ordered by start time.

        Args:
            activity_type: Only activities of this type
            start_date: Only activities starting at or after this
            end_date: Only activities starting at or before this
        """
        client = SupabaseClient.get_client()

        try:
            query = client.table(TABLE).select("*")
            if activity_type:
                query = query.eq("activity_type", activity_type)
            if start_date:
                query = query.gte("start_at", start_date)
            if end_date:
                query = query.lte("start_at", end_date)

            response = query.order("start_at").execute()
            activities = ActivityService.attach_attendance(response.data or [])

        except Exception as e:
            logger.error(f"Failed to list activities: {e}")
            raise BackendError("Failed to fetch activities", e)

        logger.debug(f"Fetched {len(activities)} activities")
        return activities

    @staticmethod
    def list_pt_schedule(
        coach_id: str,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        List PT sessions hosted or created by a coach.

        Args:
            coach_id: The calling admin
            start_date: Only sessions starting at or after this
            end_date: Only sessions starting at or before this
        """
        client = SupabaseClient.get_client()

        try:
            query = (
                client.table(TABLE)
                .select("*")
                .eq("activity_type", PT_ACTIVITY_TYPE)
                .or_(f"host_user_id.eq.{coach_id},created_by.eq.{coach_id}")
            )
            if start_date:
                query = query.gte("start_at", start_date)
            if end_date:
                query = query.lte("start_at", end_date)

            response = query.order("start_at").execute()
            return ActivityService.attach_attendance(response.data or [])

        except Exception as e:
            logger.error(f"Failed to fetch PT schedule for {coach_id}: {e}")
            raise BackendError("Failed to fetch PT schedule", e)

    @staticmethod
    def get_activity(activity_id: str) -> dict[str, Any]:
        """
        Get an activity by ID with host profile and attendance.

        Raises:
            ResourceNotFoundError: If no activity has this ID
        """
        try:
            activity = SupabaseClient.fetch_by_id(TABLE, activity_id)
            if activity:
                activity = ActivityService.attach_attendance([activity])[0]
        except Exception as e:
            logger.error(f"Failed to fetch activity {activity_id}: {e}")
            raise BackendError("Failed to fetch activity", e)

        if not activity:
            raise ResourceNotFoundError("Activity", activity_id)
        return activity

    @staticmethod
    def create_activity(data: ActivityCreate, admin_id: str) -> dict[str, Any]:
        """
        Create an organised activity and book in any initial attendees.

        A failure to book attendees is logged; the activity still stands.

        Args:
            data: Validated request body
            admin_id: Creator, and host when no host is given
        """
        row = _to_storage_columns(data.values())
        attendees = row.pop("attendees")
        row["host_user_id"] = row.get("host_user_id") or admin_id
        row["created_by"] = admin_id
        row["created_by_admin"] = True
        row["kind"] = "organised"

        try:
            activity = SupabaseClient.insert_row(TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create activity: {e}")
            raise BackendError("Failed to create activity", e)

        logger.info(f"Created activity: {activity['id']} ({activity.get('title')})")

        if attendees:
            records = [
                {"activity_id": activity["id"], "user_id": user_id, "status": ATTENDING}
                for user_id in attendees
            ]
            try:
                client = SupabaseClient.get_client()
                client.table(ATTENDANCE_TABLE).insert(records).execute()
                logger.info(f"Added {len(records)} attendees to activity {activity['id']}")
            except Exception as e:
                logger.error(f"Failed to add attendees to activity {activity['id']}: {e}")

        return activity

    @staticmethod
    def update_activity(activity_id: str, data: ActivityUpdate) -> dict[str, Any]:
        """
        Update only the fields present in the request.

        Raises:
            ResourceNotFoundError: If no activity has this ID
        """
        changes = _to_storage_columns(data.changes())
        if not changes:
            return ActivityService.get_activity(activity_id)

        changes["updated_at"] = utc_now_iso()

        try:
            rows = SupabaseClient.update_rows(TABLE, changes, {"id": activity_id})
        except Exception as e:
            logger.error(f"Failed to update activity {activity_id}: {e}")
            raise BackendError("Failed to update activity", e)

        if not rows:
            raise ResourceNotFoundError("Activity", activity_id)

        logger.info(f"Updated activity: {activity_id}")
        return rows[0]

    @staticmethod
    def delete_activity(activity_id: str) -> None:
        """
        Delete an activity with its messages and attendance.

        Raises:
            ResourceNotFoundError: If no activity has this ID
        """
        try:
            SupabaseClient.delete_rows(MESSAGES_TABLE, {"activity_id": activity_id})
            SupabaseClient.delete_rows(ATTENDANCE_TABLE, {"activity_id": activity_id})
            deleted = SupabaseClient.delete_rows(TABLE, {"id": activity_id})
        except Exception as e:
            logger.error(f"Failed to delete activity {activity_id}: {e}")
            raise BackendError("Failed to delete activity", e)

        if not deleted:
            raise ResourceNotFoundError("Activity", activity_id)

        logger.info(f"Deleted activity: {activity_id}")
