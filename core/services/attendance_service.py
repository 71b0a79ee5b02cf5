# =============================================================================
# core/services/attendance_service.py - Activity Attendance Business Logic
# =============================================================================
# Handles booking users on and off activities, and the Circuits attendance
# report shown on the schedule page.
#
# The report groups Circuits sessions by calendar day and start time (UTC),
# so a chart can show how each regular slot is attended over time.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import parse_datetime, round_half_up, utc_now_iso
from core.models.activity import ATTENDING, DEFAULT_ACTIVITY_TYPE, AttendeeAdd
from app.exceptions import BackendError, ResourceNotFoundError

logger = logging.getLogger(__name__)

TABLE = "activity_attendance"
ACTIVITIES_TABLE = "activities"

REPORT_COLUMNS = "id, title, start_at, end_at, location_name"


def _as_utc(value: str) -> datetime:
    moment = parse_datetime(value)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _time_slot(moment: datetime) -> str:
    """12-hour clock label, e.g. "6:30 AM"."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


def group_by_slot(
    activities: list[dict[str, Any]],
    counts: dict[str, int],
) -> list[dict[str, Any]]:
    """
    Group sessions sharing a calendar day and start time.

    Args:
        activities: Circuits sessions (id, title, start_at, ...)
        counts: Attending users per activity ID

    Returns:
        Slots in chronological order, each with its sessions and total
    """
    slots: dict[tuple[str, str], dict[str, Any]] = {}

    for activity in activities:
        moment = _as_utc(activity["start_at"])
        key = (moment.date().isoformat(), _time_slot(moment))
        attendance_count = counts.get(activity["id"], 0)

        slot = slots.get(key)
        if slot is None:
            slot = slots[key] = {
                "day": moment.strftime("%A"),
                "time_slot": key[1],
                "moment": moment,
                "activities": [],
                "total_attendance": 0,
            }

        slot["activities"].append({
            "id": activity["id"],
            "title": activity.get("title"),
            "start_at": activity["start_at"],
            "end_at": activity.get("end_at"),
            "location_name": activity.get("location_name"),
            "attendance_count": attendance_count,
        })
        slot["total_attendance"] += attendance_count

    ordered = sorted(slots.values(), key=lambda s: s["moment"])
    return [
        {**{k: v for k, v in slot.items() if k != "moment"}, "date": slot["moment"].isoformat()}
        for slot in ordered
    ]


class AttendanceService:
    """Service for activity attendance."""

    @staticmethod
    def add_attendee(activity_id: str, data: AttendeeAdd) -> dict[str, Any]:
        """
        Book a user onto an activity.

        A user already on the activity keeps their row; only the status
        changes.

        Returns:
            {user_id, status, profiles}

        Raises:
            ResourceNotFoundError: If no activity has this ID
        """
        client = SupabaseClient.get_client()

        try:
            if not SupabaseClient.fetch_by_id(ACTIVITIES_TABLE, activity_id, columns="id"):
                raise ResourceNotFoundError("Activity", activity_id)

            existing = (
                client.table(TABLE)
                .select("id")
                .eq("activity_id", activity_id)
                .eq("user_id", data.user_id)
                .limit(1)
                .execute()
            ).data or []

            if existing:
                rows = SupabaseClient.update_rows(
                    TABLE,
                    {"status": data.status, "updated_at": utc_now_iso()},
                    {"id": existing[0]["id"]},
                )
                attendance = rows[0]
                logger.info(f"Set {data.user_id} to {data.status} on activity {activity_id}")
            else:
                attendance = SupabaseClient.insert_row(TABLE, {
                    "activity_id": activity_id,
                    "user_id": data.user_id,
                    "status": data.status,
                })
                logger.info(f"Added {data.user_id} to activity {activity_id}")

            profiles = SupabaseClient.fetch_profiles_map([data.user_id])

        except ResourceNotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to add attendee to activity {activity_id}: {e}")
            raise BackendError("Failed to add attendee", e)

        return {
            "user_id": attendance["user_id"],
            "status": attendance["status"],
            "profiles": profiles.get(data.user_id),
        }

    @staticmethod
    def remove_attendee(activity_id: str, user_id: str) -> None:
        """
        Take a user off an activity.

        Raises:
            ResourceNotFoundError: If the user is not on the activity
        """
        try:
            deleted = SupabaseClient.delete_rows(
                TABLE, {"activity_id": activity_id, "user_id": user_id}
            )
        except Exception as e:
            logger.error(f"Failed to remove {user_id} from activity {activity_id}: {e}")
            raise BackendError("Failed to remove attendee", e)

        if not deleted:
            raise ResourceNotFoundError("Attendee", user_id)

        logger.info(f"Removed {user_id} from activity {activity_id}")

    @staticmethod
    def circuit_attendance() -> dict[str, Any]:
        """
        Attendance across every Circuits session.

        Returns:
            {"attendance_data": [slot, ...],
             "summary": {"total_sessions", "total_attendance", "average_attendance"}}
        """
        client = SupabaseClient.get_client()

        try:
            activities = (
                client.table(ACTIVITIES_TABLE)
                .select(REPORT_COLUMNS)
                .eq("activity_type", DEFAULT_ACTIVITY_TYPE)
                .order("start_at")
                .execute()
            ).data or []

            attendance = []
            if activities:
                attendance = (
                    client.table(TABLE)
                    .select("activity_id, user_id, status")
                    .in_("activity_id", [a["id"] for a in activities])
                    .eq("status", ATTENDING)
                    .execute()
                ).data or []

        except Exception as e:
            logger.error(f"Failed to build circuit attendance: {e}")
            raise BackendError("Failed to fetch circuit attendance", e)

        counts: dict[str, int] = {}
        for row in attendance:
            counts[row["activity_id"]] = counts.get(row["activity_id"], 0) + 1

        total_sessions = len(activities)
        total_attendance = len(attendance)
        average = total_attendance / total_sessions if total_sessions else 0

        return {
            "attendance_data": group_by_slot(activities, counts),
            "summary": {
                "total_sessions": total_sessions,
                "total_attendance": total_attendance,
                "average_attendance": round_half_up(average * 10) / 10,
            },
        }
