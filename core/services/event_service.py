# =============================================================================
# core/services/event_service.py - Event Business Logic
# =============================================================================
# Handles event CRUD operations.
#
# must_attend_all only makes sense for an event spanning several calendar
# days; for single-day events it is always stored as false.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import parse_datetime
from core.models.event import EventCreate, EventUpdate
from app.exceptions import BackendError, ResourceNotFoundError

logger = logging.getLogger(__name__)

TABLE = "events"
ATTENDANCE_TABLE = "event_attendance"
DAY_ATTENDANCE_TABLE = "event_day_attendance"

ATTENDING = "attending"


class EventService:
    """
    Service for event operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def is_multi_day(start_at: Any, end_at: Any) -> bool:
        """True when the event ends on a later calendar day than it starts."""
        if not start_at or not end_at:
            return False
        return parse_datetime(start_at).date() != parse_datetime(end_at).date()

    @staticmethod
    def attach_attendance(events: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Attach attendance and attendance_count (attending only) to each event."""
        if not events:
            return events

        attendance = SupabaseClient.fetch_in(
            ATTENDANCE_TABLE,
            "event_id",
            [e["id"] for e in events],
            columns="event_id, user_id, status",
        )
        profiles = SupabaseClient.fetch_profiles_map(row.get("user_id") for row in attendance)

        by_event: dict[str, list[dict[str, Any]]] = {}
        for row in attendance:
            by_event.setdefault(row["event_id"], []).append({
                "user_id": row.get("user_id"),
                "status": row.get("status"),
                "profiles": profiles.get(row.get("user_id")),
            })

        enriched = []
        for event in events:
            rows = by_event.get(event["id"], [])
            enriched.append({
                **event,
                "attendance": rows,
                "attendance_count": sum(1 for r in rows if r["status"] == ATTENDING),
            })
        return enriched

    @staticmethod
    def list_events(
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> list[dict[str, Any]]:
        """List events ordered by start time, optionally within a date range."""
        client = SupabaseClient.get_client()

        try:
            query = client.table(TABLE).select("*")
            if start_date:
                query = query.gte("start_at", start_date)
            if end_date:
                query = query.lte("start_at", end_date)

            response = query.order("start_at").execute()
            return EventService.attach_attendance(response.data or [])

        except Exception as e:
            logger.error(f"Failed to list events: {e}")
            raise BackendError("Failed to fetch events", e)

    @staticmethod
    def get_event(event_id: str) -> dict[str, Any]:
        """
        Get an event by ID with per-day attendance.

        Each attendance entry carries `selected_days` (list of dates) and
        `start_times` (date -> time), both null when the attendee picked no
        specific days.

        Raises:
            ResourceNotFoundError: If no event has this ID
        """
        client = SupabaseClient.get_client()

        try:
            event = SupabaseClient.fetch_by_id(TABLE, event_id)
            if not event:
                raise ResourceNotFoundError("Event", event_id)

            attendance = (
                client.table(ATTENDANCE_TABLE)
                .select("user_id, status")
                .eq("event_id", event_id)
                .execute()
            ).data or []
            day_attendance = (
                client.table(DAY_ATTENDANCE_TABLE)
                .select("user_id, day_date, start_time")
                .eq("event_id", event_id)
                .execute()
            ).data or []
            profiles = SupabaseClient.fetch_profiles_map(row.get("user_id") for row in attendance)

        except ResourceNotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to fetch event {event_id}: {e}")
            raise BackendError("Failed to fetch event", e)

        days_by_user: dict[str, list[dict[str, Any]]] = {}
        for day in day_attendance:
            days_by_user.setdefault(day["user_id"], []).append(day)

        entries = []
        for row in attendance:
            days = days_by_user.get(row.get("user_id"), [])
            start_times = {d["day_date"]: d["start_time"] for d in days if d.get("start_time")}
            entries.append({
                "user_id": row.get("user_id"),
                "status": row.get("status"),
                "selected_days": [d["day_date"] for d in days] or None,
                "start_times": start_times or None,
                "profiles": profiles.get(row.get("user_id")),
            })

        return {**event, "attendance": entries}

    @staticmethod
    def create_event(data: EventCreate, admin_id: str) -> dict[str, Any]:
        """
        Create an event.

        Args:
            data: Validated request body
            admin_id: Creator, stored as created_by
        """
        row = data.values()
        row["must_attend_all"] = data.must_attend_all and EventService.is_multi_day(
            row["start_at"], row["end_at"]
        )
        row["created_by"] = admin_id

        try:
            event = SupabaseClient.insert_row(TABLE, row)
        except Exception as e:
            logger.error(f"Failed to create event: {e}")
            raise BackendError("Failed to create event", e)

        logger.info(f"Created event: {event['id']} ({event.get('title')})")
        return event

    @staticmethod
    def update_event(event_id: str, data: EventUpdate) -> dict[str, Any]:
        """
        Update only the fields present in the request.

        must_attend_all is re-evaluated against the merged start/end dates,
        so shortening an event to one day clears it.

        Raises:
            ResourceNotFoundError: If no event has this ID
        """
        try:
            current = SupabaseClient.fetch_by_id(TABLE, event_id)
        except Exception as e:
            logger.error(f"Failed to fetch event {event_id}: {e}")
            raise BackendError("Failed to update event", e)

        if not current:
            raise ResourceNotFoundError("Event", event_id)

        changes = data.changes()
        if not changes:
            return current

        merged = {**current, **changes}
        changes["must_attend_all"] = bool(merged.get("must_attend_all")) and EventService.is_multi_day(
            merged.get("start_at"), merged.get("end_at")
        )

        try:
            rows = SupabaseClient.update_rows(TABLE, changes, {"id": event_id})
        except Exception as e:
            logger.error(f"Failed to update event {event_id}: {e}")
            raise BackendError("Failed to update event", e)

        if not rows:
            raise ResourceNotFoundError("Event", event_id)

        logger.info(f"Updated event: {event_id}")
        return rows[0]

    @staticmethod
    def delete_event(event_id: str) -> None:
        """
        Delete an event.

        Raises:
            ResourceNotFoundError: If no event has this ID
        """
        try:
            deleted = SupabaseClient.delete_rows(TABLE, {"id": event_id})
        except Exception as e:
            logger.error(f"Failed to delete event {event_id}: {e}")
            raise BackendError("Failed to delete event", e)

        if not deleted:
            raise ResourceNotFoundError("Event", event_id)

        logger.info(f"Deleted event: {event_id}")
