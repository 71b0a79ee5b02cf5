# =============================================================================
# core/services/user_service.py - User Directory Business Logic
# =============================================================================
# Read-only views of members for the admin:
# - Directory: profiles with email, credit balances and subscription end
# - Detail: one member's credits, activities, events, workouts and
#   community challenge submissions
#
# Emails live in auth.users and are fetched through the
# get_user_emails_batch database function, in batches.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import parse_datetime, today
from app.exceptions import BackendError, ResourceNotFoundError
from core.services.event_service import EventService

logger = logging.getLogger(__name__)

DIRECTORY_COLUMNS = "id, first_name, last_name, nickname, avatar_url, created_at, is_guest"

EMAIL_BATCH_SIZE = 100

# Credit table -> key in the API response
CREDIT_TABLES = {
    "credits": "circuits",
    "pt_credits": "pt",
    "joint_pt_credits": "joint_pt",
}


def _has_ended(record: dict[str, Any], on) -> bool:
    """True when the record's last day (end_at, else start_at) is before `on`."""
    last = record.get("end_at") or record.get("start_at")
    if not last:
        return False
    return parse_datetime(last).date() < on


class UserService:
    """Service for the admin user directory."""

    @staticmethod
    def fetch_emails(user_ids: list[str]) -> dict[str, str]:
        """
        Map user IDs to emails.

        Batches that fail are logged and skipped; those users simply have
        no email in the result.
        """
        client = SupabaseClient.get_client()
        emails: dict[str, str] = {}

        for start in range(0, len(user_ids), EMAIL_BATCH_SIZE):
            batch = user_ids[start:start + EMAIL_BATCH_SIZE]
            try:
                response = client.rpc("get_user_emails_batch", {"user_ids": batch}).execute()
            except Exception as e:
                logger.error(f"Failed to fetch emails for batch of {len(batch)} (first {batch[0]}): {e}")
                continue

            for item in response.data or []:
                if item.get("user_id") and item.get("email"):
                    emails[item["user_id"]] = item["email"]

        logger.debug(f"Fetched {len(emails)} emails out of {len(user_ids)} users")
        return emails

    @staticmethod
    def _balances(table: str) -> dict[str, Any]:
        client = SupabaseClient.get_client()
        response = client.table(table).select("user_id, balance").execute()
        return {row["user_id"]: row.get("balance") for row in response.data or []}

    @staticmethod
    def list_users() -> list[dict[str, Any]]:
        """
        List every member, newest first.

        Each entry carries email, circuits_credits, pt_credits,
        joint_pt_credits, subscription_end_date and is_guest.
        """
        client = SupabaseClient.get_client()

        try:
            profiles = (
                client.table("profiles")
                .select(DIRECTORY_COLUMNS)
                .order("created_at", desc=True)
                .execute()
            ).data or []

            balances = {table: UserService._balances(table) for table in CREDIT_TABLES}

            subscriptions = (
                client.table("unlimited_subscriptions")
                .select("user_id, end_date")
                .gte("end_date", today().isoformat())
                .order("end_date", desc=True)
                .execute()
            ).data or []

        except Exception as e:
            logger.error(f"Failed to list users: {e}")
            raise BackendError("Failed to fetch users", e)

        # Latest unexpired subscription per user
        subscription_end: dict[str, str] = {}
        for sub in subscriptions:
            current = subscription_end.get(sub["user_id"])
            if current is None or sub["end_date"] > current:
                subscription_end[sub["user_id"]] = sub["end_date"]

        emails = UserService.fetch_emails([p["id"] for p in profiles])

        return [
            {
                **profile,
                "email": emails.get(profile["id"]),
                "circuits_credits": balances["credits"].get(profile["id"]) or 0,
                "pt_credits": balances["pt_credits"].get(profile["id"]) or 0,
                "joint_pt_credits": balances["joint_pt_credits"].get(profile["id"]) or 0,
                "subscription_end_date": subscription_end.get(profile["id"]),
                "is_guest": profile.get("is_guest") or False,
            }
            for profile in profiles
        ]

    @staticmethod
    def get_user_detail(user_id: str) -> dict[str, Any]:
        """
        Everything the admin sees on a member's page.

        Raises:
            ResourceNotFoundError: If the member has no profile
        """
        client = SupabaseClient.get_client()

        try:
            profile = SupabaseClient.fetch_by_id("profiles", user_id)
            if not profile:
                raise ResourceNotFoundError("User", user_id)

            credits = {}
            for table, key in CREDIT_TABLES.items():
                rows = (
                    client.table(table)
                    .select("balance")
                    .eq("user_id", user_id)
                    .limit(1)
                    .execute()
                ).data or []
                credits[key] = (rows[0].get("balance") if rows else None) or 0

            activities = (
                client.table("activities")
                .select("*")
                .or_(f"host_user_id.eq.{user_id},created_by.eq.{user_id}")
                .order("start_at", desc=True)
                .execute()
            ).data or []

            attending = (
                client.table("event_attendance")
                .select("event_id")
                .eq("user_id", user_id)
                .eq("status", "attending")
                .execute()
            ).data or []
            events = SupabaseClient.fetch_in("events", "id", [a["event_id"] for a in attending])
            events.sort(key=lambda e: e.get("start_at") or "", reverse=True)
            events = [
                {k: v for k, v in event.items() if k != "attendance"}
                for event in EventService.attach_attendance(events)
            ]

            workouts = (
                client.table("workouts")
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            ).data or []

            assignments = (
                client.table("workout_assignments")
                .select("*")
                .eq("assigned_to_user_id", user_id)
                .order("assigned_at", desc=True)
                .execute()
            ).data or []
            assigned = {
                w["id"]: w
                for w in SupabaseClient.fetch_in(
                    "workouts", "id", [a.get("workout_id") for a in assignments]
                )
            }

            submissions = (
                client.table("community_challenge_submissions")
                .select("*")
                .eq("user_id", user_id)
                .order("submitted_at", desc=True)
                .execute()
            ).data or []
            community_challenges = {
                c["id"]: c
                for c in SupabaseClient.fetch_in(
                    "community_challenges", "id", [s.get("challenge_id") for s in submissions]
                )
            }

        except ResourceNotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to fetch user detail for {user_id}: {e}")
            raise BackendError("Failed to fetch user details", e)

        on = today()
        return {
            "profile": profile,
            "credits": credits,
            "activities": {
                "past": [a for a in activities if _has_ended(a, on)],
                "upcoming": [a for a in activities if not _has_ended(a, on)],
            },
            "events": {
                "past": [e for e in events if _has_ended(e, on)],
                "upcoming": [e for e in events if not _has_ended(e, on)],
                "all": events,
            },
            "workouts": workouts,
            "assigned_workouts": [
                {**a, "workout": assigned.get(a.get("workout_id"))} for a in assignments
            ],
            "challenges": [
                {**s, "challenge": community_challenges.get(s.get("challenge_id"))}
                for s in submissions
            ],
        }
