# =============================================================================
# core/services/credit_service.py - Credit Ledger Business Logic
# =============================================================================
# Lists credit transactions newest first, joined in memory with the member's
# profile and the activity the credit was spent on.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from core.models.credit import CreditType
from app.exceptions import BackendError

logger = logging.getLogger(__name__)

ACTIVITIES_TABLE = "activities"

TRANSACTION_COLUMNS = "id, user_id, amount, activity_id, description, created_at"

UNKNOWN_USER = "Unknown User"


def _user_name(profile: dict[str, Any] | None) -> str:
    if not profile:
        return UNKNOWN_USER
    name = f"{profile.get('first_name') or ''} {profile.get('last_name') or ''}".strip()
    return name or UNKNOWN_USER


class CreditService:
    """Service for the credit ledgers."""

    @staticmethod
    def list_transactions(credit_type: CreditType = CreditType.CIRCUITS) -> list[dict[str, Any]]:
        """
        List every transaction in one ledger.

        Each entry carries user_name and avatar_url from the member's profile,
        and activity_name / activity_date / activity_type from the linked
        activity. Without an activity, activity_name falls back to the
        transaction description, then "N/A".
        """
        client = SupabaseClient.get_client()
        table = credit_type.ledger_table

        try:
            transactions = (
                client.table(table)
                .select(TRANSACTION_COLUMNS)
                .order("created_at", desc=True)
                .execute()
            ).data or []

            profiles = SupabaseClient.fetch_profiles_map(t.get("user_id") for t in transactions)
            activities = {
                a["id"]: a
                for a in SupabaseClient.fetch_in(
                    ACTIVITIES_TABLE,
                    "id",
                    [t.get("activity_id") for t in transactions],
                    columns="id, title, activity_type, start_at",
                )
            }

        except Exception as e:
            logger.error(f"Failed to fetch {table}: {e}")
            raise BackendError("Failed to fetch credit transactions", e)

        logger.debug(f"Fetched {len(transactions)} {credit_type.value} credit transactions")

        result = []
        for transaction in transactions:
            profile = profiles.get(transaction.get("user_id"))
            activity = activities.get(transaction.get("activity_id")) or {}
            result.append({
                "id": transaction["id"],
                "user_id": transaction.get("user_id"),
                "user_name": _user_name(profile),
                "avatar_url": (profile or {}).get("avatar_url"),
                "amount": transaction.get("amount"),
                "activity_id": transaction.get("activity_id"),
                "activity_name": activity.get("title") or transaction.get("description") or "N/A",
                "activity_date": activity.get("start_at"),
                "activity_type": activity.get("activity_type"),
                "description": transaction.get("description"),
                "created_at": transaction.get("created_at"),
            })
        return result
