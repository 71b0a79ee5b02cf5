# =============================================================================
# core/services/message_service.py - Activity Message Thread
# =============================================================================
# Messages are returned oldest first, each with the author's profile summary
# under `profiles`.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from core.models.activity import MessageCreate
from app.exceptions import BackendError, ResourceNotFoundError

logger = logging.getLogger(__name__)

TABLE = "activity_messages"
ACTIVITIES_TABLE = "activities"

COLUMNS = "id, message, created_at, user_id"


class MessageService:
    """Service for the per-activity message thread."""

    @staticmethod
    def list_messages(activity_id: str) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()

        try:
            messages = (
                client.table(TABLE)
                .select(COLUMNS)
                .eq("activity_id", activity_id)
                .order("created_at")
                .execute()
            ).data or []
            profiles = SupabaseClient.fetch_profiles_map(m.get("user_id") for m in messages)

        except Exception as e:
            logger.error(f"Failed to fetch messages for activity {activity_id}: {e}")
            raise BackendError("Failed to fetch messages", e)

        return [{**m, "profiles": profiles.get(m.get("user_id"))} for m in messages]

    @staticmethod
    def post_message(activity_id: str, data: MessageCreate, author_id: str) -> dict[str, Any]:
        """
        Post a message as the calling admin.

        Raises:
            ResourceNotFoundError: If no activity has this ID
        """
        try:
            if not SupabaseClient.fetch_by_id(ACTIVITIES_TABLE, activity_id, columns="id"):
                raise ResourceNotFoundError("Activity", activity_id)

            message = SupabaseClient.insert_row(TABLE, {
                "activity_id": activity_id,
                "user_id": author_id,
                "message": data.message,
            })
            profiles = SupabaseClient.fetch_profiles_map([author_id])

        except ResourceNotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to post message to activity {activity_id}: {e}")
            raise BackendError("Failed to create message", e)

        logger.info(f"Posted message {message['id']} to activity {activity_id}")
        return {**message, "profiles": profiles.get(author_id)}
