# =============================================================================
# core/services/template_service.py - Bulk Creation Template Logic
# =============================================================================
# Each admin owns at most one bulk creation template. Saving looks up the
# caller's latest template and updates it in place, inserting only when the
# caller has none.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import utc_now_iso
from core.models.template import TemplateSave
from app.exceptions import BackendError

logger = logging.getLogger(__name__)

TABLE = "bulk_creation_templates"


class TemplateService:
    """Service for the per-admin bulk creation template."""

    @staticmethod
    def get_template(owner_id: str) -> dict[str, Any] | None:
        """
        Get the owner's template, most recently updated first.

        Returns:
            Template dict, or None when the owner has none
        """
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select("*")
                .eq("user_id", owner_id)
                .order("updated_at", desc=True)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch bulk template for {owner_id}: {e}")
            raise BackendError("Failed to fetch bulk template", e)

        rows = response.data or []
        return rows[0] if rows else None

    @staticmethod
    def save_template(owner_id: str, data: TemplateSave) -> dict[str, Any]:
        """
        Insert or update the owner's template.

        Returns:
            The stored template dict
        """
        existing = TemplateService.get_template(owner_id)

        try:
            if existing:
                rows = SupabaseClient.update_rows(
                    TABLE,
                    {"template_data": data.template_data, "updated_at": utc_now_iso()},
                    {"id": existing["id"]},
                )
                template = rows[0] if rows else {**existing, "template_data": data.template_data}
                logger.info(f"Updated bulk template {existing['id']} for {owner_id}")
            else:
                template = SupabaseClient.insert_row(
                    TABLE, {"user_id": owner_id, "template_data": data.template_data}
                )
                logger.info(f"Created bulk template {template.get('id')} for {owner_id}")

        except Exception as e:
            logger.error(f"Failed to save bulk template for {owner_id}: {e}")
            raise BackendError("Failed to save bulk template", e)

        return template
