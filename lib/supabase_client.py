# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides the lookups shared by several admin resources:
# - Single rows by ID
# - Profile summaries for attendees, hosts and enrolled users
# - Exact row counts for related tables
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   exercise = SupabaseClient.fetch_by_id("exercises", exercise_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Iterable
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.utils import normalize_uuid

# Set up logging for this module
logger = logging.getLogger(__name__)

# Columns returned whenever a profile is attached to another record
PROFILE_SUMMARY_COLUMNS = "id, first_name, last_name, nickname, avatar_url"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages: what failed and how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        profiles = SupabaseClient.fetch_profiles_map(["550e8400-..."])
        name = profiles["550e8400-..."]["first_name"]
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Every caller has already passed the admin guard.

        Returns:
            Client: Supabase client instance

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    # -------------------------------------------------------------------------
    # Row Lookups
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_by_id(
        cls,
        table: str,
        record_id: str | UUID,
        columns: str = "*",
        filters: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """
        Fetch a single row by ID.

        Args:
            table: Table name
            record_id: Row UUID
            columns: PostgREST column list
            filters: Extra equality predicates (e.g. a parent ID)

        Returns:
            Row dict, or None if no row matches every predicate
        """
        client = cls.get_client()
        query = client.table(table).select(columns).eq("id", normalize_uuid(record_id))
        for column, value in (filters or {}).items():
            query = query.eq(column, value)

        response = query.limit(1).execute()
        rows = response.data or []
        return rows[0] if rows else None

    @classmethod
    def count_rows(cls, table: str, column: str, value: str | UUID) -> int:
        """Exact count of rows in `table` where `column` equals `value`."""
        client = cls.get_client()
        response = (
            client.table(table)
            .select("id", count="exact")
            .eq(column, normalize_uuid(value))
            .execute()
        )
        return response.count or 0

    @classmethod
    def fetch_in(
        cls,
        table: str,
        column: str,
        values: Iterable[str | None],
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """
        Fetch every row whose `column` is one of `values`.

        No query is issued for an empty set of values.
        """
        unique_values = sorted({normalize_uuid(v) for v in values if v})
        if not unique_values:
            return []

        client = cls.get_client()
        response = (
            client.table(table)
            .select(columns)
            .in_(column, unique_values)
            .execute()
        )
        return response.data or []

    # -------------------------------------------------------------------------
    # Row Mutations
    # -------------------------------------------------------------------------

    @classmethod
    def insert_row(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert one row and return it as stored.

        Raises:
            SupabaseClientError: If the insert returns no row
        """
        client = cls.get_client()
        response = client.table(table).insert(data).execute()

        if not response.data:
            raise SupabaseClientError(
                message=f"Insert into {table} returned no data",
                code="INSERT_FAILED",
            )
        return response.data[0]

    @classmethod
    def update_rows(
        cls,
        table: str,
        data: dict[str, Any],
        filters: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """
        Update every row matching all equality `filters`.

        Returns:
            The updated rows (empty when nothing matched)
        """
        client = cls.get_client()
        query = client.table(table).update(data)
        for column, value in filters.items():
            query = query.eq(column, normalize_uuid(value))

        response = query.execute()
        return response.data or []

    @classmethod
    def delete_rows(cls, table: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        """
        Delete every row matching all equality `filters`.

        Returns:
            The deleted rows (empty when nothing matched)
        """
        client = cls.get_client()
        query = client.table(table).delete()
        for column, value in filters.items():
            query = query.eq(column, normalize_uuid(value))

        response = query.execute()
        return response.data or []

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_profiles_map(
        cls,
        user_ids: Iterable[str | None],
        columns: str = PROFILE_SUMMARY_COLUMNS,
    ) -> dict[str, dict[str, Any]]:
        """
        Fetch profile summaries for a set of users.

        Duplicate and empty IDs are ignored; no query is issued when nothing
        remains.

        Returns:
            Mapping of user ID to profile dict
        """
        unique_ids = sorted({normalize_uuid(uid) for uid in user_ids if uid})
        if not unique_ids:
            return {}

        client = cls.get_client()
        response = (
            client.table("profiles")
            .select(columns)
            .in_("id", unique_ids)
            .execute()
        )

        profiles = {row["id"]: row for row in (response.data or [])}
        logger.debug(f"Fetched {len(profiles)} profiles for {len(unique_ids)} users")
        return profiles
