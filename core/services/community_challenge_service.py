# =============================================================================
# core/services/community_challenge_service.py - Timed Challenge Business Logic
# =============================================================================
# Handles community (timed) challenges and their submissions.
#
# Within one long-term challenge, community challenges may not overlap: two
# date ranges clash when each starts on or before the other ends.
#
# Challenges are returned with `submission_count`; submissions with the
# member's profile summary under `user`.
# =============================================================================

import logging
from datetime import date
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import parse_datetime
from core.models.community_challenge import (
    CommunityChallengeCreate,
    CommunityChallengeUpdate,
    check_date_range,
)
from app.exceptions import (
    BackendError,
    ConflictingStateError,
    InvalidRequestError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

TABLE = "community_challenges"
SUBMISSIONS_TABLE = "community_challenge_submissions"
CHALLENGES_TABLE = "challenges"

OVERLAP_MESSAGE = "A community challenge already exists during this date range"


def _day(value: str | date) -> date:
    return parse_datetime(value).date() if isinstance(value, str) else value


def ranges_overlap(start: date, end: date, other_start: date, other_end: date) -> bool:
    """Inclusive whole-day overlap."""
    return start <= other_end and end >= other_start


class CommunityChallengeService:
    """Service for community (timed) challenges."""

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def attach_submission_counts(challenges: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Add submission_count to each challenge with a single query."""
        submissions = SupabaseClient.fetch_in(
            SUBMISSIONS_TABLE, "challenge_id", [c["id"] for c in challenges], columns="challenge_id"
        )
        counts: dict[str, int] = {}
        for row in submissions:
            counts[row["challenge_id"]] = counts.get(row["challenge_id"], 0) + 1

        return [{**c, "submission_count": counts.get(c["id"], 0)} for c in challenges]

    @staticmethod
    def list_for_challenge(challenge_id: str) -> list[dict[str, Any]]:
        """A long-term challenge's community challenges, latest start first."""
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select("*")
                .eq("challenge_id", challenge_id)
                .order("start_date", desc=True)
                .execute()
            )
            return CommunityChallengeService.attach_submission_counts(response.data or [])

        except Exception as e:
            logger.error(f"Failed to list community challenges for {challenge_id}: {e}")
            raise BackendError("Failed to fetch community challenges", e)

    @staticmethod
    def list_in_range(start_date: date, end_date: date) -> list[dict[str, Any]]:
        """
        Community challenges overlapping a date range, across all challenges.

        Both ends are inclusive whole days.
        """
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select("*")
                .lte("start_date", end_date.isoformat())
                .gte("end_date", start_date.isoformat())
                .order("start_date")
                .execute()
            )
            return CommunityChallengeService.attach_submission_counts(response.data or [])

        except Exception as e:
            logger.error(f"Failed to list community challenges in range: {e}")
            raise BackendError("Failed to fetch timed challenges", e)

    @staticmethod
    def get_community_challenge(
        community_id: str,
        challenge_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Get a community challenge with its submission count.

        When `challenge_id` is given the community challenge must belong to it.

        Raises:
            ResourceNotFoundError: If no matching community challenge exists
        """
        filters = {"challenge_id": challenge_id} if challenge_id else None

        try:
            community = SupabaseClient.fetch_by_id(TABLE, community_id, filters=filters)
            if community:
                community["submission_count"] = SupabaseClient.count_rows(
                    SUBMISSIONS_TABLE, "challenge_id", community_id
                )
        except Exception as e:
            logger.error(f"Failed to fetch community challenge {community_id}: {e}")
            raise BackendError("Failed to fetch community challenge", e)

        if not community:
            raise ResourceNotFoundError("Community challenge", community_id)
        return community

    @staticmethod
    def list_submissions(community_id: str) -> list[dict[str, Any]]:
        """Submissions to a community challenge, newest first, each with `user`."""
        client = SupabaseClient.get_client()

        try:
            submissions = (
                client.table(SUBMISSIONS_TABLE)
                .select("*")
                .eq("challenge_id", community_id)
                .order("submitted_at", desc=True)
                .execute()
            ).data or []
            profiles = SupabaseClient.fetch_profiles_map(s.get("user_id") for s in submissions)

        except Exception as e:
            logger.error(f"Failed to fetch submissions for {community_id}: {e}")
            raise BackendError("Failed to fetch submissions", e)

        return [{**s, "user": profiles.get(s.get("user_id"))} for s in submissions]

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    @staticmethod
    def _check_no_overlap(
        challenge_id: str,
        start: date,
        end: date,
        exclude_id: str | None = None,
    ) -> None:
        client = SupabaseClient.get_client()
        siblings = (
            client.table(TABLE)
            .select("id, start_date, end_date")
            .eq("challenge_id", challenge_id)
            .execute()
        ).data or []

        for sibling in siblings:
            if sibling["id"] == exclude_id:
                continue
            if ranges_overlap(start, end, _day(sibling["start_date"]), _day(sibling["end_date"])):
                logger.info(f"Community challenge dates clash with {sibling['id']}")
                raise ConflictingStateError(OVERLAP_MESSAGE)

    @staticmethod
    def create_community_challenge(
        challenge_id: str,
        data: CommunityChallengeCreate,
        admin_id: str,
    ) -> dict[str, Any]:
        """
        Create a community challenge inside a long-term challenge.

        Raises:
            ResourceNotFoundError: If the long-term challenge does not exist
            ConflictingStateError: If the dates overlap a sibling
        """
        row = data.values()
        row["challenge_id"] = challenge_id
        row["created_by"] = admin_id

        try:
            if not SupabaseClient.fetch_by_id(CHALLENGES_TABLE, challenge_id, columns="id"):
                raise ResourceNotFoundError("Challenge", challenge_id)

            CommunityChallengeService._check_no_overlap(
                challenge_id, data.start_date, data.end_date
            )
            community = SupabaseClient.insert_row(TABLE, row)

        except (ResourceNotFoundError, ConflictingStateError):
            raise
        except Exception as e:
            logger.error(f"Failed to create community challenge on {challenge_id}: {e}")
            raise BackendError("Failed to create community challenge", e)

        logger.info(f"Created community challenge: {community['id']} on challenge {challenge_id}")
        return community

    @staticmethod
    def update_community_challenge(
        challenge_id: str,
        community_id: str,
        data: CommunityChallengeUpdate,
    ) -> dict[str, Any]:
        """
        Update only the fields present in the request.

        Date changes are checked against the stored record, so moving only
        one end still has to keep end >= start and avoid sibling overlaps.

        Raises:
            ResourceNotFoundError: If the community challenge is not on this challenge
            ConflictingStateError: If the new dates overlap a sibling
        """
        changes = data.changes()
        current = CommunityChallengeService.get_community_challenge(community_id, challenge_id)
        if not changes:
            return current

        try:
            if "start_date" in changes or "end_date" in changes:
                start = data.start_date or _day(current["start_date"])
                end = data.end_date or _day(current["end_date"])
                try:
                    check_date_range(start, end)
                except ValueError as e:
                    raise InvalidRequestError(str(e), field="end_date")

                CommunityChallengeService._check_no_overlap(
                    challenge_id, start, end, exclude_id=community_id
                )

            rows = SupabaseClient.update_rows(
                TABLE, changes, {"id": community_id, "challenge_id": challenge_id}
            )

        except (InvalidRequestError, ConflictingStateError):
            raise
        except Exception as e:
            logger.error(f"Failed to update community challenge {community_id}: {e}")
            raise BackendError("Failed to update community challenge", e)

        if not rows:
            raise ResourceNotFoundError("Community challenge", community_id)

        logger.info(f"Updated community challenge: {community_id}")
        return rows[0]

    @staticmethod
    def delete_community_challenge(challenge_id: str, community_id: str) -> None:
        """
        Delete a community challenge.

        Raises:
            ConflictingStateError: If anyone has submitted to it
            ResourceNotFoundError: If it is not on this challenge
        """
        try:
            submissions = SupabaseClient.count_rows(SUBMISSIONS_TABLE, "challenge_id", community_id)
            if submissions:
                raise ConflictingStateError(
                    "Cannot delete community challenge with existing submissions"
                )

            deleted = SupabaseClient.delete_rows(
                TABLE, {"id": community_id, "challenge_id": challenge_id}
            )

        except ConflictingStateError:
            raise
        except Exception as e:
            logger.error(f"Failed to delete community challenge {community_id}: {e}")
            raise BackendError("Failed to delete community challenge", e)

        if not deleted:
            raise ResourceNotFoundError("Community challenge", community_id)

        logger.info(f"Deleted community challenge: {community_id}")
