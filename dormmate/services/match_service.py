"""Match request workflow service."""

import logging
from typing import Any
from uuid import UUID

from supabase import AsyncClient

from dormmate.api.middleware.error_handler import AuthorizationError, NotFoundError, ValidationError
from dormmate.models.match import MatchStatus
from dormmate.schemas.match import MatchListResponse, MatchResponse
from dormmate.schemas.profile import ProfileCard
from dormmate.services.interest_service import InterestService
from dormmate.services.profile_service import ProfileService

logger = logging.getLogger(__name__)


def other_participant(match: dict[str, Any], user_id: str) -> str:
    """The participant of a match that is not ``user_id``."""
    return match["matched_user_id"] if match["user_id"] == user_id else match["user_id"]


class MatchService:
    """Service for creating, accepting and rejecting matches.

    A match is created by the requester, then accepted (status update) or
    rejected (row deletion). Either participant may appear in either slot
    when matches are listed.
    """

    def __init__(self, client: AsyncClient) -> None:
        """Initialize match service with a Supabase client."""
        self.client = client
        self.profile_service = ProfileService(client)
        self.interest_service = InterestService(client)

    async def get_match(self, match_id: UUID | str) -> dict[str, Any] | None:
        """Get a match by ID."""
        response = (
            await self.client.table("matches")
            .select("*")
            .eq("id", str(match_id))
            .maybe_single()
            .execute()
        )

        return response.data if response and response.data else None

    async def find_between(self, first: UUID | str, second: UUID | str) -> dict[str, Any] | None:
        """Find a match between two users in either direction."""
        a, b = str(first), str(second)
        response = (
            await self.client.table("matches")
            .select("*")
            .or_(f"and(user_id.eq.{a},matched_user_id.eq.{b}),and(user_id.eq.{b},matched_user_id.eq.{a})")
            .limit(1)
            .execute()
        )

        return response.data[0] if response.data else None

    async def request_match(self, user_id: UUID | str, target_id: UUID | str) -> dict[str, Any]:
        """Send a match request.

        Requesting a user that already shares a match with the caller
        returns the existing match.

        Raises:
            ValidationError: If the caller targets themselves.
        """
        if str(user_id) == str(target_id):
            raise ValidationError("You cannot match with yourself")

        existing = await self.find_between(user_id, target_id)
        if existing:
            return existing

        response = (
            await self.client.table("matches")
            .insert(
                {
                    "user_id": str(user_id),
                    "matched_user_id": str(target_id),
                    "status": MatchStatus.PENDING.value,
                }
            )
            .execute()
        )

        logger.info("Match requested: %s -> %s", user_id, target_id)
        return response.data[0]

    async def list_matches(self, user_id: UUID | str) -> MatchListResponse:
        """List the caller's matches with counterpart profile cards.

        Returns:
            MatchListResponse: Pending and accepted matches, newest first.
        """
        me = str(user_id)
        response = (
            await self.client.table("matches")
            .select("*")
            .or_(f"user_id.eq.{me},matched_user_id.eq.{me}")
            .order("created_at", desc=True)
            .execute()
        )
        rows = response.data or []

        other_ids = [other_participant(row, me) for row in rows]
        profiles = await self.profile_service.get_profiles(other_ids)
        names = await self.interest_service.get_names_by_user(other_ids)

        result = MatchListResponse()
        for row, other_id in zip(rows, other_ids):
            profile = profiles.get(other_id)
            if not profile:
                # Counterpart not visible (deleted or hidden by RLS)
                continue

            match = MatchResponse(
                id=row["id"],
                status=row["status"],
                requested_by_me=row["user_id"] == me,
                user=ProfileCard.model_validate({**profile, "interests": names.get(other_id, [])}),
            )
            if match.status == MatchStatus.ACCEPTED:
                result.accepted.append(match)
            else:
                result.pending.append(match)

        return result

    async def accept_match(self, user_id: UUID | str, match_id: UUID | str) -> dict[str, Any]:
        """Accept a pending match addressed to the caller.

        Raises:
            NotFoundError: If the match does not exist.
            AuthorizationError: If the caller is not the match target.
        """
        match = await self.get_match(match_id)
        if not match:
            raise NotFoundError("Match not found")
        if match["matched_user_id"] != str(user_id):
            raise AuthorizationError("Only the invited user can accept a match")
        if match["status"] == MatchStatus.ACCEPTED.value:
            return match

        response = (
            await self.client.table("matches")
            .update({"status": MatchStatus.ACCEPTED.value})
            .eq("id", str(match_id))
            .execute()
        )

        logger.info("Match %s accepted by %s", match_id, user_id)
        return response.data[0] if response.data else {**match, "status": MatchStatus.ACCEPTED.value}

    async def reject_match(self, user_id: UUID | str, match_id: UUID | str) -> None:
        """Reject (or withdraw) a match by deleting it.

        Raises:
            NotFoundError: If the match does not exist.
            AuthorizationError: If the caller is not a participant.
        """
        match = await self.get_match(match_id)
        if not match:
            raise NotFoundError("Match not found")
        if str(user_id) not in (match["user_id"], match["matched_user_id"]):
            raise AuthorizationError("You are not part of this match")

        await self.client.table("matches").delete().eq("id", str(match_id)).execute()
        logger.info("Match %s deleted by %s", match_id, user_id)
