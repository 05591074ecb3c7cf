"""Direct conversation business logic service."""

import asyncio
import logging
from typing import Any
from uuid import UUID

from postgrest.exceptions import APIError as PostgrestAPIError
from supabase import AsyncClient

from dormmate.api.middleware.error_handler import AuthorizationError, NotFoundError, ValidationError
from dormmate.schemas.conversation import ConversationSummary
from dormmate.schemas.profile import ProfileSummary
from dormmate.services.message_service import MessageService
from dormmate.services.profile_service import SUMMARY_COLUMNS, ProfileService

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


def canonical_pair(first: UUID | str, second: UUID | str) -> tuple[str, str]:
    """Order two user IDs so each pair maps to one conversation row."""
    a, b = str(first), str(second)
    return (a, b) if a < b else (b, a)


def unread_for(conversation: dict[str, Any], user_id: UUID | str) -> int:
    """Unread counter of the caller's slot; missing counters read as zero."""
    if conversation.get("user1_id") == str(user_id):
        return conversation.get("unread_count_user1") or 0
    return conversation.get("unread_count_user2") or 0


def counterpart_id(conversation: dict[str, Any], user_id: UUID | str) -> str:
    """The participant of a conversation that is not ``user_id``."""
    if conversation["user1_id"] == str(user_id):
        return conversation["user2_id"]
    return conversation["user1_id"]


class ConversationService:
    """Service for one-to-one conversations.

    Conversations are created lazily on first contact and never deleted.
    The pair of participants is stored sorted, so at most one row exists
    for any two users.
    """

    def __init__(self, client: AsyncClient) -> None:
        """Initialize conversation service with a Supabase client."""
        self.client = client
        self.profile_service = ProfileService(client)
        self.message_service = MessageService(client)

    async def find_conversation(self, first: UUID | str, second: UUID | str) -> dict[str, Any] | None:
        """Find the conversation between two users, in either column order."""
        a, b = canonical_pair(first, second)
        response = (
            await self.client.table("conversations")
            .select("*")
            .or_(f"and(user1_id.eq.{a},user2_id.eq.{b}),and(user1_id.eq.{b},user2_id.eq.{a})")
            .limit(1)
            .execute()
        )

        return response.data[0] if response.data else None

    async def get_or_create(self, user_id: UUID | str, other_id: UUID | str) -> tuple[dict[str, Any], bool]:
        """Return the conversation with another user, creating it if needed.

        A concurrent insert of the same pair loses on the unique constraint;
        the row created by the winner is then returned.

        Args:
            user_id: The caller's profile ID.
            other_id: The counterpart's profile ID.

        Returns:
            tuple: The conversation row and whether it was created by this call.

        Raises:
            ValidationError: If the caller targets themselves.
        """
        if str(user_id) == str(other_id):
            raise ValidationError("You cannot start a conversation with yourself")

        existing = await self.find_conversation(user_id, other_id)
        if existing:
            return existing, False

        user1_id, user2_id = canonical_pair(user_id, other_id)
        try:
            response = (
                await self.client.table("conversations")
                .insert({"user1_id": user1_id, "user2_id": user2_id})
                .execute()
            )
        except PostgrestAPIError as e:
            if e.code != UNIQUE_VIOLATION:
                raise
            existing = await self.find_conversation(user_id, other_id)
            if not existing:
                raise
            return existing, False

        logger.info("Conversation created between %s and %s", user1_id, user2_id)
        return response.data[0], True

    async def get_conversation(self, conversation_id: UUID | str) -> dict[str, Any] | None:
        """Get a conversation by ID."""
        response = (
            await self.client.table("conversations")
            .select("*")
            .eq("id", str(conversation_id))
            .maybe_single()
            .execute()
        )

        return response.data if response and response.data else None

    async def require_participant(self, conversation_id: UUID | str, user_id: UUID | str) -> dict[str, Any]:
        """Get a conversation the caller takes part in.

        Raises:
            NotFoundError: If the conversation does not exist.
            AuthorizationError: If the caller is not a participant.
        """
        conversation = await self.get_conversation(conversation_id)
        if not conversation:
            raise NotFoundError("Conversation not found")
        if str(user_id) not in (conversation["user1_id"], conversation["user2_id"]):
            raise AuthorizationError("You are not part of this conversation")
        return conversation

    async def list_conversations(self, user_id: UUID | str) -> list[ConversationSummary]:
        """List the caller's conversations, most recently active first.

        Each entry carries the counterpart's summary, the content of the
        latest message and the caller's unread counter. Conversations whose
        counterpart profile is not visible are skipped.
        """
        me = str(user_id)
        response = (
            await self.client.table("conversations")
            .select("*")
            .or_(f"user1_id.eq.{me},user2_id.eq.{me}")
            .order("last_message_at", desc=True)
            .execute()
        )
        rows = response.data or []
        if not rows:
            return []

        others = [counterpart_id(row, me) for row in rows]
        profiles, last_messages = await asyncio.gather(
            self.profile_service.get_profiles(others, columns=SUMMARY_COLUMNS),
            asyncio.gather(*(self.message_service.get_last_message(row["id"]) for row in rows)),
        )

        summaries = []
        for row, other_id, last in zip(rows, others, last_messages):
            profile = profiles.get(other_id)
            if not profile:
                continue
            summaries.append(
                ConversationSummary(
                    id=row["id"],
                    user=ProfileSummary.model_validate(profile),
                    last_message_at=row.get("last_message_at"),
                    last_message=last["content"] if last else None,
                    unread_count=unread_for(row, me),
                )
            )

        return summaries

    async def mark_as_read(self, conversation_id: UUID | str, user_id: UUID | str) -> None:
        """Mark the counterpart's messages read and zero the caller's counter."""
        await self.client.rpc(
            "mark_messages_as_read",
            {"p_conversation_id": str(conversation_id), "p_user_id": str(user_id)},
        ).execute()
