"""Message history and sending service."""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from supabase import AsyncClient

from dormmate.core.config import get_settings

logger = logging.getLogger(__name__)


class MessageService:
    """Service for reading and appending messages.

    History is read newest-first from the store and handed out in
    chronological order, one page at a time.
    """

    def __init__(self, client: AsyncClient) -> None:
        """Initialize message service with a Supabase client."""
        self.client = client
        self.page_size = get_settings().message_page_size

    async def get_page(
        self,
        conversation_id: UUID | str,
        before: datetime | str | None = None,
        limit: int | None = None,
    ) -> tuple[list[dict[str, Any]], bool]:
        """Get one page of history.

        Args:
            conversation_id: The conversation to read.
            before: Only messages created strictly before this time.
            limit: Page size, defaults to the configured size.

        Returns:
            tuple: Messages oldest first, and whether older pages may exist.
        """
        limit = limit or self.page_size
        query = (
            self.client.table("messages")
            .select("*")
            .eq("conversation_id", str(conversation_id))
        )
        if before is not None:
            query = query.lt("created_at", before.isoformat() if isinstance(before, datetime) else before)

        response = await query.order("created_at", desc=True).limit(limit).execute()
        rows = response.data or []

        return list(reversed(rows)), len(rows) == limit

    async def get_last_message(self, conversation_id: UUID | str) -> dict[str, Any] | None:
        """Get the most recent message of a conversation."""
        response = (
            await self.client.table("messages")
            .select("id, content, sender_id, created_at")
            .eq("conversation_id", str(conversation_id))
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )

        return response.data[0] if response.data else None

    async def send_message(
        self,
        conversation_id: UUID | str,
        sender_id: UUID | str,
        content: str,
    ) -> dict[str, Any]:
        """Append a message and return the stored row.

        The store bumps the conversation's ``last_message_at`` and the
        recipient's unread counter when the row is inserted.
        """
        response = (
            await self.client.table("messages")
            .insert(
                {
                    "conversation_id": str(conversation_id),
                    "sender_id": str(sender_id),
                    "content": content,
                }
            )
            .execute()
        )

        logger.debug("Message sent in conversation %s by %s", conversation_id, sender_id)
        return response.data[0]
