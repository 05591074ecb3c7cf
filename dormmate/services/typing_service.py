"""Typing indicator rows."""

from datetime import datetime, timezone
from uuid import UUID

from supabase import AsyncClient


class TypingService:
    """Writes and clears the caller's typing row for a conversation."""

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    async def mark_typing(self, conversation_id: UUID | str, user_id: UUID | str) -> None:
        await (
            self.client.table("typing_indicators")
            .upsert(
                {
                    "conversation_id": str(conversation_id),
                    "user_id": str(user_id),
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                },
                on_conflict="conversation_id,user_id",
            )
            .execute()
        )

    async def clear_typing(self, conversation_id: UUID | str, user_id: UUID | str) -> None:
        await (
            self.client.table("typing_indicators")
            .delete()
            .eq("conversation_id", str(conversation_id))
            .eq("user_id", str(user_id))
            .execute()
        )
