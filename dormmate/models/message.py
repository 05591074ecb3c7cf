"""Message model type definitions for database operations."""

from datetime import datetime
from typing import TypedDict
from uuid import UUID


class Message(TypedDict):
    """Message table row representation.

    Messages are append-only; only ``is_read``/``read_at`` change, and only
    from unread to read.
    """

    id: UUID
    conversation_id: UUID
    sender_id: UUID
    content: str
    is_read: bool
    read_at: datetime | None
    created_at: datetime


class MessageCreate(TypedDict):
    """Data required to create a new message."""

    conversation_id: str
    sender_id: str
    content: str


class TypingIndicator(TypedDict):
    """Typing indicator row. Its presence means the user is typing."""

    conversation_id: UUID
    user_id: UUID
    updated_at: datetime
