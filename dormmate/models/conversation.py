"""Conversation model type definitions for database operations."""

from datetime import datetime
from typing import TypedDict
from uuid import UUID


class Conversation(TypedDict):
    """Conversation table row representation.

    Participant ids are stored sorted (``user1_id < user2_id``) so a pair
    of users has at most one conversation. Unread counters are maintained
    by the database, one per participant slot.
    """

    id: UUID
    user1_id: UUID
    user2_id: UUID
    last_message_at: datetime
    unread_count_user1: int
    unread_count_user2: int
    created_at: datetime


class ConversationCreate(TypedDict):
    """Data required to create a conversation."""

    user1_id: str
    user2_id: str
