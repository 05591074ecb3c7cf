"""Event model type definitions for database operations."""

from datetime import datetime
from typing import TypedDict
from uuid import UUID


class Event(TypedDict):
    """Event table row representation."""

    id: UUID
    creator_id: UUID
    title: str
    description: str | None
    category: str
    location: str | None
    event_date: datetime
    max_participants: int | None
    created_at: datetime


class EventParticipant(TypedDict):
    """Join row between an event and a participating profile."""

    id: UUID
    event_id: UUID
    user_id: UUID
    created_at: datetime
