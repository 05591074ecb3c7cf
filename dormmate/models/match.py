"""Match model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict
from uuid import UUID


class MatchStatus(str, Enum):
    """Match status values.

    A rejected match is deleted rather than stored with a status.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"


class Match(TypedDict):
    """Match table row representation.

    ``user_id`` is the requester and ``matched_user_id`` the target.
    """

    id: UUID
    user_id: UUID
    matched_user_id: UUID
    status: MatchStatus
    created_at: datetime
