"""Interest model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict
from uuid import UUID


class InterestCategory(str, Enum):
    """Interest category values matching database values."""

    SPORT = "sport"
    GAMES = "games"
    STUDY = "study"
    HOBBY = "hobby"
    OTHER = "other"


class Interest(TypedDict):
    """Interest table row representation. Static reference data."""

    id: UUID
    name: str
    category: InterestCategory
    icon: str | None
    created_at: datetime


class UserInterest(TypedDict):
    """Join row between a profile and an interest."""

    id: UUID
    user_id: UUID
    interest_id: UUID
    created_at: datetime
