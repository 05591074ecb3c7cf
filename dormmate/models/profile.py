"""Profile model type definitions for database operations."""

from datetime import datetime
from enum import Enum
from typing import TypedDict
from uuid import UUID


class Gender(str, Enum):
    """Gender values accepted by the profiles table."""

    MALE = "male"
    FEMALE = "female"


class Profile(TypedDict):
    """Profile table row representation.

    The profile id is the auth user id, so there is exactly one profile
    per account.
    """

    id: UUID
    full_name: str
    age: int | None
    university: str | None
    dormitory: str | None
    room_number: str | None
    bio: str | None
    avatar_url: str | None
    gender: str | None
    is_online: bool
    last_seen: datetime
    created_at: datetime
    updated_at: datetime


class ProfileWrite(TypedDict, total=False):
    """Fields a user may write on their own profile."""

    id: UUID
    full_name: str
    age: int | None
    university: str | None
    dormitory: str | None
    room_number: str | None
    bio: str | None
    avatar_url: str | None
    gender: str | None
    updated_at: str


class PresenceUpdate(TypedDict):
    """Presence columns written by the heartbeat."""

    is_online: bool
    last_seen: str
