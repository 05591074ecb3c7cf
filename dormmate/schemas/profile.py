"""Profile and interest Pydantic schemas for API request/response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from dormmate.models.interest import InterestCategory
from dormmate.models.profile import Gender


class ProfileFields(BaseModel):
    """Editable profile fields shared by setup and update."""

    age: int | None = Field(default=None, ge=14, le=120, description="Age in years")
    university: str | None = Field(default=None, max_length=255, description="University name")
    dormitory: str | None = Field(default=None, max_length=255, description="Dormitory name")
    room_number: str | None = Field(default=None, max_length=50, description="Room number")
    bio: str | None = Field(default=None, max_length=2000, description="Free-form bio")
    avatar_url: str | None = Field(default=None, description="URL to avatar image")
    gender: Gender | None = Field(default=None, description="Gender, unset if not specified")


class ProfileSetup(ProfileFields):
    """Schema for creating the caller's profile on first sign-in."""

    model_config = ConfigDict(from_attributes=True)

    full_name: str = Field(..., min_length=1, max_length=255, description="Display name")
    interest_ids: list[UUID] = Field(default_factory=list, description="Selected interests")


class ProfileUpdate(ProfileFields):
    """Schema for updating the caller's profile.

    All fields are optional. When ``interest_ids`` is given the interest
    set is replaced with it.
    """

    model_config = ConfigDict(from_attributes=True)

    full_name: str | None = Field(default=None, min_length=1, max_length=255, description="Display name")
    interest_ids: list[UUID] | None = Field(default=None, description="Replacement interest set")


class ProfileSummary(BaseModel):
    """Counterpart details shown in the conversation list."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Profile ID")
    full_name: str = Field(description="Display name")
    is_online: bool = Field(default=False, description="Online flag")
    last_seen: datetime | None = Field(default=None, description="Last heartbeat timestamp")


class ProfileCard(BaseModel):
    """Profile with interest names, as shown on search and match cards."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Profile ID")
    full_name: str = Field(description="Display name")
    age: int | None = Field(default=None, description="Age in years")
    university: str | None = Field(default=None, description="University name")
    dormitory: str | None = Field(default=None, description="Dormitory name")
    bio: str | None = Field(default=None, description="Free-form bio")
    gender: str | None = Field(default=None, description="Gender")
    avatar_url: str | None = Field(default=None, description="Avatar URL")
    is_online: bool = Field(default=False, description="Online flag")
    interests: list[str] = Field(default_factory=list, description="Interest names")


class ProfileResponse(ProfileCard):
    """Full profile returned to its owner."""

    room_number: str | None = Field(default=None, description="Room number")
    last_seen: datetime | None = Field(default=None, description="Last heartbeat timestamp")
    interest_ids: list[UUID] = Field(default_factory=list, description="Selected interest IDs")
    created_at: datetime | None = Field(default=None, description="Profile creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")


class InterestResponse(BaseModel):
    """Interest reference data."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Interest ID")
    name: str = Field(description="Interest name")
    category: InterestCategory = Field(description="Interest category")
    icon: str | None = Field(default=None, description="Optional icon name")
