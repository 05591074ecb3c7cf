"""Event Pydantic schemas for API request/response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from dormmate.models.interest import InterestCategory


class EventCreate(BaseModel):
    """Schema for creating an event."""

    model_config = ConfigDict(from_attributes=True)

    title: str = Field(..., min_length=1, max_length=255, description="Event title")
    description: str | None = Field(default=None, max_length=5000, description="Event description")
    category: InterestCategory = Field(..., description="Event category")
    location: str | None = Field(default=None, max_length=255, description="Where the event happens")
    event_date: datetime = Field(..., description="When the event happens")
    max_participants: int | None = Field(default=None, ge=1, description="Participant cap, unlimited if unset")


class EventResponse(BaseModel):
    """Upcoming event with participation details for the caller."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Event ID")
    creator_id: UUID = Field(description="Creator profile ID")
    creator_name: str | None = Field(default=None, description="Creator display name")
    title: str = Field(description="Event title")
    description: str | None = Field(default=None, description="Event description")
    category: str = Field(description="Event category")
    location: str | None = Field(default=None, description="Event location")
    event_date: datetime = Field(description="When the event happens")
    max_participants: int | None = Field(default=None, description="Participant cap")
    participant_count: int = Field(default=0, description="Current number of participants")
    is_participant: bool = Field(default=False, description="Whether the caller has joined")
    is_full: bool = Field(default=False, description="Whether the participant cap is reached")
