"""Match Pydantic schemas for API request/response models."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from dormmate.models.match import MatchStatus
from dormmate.schemas.profile import ProfileCard


class MatchCreate(BaseModel):
    """Schema for requesting a match with another user."""

    model_config = ConfigDict(from_attributes=True)

    target_id: UUID = Field(..., description="Profile ID of the user to match with")


class MatchResponse(BaseModel):
    """A match with the counterpart's profile card."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Match ID")
    status: MatchStatus = Field(description="Match status")
    requested_by_me: bool = Field(description="True if the caller sent the request")
    user: ProfileCard = Field(description="The other participant")


class MatchListResponse(BaseModel):
    """Matches of the caller split by status."""

    model_config = ConfigDict(from_attributes=True)

    pending: list[MatchResponse] = Field(default_factory=list, description="Pending requests, both directions")
    accepted: list[MatchResponse] = Field(default_factory=list, description="Accepted matches")
