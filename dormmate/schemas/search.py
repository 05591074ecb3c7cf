"""Search Pydantic schemas for API request/response models."""

from pydantic import BaseModel, ConfigDict, Field

from dormmate.models.profile import Gender
from dormmate.schemas.profile import ProfileCard


class SearchFilters(BaseModel):
    """Exact-match filters applied to neighbor search. Empty means any."""

    university: str | None = Field(default=None, description="University to match")
    dormitory: str | None = Field(default=None, description="Dormitory to match")
    gender: Gender | None = Field(default=None, description="Gender to match")


class SearchResponse(BaseModel):
    """Search results with typeahead options for the filter inputs."""

    model_config = ConfigDict(from_attributes=True)

    profiles: list[ProfileCard] = Field(description="Matching profiles, caller excluded")
    total: int = Field(description="Number of matching profiles")
    university_options: list[str] = Field(default_factory=list, description="University typeahead options")
    dormitory_options: list[str] = Field(default_factory=list, description="Dormitory typeahead options")
