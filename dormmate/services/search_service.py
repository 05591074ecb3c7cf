"""Neighbor search business logic service."""

from typing import Any, Iterable
from uuid import UUID

from supabase import AsyncClient

from dormmate.schemas.profile import ProfileCard
from dormmate.schemas.search import SearchFilters, SearchResponse
from dormmate.services.interest_service import InterestService
from dormmate.services.profile_service import ProfileService
from dormmate.services.search_constants import ALL_DORMS, MASTER_UNIVERSITIES, UNIVERSITY_DORMS


def _merge_unique(*sources: Iterable[str | None]) -> list[str]:
    """Concatenate sources, dropping blanks and repeats, keeping first-seen order."""
    merged: dict[str, None] = {}
    for source in sources:
        for value in source:
            if value:
                merged.setdefault(value, None)
    return list(merged)


def university_options(profiles: list[dict[str, Any]]) -> list[str]:
    """Built-in universities followed by any others seen in profiles."""
    return _merge_unique(MASTER_UNIVERSITIES, (p.get("university") for p in profiles))


def dormitory_options(profiles: list[dict[str, Any]], university: str | None = None) -> list[str]:
    """Dormitories for the chosen university, or all known ones."""
    if university and university in UNIVERSITY_DORMS:
        return list(UNIVERSITY_DORMS[university])
    return _merge_unique(ALL_DORMS, (p.get("dormitory") for p in profiles))


def matches_filters(profile: dict[str, Any], filters: SearchFilters) -> bool:
    """Exact match on every filter that is set."""
    if filters.university and profile.get("university") != filters.university:
        return False
    if filters.dormitory and profile.get("dormitory") != filters.dormitory:
        return False
    if filters.gender and profile.get("gender") != filters.gender.value:
        return False
    return True


class SearchService:
    """Service for finding neighbors."""

    def __init__(self, client: AsyncClient) -> None:
        """Initialize search service with a Supabase client."""
        self.client = client
        self.profile_service = ProfileService(client)
        self.interest_service = InterestService(client)

    async def search(self, user_id: UUID | str, filters: SearchFilters) -> SearchResponse:
        """Find other users matching the filters.

        The typeahead options are computed from every other profile so they
        do not shrink as filters are applied. A dormitory filter that is not
        valid for the chosen university is ignored.

        Args:
            user_id: The caller's profile ID (excluded from results).
            filters: Exact-match filters.

        Returns:
            SearchResponse: Matching profile cards and typeahead options.
        """
        profiles = await self.profile_service.list_other_profiles(user_id)

        dorms = dormitory_options(profiles, filters.university)
        if filters.dormitory and filters.dormitory not in dorms:
            filters = filters.model_copy(update={"dormitory": None})

        matching = [p for p in profiles if matches_filters(p, filters)]
        names = await self.interest_service.get_names_by_user(p["id"] for p in matching)

        cards = [
            ProfileCard.model_validate({**profile, "interests": names.get(profile["id"], [])})
            for profile in matching
        ]

        return SearchResponse(
            profiles=cards,
            total=len(cards),
            university_options=university_options(profiles),
            dormitory_options=dorms,
        )
