"""Neighbor search API routes."""

from fastapi import APIRouter, Query

from dormmate.api.deps import CurrentUser, UserClient
from dormmate.models.profile import Gender
from dormmate.schemas.search import SearchFilters, SearchResponse
from dormmate.services.search_service import SearchService

router = APIRouter(prefix="/search", tags=["search"])


@router.get(
    "",
    response_model=SearchResponse,
    summary="Search neighbors",
    description="Lists other users, optionally filtered by university, dormitory and gender.",
)
async def search_profiles(
    user: CurrentUser,
    client: UserClient,
    university: str | None = Query(default=None, description="Exact university name"),
    dormitory: str | None = Query(default=None, description="Exact dormitory name"),
    gender: Gender | None = Query(default=None, description="Gender"),
) -> SearchResponse:
    """Search other users.

    Empty filters match everything. The response also carries typeahead
    options for the university and dormitory inputs.
    """
    filters = SearchFilters(university=university or None, dormitory=dormitory or None, gender=gender)
    return await SearchService(client).search(user.user_id, filters)
