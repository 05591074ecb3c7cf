"""Match request API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from dormmate.api.deps import CurrentUser, UserClient
from dormmate.schemas.common import StatusResponse
from dormmate.schemas.match import MatchCreate, MatchListResponse
from dormmate.services.match_service import MatchService

router = APIRouter(prefix="/matches", tags=["matches"])


@router.get(
    "",
    response_model=MatchListResponse,
    summary="List matches",
    description="Pending and accepted matches in both directions, newest first.",
)
async def list_matches(user: CurrentUser, client: UserClient) -> MatchListResponse:
    return await MatchService(client).list_matches(user.user_id)


@router.post(
    "",
    response_model=StatusResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request a match",
    description="Sends a match request. Requesting an existing match is a no-op.",
)
async def request_match(data: MatchCreate, user: CurrentUser, client: UserClient) -> StatusResponse:
    """Send a match request to another user.

    Raises:
        ValidationError: 422 if the caller targets themselves.
    """
    match = await MatchService(client).request_match(user.user_id, data.target_id)
    return StatusResponse(message=f"Match {match['id']} is {match['status']}")


@router.post(
    "/{match_id}/accept",
    response_model=StatusResponse,
    summary="Accept a match",
    description="Accepts a pending match addressed to the caller.",
)
async def accept_match(match_id: UUID, user: CurrentUser, client: UserClient) -> StatusResponse:
    """Accept a match request.

    Raises:
        NotFoundError: 404 if the match does not exist.
        AuthorizationError: 403 if the caller did not receive the request.
    """
    await MatchService(client).accept_match(user.user_id, match_id)
    return StatusResponse(message="Match accepted")


@router.delete(
    "/{match_id}",
    response_model=StatusResponse,
    summary="Reject a match",
    description="Rejects or withdraws a match by deleting it.",
)
async def reject_match(match_id: UUID, user: CurrentUser, client: UserClient) -> StatusResponse:
    await MatchService(client).reject_match(user.user_id, match_id)
    return StatusResponse(message="Match rejected")
