"""Event board API routes."""

from uuid import UUID

from fastapi import APIRouter, status

from dormmate.api.deps import CurrentUser, UserClient
from dormmate.schemas.common import StatusResponse
from dormmate.schemas.event import EventCreate, EventResponse
from dormmate.services.event_service import EventService

router = APIRouter(prefix="/events", tags=["events"])


@router.get(
    "",
    response_model=list[EventResponse],
    summary="List upcoming events",
    description="Events that have not started yet, soonest first.",
)
async def list_events(user: CurrentUser, client: UserClient) -> list[EventResponse]:
    return await EventService(client).list_upcoming(user.user_id)


@router.post(
    "",
    response_model=StatusResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an event",
    description="Creates an event owned by the caller.",
)
async def create_event(data: EventCreate, user: CurrentUser, client: UserClient) -> StatusResponse:
    event = await EventService(client).create_event(user.user_id, data)
    return StatusResponse(message=f"Event {event['id']} created")


@router.post(
    "/{event_id}/join",
    response_model=StatusResponse,
    summary="Join an event",
    description="Joins an event unless it is full. Joining twice is a no-op.",
)
async def join_event(event_id: UUID, user: CurrentUser, client: UserClient) -> StatusResponse:
    """Join an event.

    Raises:
        NotFoundError: 404 if the event does not exist.
        ValidationError: 422 if the event is full.
    """
    await EventService(client).join_event(user.user_id, event_id)
    return StatusResponse(message="Joined event")


@router.delete(
    "/{event_id}/join",
    response_model=StatusResponse,
    summary="Leave an event",
    description="Leaves an event. Leaving an event not joined is a no-op.",
)
async def leave_event(event_id: UUID, user: CurrentUser, client: UserClient) -> StatusResponse:
    await EventService(client).leave_event(user.user_id, event_id)
    return StatusResponse(message="Left event")
