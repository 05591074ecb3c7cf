"""Conversation and message API routes."""

from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from dormmate.api.deps import CurrentUser, UserClient
from dormmate.schemas.common import StatusResponse
from dormmate.schemas.conversation import ConversationCreate, ConversationListResponse, ConversationRef
from dormmate.schemas.message import MessageCreate, MessagePageResponse, MessageResponse
from dormmate.services.conversation_service import ConversationService
from dormmate.services.message_service import MessageService

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post(
    "",
    response_model=ConversationRef,
    summary="Open a conversation",
    description="Returns the conversation with another user, creating it on first contact.",
    responses={201: {"description": "Conversation created"}, 200: {"description": "Conversation exists"}},
)
async def open_conversation(
    data: ConversationCreate,
    user: CurrentUser,
    client: UserClient,
    response: Response,
) -> ConversationRef:
    """Get or create the conversation between the caller and another user.

    Raises:
        ValidationError: 422 if the caller targets themselves.
    """
    conversation, created = await ConversationService(client).get_or_create(user.user_id, data.user_id)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return ConversationRef(id=conversation["id"], created=created)


@router.get(
    "",
    response_model=ConversationListResponse,
    summary="List conversations",
    description="The caller's conversations with last message and unread count, most recent first.",
)
async def list_conversations(user: CurrentUser, client: UserClient) -> ConversationListResponse:
    conversations = await ConversationService(client).list_conversations(user.user_id)
    return ConversationListResponse(conversations=conversations)


@router.get(
    "/{conversation_id}/messages",
    response_model=MessagePageResponse,
    summary="Get message history",
    description="One page of messages in chronological order. Pass next_before to page back.",
)
async def get_messages(
    conversation_id: UUID,
    user: CurrentUser,
    client: UserClient,
    before: datetime | None = Query(default=None, description="Only messages created before this time"),
    limit: int | None = Query(default=None, ge=1, le=200, description="Page size"),
) -> MessagePageResponse:
    """Page through a conversation's history.

    Raises:
        NotFoundError: 404 if the conversation does not exist.
        AuthorizationError: 403 if the caller is not a participant.
    """
    await ConversationService(client).require_participant(conversation_id, user.user_id)
    messages, has_more = await MessageService(client).get_page(conversation_id, before, limit)

    return MessagePageResponse(
        messages=[MessageResponse(**message) for message in messages],
        has_more=has_more,
        next_before=messages[0]["created_at"] if messages and has_more else None,
    )


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Send a message",
    description="Appends a message to the conversation.",
)
async def send_message(
    conversation_id: UUID,
    data: MessageCreate,
    user: CurrentUser,
    client: UserClient,
) -> MessageResponse:
    await ConversationService(client).require_participant(conversation_id, user.user_id)
    message = await MessageService(client).send_message(conversation_id, user.user_id, data.content)
    return MessageResponse(**message)


@router.post(
    "/{conversation_id}/read",
    response_model=StatusResponse,
    summary="Mark conversation read",
    description="Marks the other participant's messages as read and resets the caller's unread count.",
)
async def mark_read(conversation_id: UUID, user: CurrentUser, client: UserClient) -> StatusResponse:
    service = ConversationService(client)
    await service.require_participant(conversation_id, user.user_id)
    await service.mark_as_read(conversation_id, user.user_id)
    return StatusResponse()
