"""Message Pydantic schemas for API and messaging-session models."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dormmate.schemas.conversation import ConversationSummary


class MessageCreate(BaseModel):
    """Schema for sending a message."""

    model_config = ConfigDict(from_attributes=True)

    content: str = Field(..., min_length=1, max_length=10000, description="Message content")

    @field_validator("content")
    @classmethod
    def strip_content(cls, value: str) -> str:
        """Reject whitespace-only messages and trim the rest."""
        stripped = value.strip()
        if not stripped:
            raise ValueError("Message content must not be blank")
        return stripped


class MessageResponse(BaseModel):
    """Schema for message API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Message unique identifier")
    conversation_id: UUID = Field(description="Parent conversation ID")
    sender_id: UUID = Field(description="Sender profile ID")
    content: str = Field(description="Message content")
    is_read: bool = Field(default=False, description="Whether the recipient has read it")
    read_at: datetime | None = Field(default=None, description="When it was read")
    created_at: datetime = Field(description="Creation timestamp")


class MessagePageResponse(BaseModel):
    """A page of history in chronological order."""

    model_config = ConfigDict(from_attributes=True)

    messages: list[MessageResponse] = Field(description="Messages, oldest first")
    has_more: bool = Field(default=False, description="Whether older messages exist")
    next_before: datetime | None = Field(default=None, description="Cursor for the next older page")


class MessageView(MessageResponse):
    """Message as rendered in the thread."""

    time_label: str = Field(description="Relative time label")
    is_mine: bool = Field(description="Whether the caller sent it")


class MessageGroup(BaseModel):
    """Messages of one calendar day."""

    date_label: str = Field(description="Day separator label")
    messages: list[MessageView] = Field(description="Messages of that day, oldest first")


class MessagingState(BaseModel):
    """Snapshot of a messaging session pushed to the client."""

    conversations: list[ConversationSummary] = Field(default_factory=list, description="Filtered conversation list")
    search_query: str = Field(default="", description="Active conversation filter")
    selected_conversation_id: UUID | None = Field(default=None, description="Open conversation")
    groups: list[MessageGroup] = Field(default_factory=list, description="Open thread grouped by day")
    draft: str = Field(default="", description="Current input text")
    has_more: bool = Field(default=False, description="Whether older history exists")
    loading: bool = Field(default=False, description="Conversation list is loading")
    loading_more: bool = Field(default=False, description="Older history is loading")
    is_other_user_typing: bool = Field(default=False, description="Counterpart typing flag")
    other_user_status: str | None = Field(default=None, description="Online or last-seen label of the counterpart")


class SessionAction(BaseModel):
    """Action sent by the client over the messaging WebSocket."""

    type: Literal[
        "refresh",
        "select_conversation",
        "scroll",
        "load_older",
        "draft",
        "send",
        "search",
        "visibility",
        "unload",
    ] = Field(description="Action name")
    conversation_id: UUID | None = Field(default=None, description="Conversation to open (select_conversation)")
    offset: float | None = Field(default=None, ge=0, description="Scroll offset from the top in px (scroll)")
    text: str | None = Field(default=None, description="Draft text (draft)")
    query: str | None = Field(default=None, description="Conversation filter (search)")
    visible: bool | None = Field(default=None, description="Page visibility (visibility)")
