"""Conversation Pydantic schemas for API request/response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from dormmate.schemas.profile import ProfileSummary


class ConversationCreate(BaseModel):
    """Schema for opening a conversation with another user."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID = Field(..., description="Profile ID of the other participant")


class ConversationRef(BaseModel):
    """Result of get-or-create."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Conversation ID")
    created: bool = Field(description="True if the conversation was just created")


class ConversationSummary(BaseModel):
    """Conversation list entry from the caller's point of view."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Conversation ID")
    user: ProfileSummary = Field(description="The other participant")
    last_message_at: datetime | None = Field(default=None, description="Timestamp of last message")
    last_message: str | None = Field(default=None, description="Content of the last message")
    unread_count: int = Field(default=0, description="Messages the caller has not read")


class ConversationListResponse(BaseModel):
    """Conversation list ordered by last activity."""

    model_config = ConfigDict(from_attributes=True)

    conversations: list[ConversationSummary] = Field(description="Conversations, most recent first")
