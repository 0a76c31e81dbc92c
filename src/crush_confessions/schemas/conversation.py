"""Conversation and message Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from crush_confessions.models import ConversationStatus

from .common import CamelModel


class ConversationCreate(CamelModel):
    """Schema for opening a conversation with another user."""

    target_user_id: str = Field(..., min_length=1)


class ConversationCreated(CamelModel):
    message: str
    conversation_id: str
    already_exists: bool


class ParticipantOut(CamelModel):
    """Public view of a conversation participant."""

    id: str
    display_name: str
    profile_picture: str | None = None


class LastMessageOut(CamelModel):
    content: str
    timestamp: datetime
    sender_id: str
    is_current_user: bool


class ConversationSummary(CamelModel):
    id: str
    status: ConversationStatus
    start_timestamp: datetime
    other_user: ParticipantOut
    last_message: LastMessageOut | None
    unread_count: int


class ConversationList(CamelModel):
    """Active conversations of the viewer plus the unread total."""

    conversations: list[ConversationSummary]
    total_unread_messages: int


class UnreadResponse(CamelModel):
    total_unread_messages: int
    timestamp: datetime


class ConversationDetails(CamelModel):
    """Conversation state from the viewer's point of view."""

    id: str
    status: ConversationStatus
    start_timestamp: datetime
    current_user: ParticipantOut
    other_user: ParticipantOut
    is_blocked: bool
    is_blocked_by: bool
    can_message: bool


class MessageCreate(CamelModel):
    """Schema for sending a chat message."""

    content: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Message text (1-1000 characters)",
    )


class MessageOut(CamelModel):
    id: str
    content: str
    timestamp: datetime
    sender: ParticipantOut
    is_current_user: bool
    read_status: bool


class MessageSent(CamelModel):
    message: str
    sent_message: MessageOut


class MessageList(CamelModel):
    messages: list[MessageOut]


class BlockResponse(CamelModel):
    message: str
    is_blocked: bool
    status: ConversationStatus


class TypingUser(CamelModel):
    id: str
    display_name: str


class TypingStatus(CamelModel):
    """Who else is currently composing a message."""

    is_typing: bool
    typing_users: list[TypingUser]
