# src/crush_confessions/api/v1/endpoints/conversations.py
"""Conversation, message and typing endpoints for the CrushConfessions API."""

from __future__ import annotations

from fastapi import APIRouter, status

from crush_confessions.db.defaults import utcnow
from crush_confessions.schemas.common import MessageResponse
from crush_confessions.schemas.conversation import (
    BlockResponse,
    ConversationCreate,
    ConversationCreated,
    ConversationDetails,
    ConversationList,
    MessageCreate,
    MessageList,
    MessageSent,
    TypingStatus,
    UnreadResponse,
)
from crush_confessions.services import conversations as conversation_service

from ..dependencies import CurrentUserDep, PresenceDep, SessionDep

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.post("", response_model=ConversationCreated)
async def create_conversation(
    payload: ConversationCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ConversationCreated:
    """Open a conversation with another user, reusing an existing one."""
    conversation, created = conversation_service.start_conversation(
        db,
        current_user,
        payload.target_user_id,
    )
    return ConversationCreated(
        message="Conversation created" if created else "Conversation already exists",
        conversation_id=conversation.id,
        already_exists=not created,
    )


@router.get("", response_model=ConversationList)
async def list_conversations(current_user: CurrentUserDep, db: SessionDep) -> ConversationList:
    """List the caller's active conversations with unread counts."""
    return conversation_service.list_conversations(db, current_user)


@router.get("/unread", response_model=UnreadResponse)
async def unread_count(current_user: CurrentUserDep, db: SessionDep) -> UnreadResponse:
    """Return the caller's total of unread messages."""
    return UnreadResponse(
        total_unread_messages=conversation_service.unread_total(db, current_user),
        timestamp=utcnow(),
    )


@router.delete("/{conversation_id}", response_model=MessageResponse)
async def delete_conversation(
    conversation_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
    presence: PresenceDep,
) -> MessageResponse:
    """Delete a conversation and every message in it."""
    conversation_service.delete_conversation(db, conversation_id, current_user, presence)
    return MessageResponse(message="Conversation deleted successfully")


@router.get("/{conversation_id}/details", response_model=ConversationDetails)
async def conversation_details(
    conversation_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ConversationDetails:
    return conversation_service.get_details(db, conversation_id, current_user)


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageSent,
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    conversation_id: str,
    payload: MessageCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageSent:
    """Send a message to the other participant."""
    message = conversation_service.send_message(db, conversation_id, current_user, payload.content)
    return MessageSent(
        message="Message sent",
        sent_message=conversation_service.serialize_message(message, current_user.id),
    )


@router.get("/{conversation_id}/messages", response_model=MessageList)
async def list_messages(
    conversation_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageList:
    """Return the message history and mark incoming messages as read."""
    return MessageList(messages=conversation_service.list_messages(db, conversation_id, current_user))


@router.post("/{conversation_id}/block", response_model=BlockResponse)
async def toggle_block(
    conversation_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> BlockResponse:
    """Block or unblock the other participant."""
    is_blocked, conversation_status = conversation_service.toggle_block(
        db,
        conversation_id,
        current_user,
    )
    return BlockResponse(
        message="User blocked" if is_blocked else "User unblocked",
        is_blocked=is_blocked,
        status=conversation_status,
    )


@router.post("/{conversation_id}/typing", response_model=MessageResponse)
async def set_typing(
    conversation_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
    presence: PresenceDep,
) -> MessageResponse:
    """Signal that the caller is composing a message."""
    conversation_service.set_typing(db, presence, conversation_id, current_user)
    return MessageResponse(message="Typing status updated")


@router.get("/{conversation_id}/typing", response_model=TypingStatus)
async def get_typing(
    conversation_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
    presence: PresenceDep,
) -> TypingStatus:
    """Return who else is typing in the conversation."""
    return conversation_service.typing_status(db, presence, conversation_id, current_user)
