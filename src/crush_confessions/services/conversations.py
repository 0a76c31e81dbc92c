"""Conversations, messages, read tracking and blocking."""
from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from sqlalchemy import and_, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from crush_confessions.core.settings import settings
from crush_confessions.models import (
    Confession,
    Conversation,
    ConversationStatus,
    Message,
    User,
    UserBlock,
    pair_key,
)
from crush_confessions.schemas.conversation import (
    ConversationDetails,
    ConversationList,
    ConversationSummary,
    LastMessageOut,
    MessageOut,
    ParticipantOut,
    TypingStatus,
    TypingUser,
)

from .errors import AuthorizationError, ConflictError, NotFoundError, SelfActionError
from .presence import PresenceTracker

logger = logging.getLogger(__name__)

T = TypeVar("T")


def participant_view(user: User) -> ParticipantOut:
    return ParticipantOut(
        id=user.id,
        display_name=user.public_name,
        profile_picture=user.profile_picture,
    )


def serialize_message(message: Message, viewer_id: str) -> MessageOut:
    """Serialize a Message instance for ``viewer_id``."""
    return MessageOut(
        id=message.id,
        content=message.content,
        timestamp=message.timestamp,
        sender=participant_view(message.sender),
        is_current_user=message.sender_id == viewer_id,
        read_status=message.read_status,
    )


# --- Pair lookup and provisioning ----------------------------------------------------
def find_conversation(db: Session, user_a: str, user_b: str) -> Conversation | None:
    """Return the conversation of an unordered pair, whichever column holds which id."""
    return db.query(Conversation).filter(
        or_(
            and_(Conversation.user1_id == user_a, Conversation.user2_id == user_b),
            and_(Conversation.user1_id == user_b, Conversation.user2_id == user_a),
        )
    ).first()


def block_exists(db: Session, blocker_id: str, blocked_id: str) -> bool:
    return db.query(UserBlock).filter(
        UserBlock.blocker_id == blocker_id,
        UserBlock.blocked_id == blocked_id,
    ).first() is not None


def is_blocked_between(db: Session, user_a: str, user_b: str) -> bool:
    """True if either user blocks the other."""
    return block_exists(db, user_a, user_b) or block_exists(db, user_b, user_a)


def provision_conversation(db: Session, user_a: str, user_b: str) -> tuple[Conversation, bool]:
    """Find or add the pair's conversation inside the current transaction.

    Returns ``(conversation, created)``. The insert is flushed so a concurrent
    writer of the same pair surfaces here as an ``IntegrityError`` on
    ``pair_key``; the caller owns commit and rollback.
    """
    if user_a == user_b:
        raise SelfActionError("You cannot start a conversation with yourself")

    existing = find_conversation(db, user_a, user_b)
    if existing is not None:
        return existing, False

    conversation = Conversation(
        user1_id=user_a,
        user2_id=user_b,
        pair_key=pair_key(user_a, user_b),
        status=(
            ConversationStatus.BLOCKED
            if is_blocked_between(db, user_a, user_b)
            else ConversationStatus.ACTIVE
        ),
    )
    db.add(conversation)
    db.flush()
    logger.info("Conversation %s provisioned for %s", conversation.id, conversation.pair_key)
    return conversation, True


def retry_on_pair_conflict(
    db: Session,
    operation: Callable[[], T],
    *,
    attempts: int | None = None,
) -> T:
    """Run ``operation`` and re-run it after a conversation pair conflict.

    ``operation`` must perform its whole unit of work, commit included, so
    that a rollback followed by a fresh attempt observes the winner's row.
    """
    max_attempts = attempts or settings.reveal_max_attempts
    attempt = 1
    while True:
        try:
            return operation()
        except IntegrityError:
            db.rollback()
            if attempt >= max_attempts:
                logger.error("Conversation pair conflict persisted after %d attempts", attempt)
                raise ConflictError("Conversation could not be created, please retry") from None
            logger.warning(
                "Conversation pair conflict, retrying (attempt %d of %d)",
                attempt,
                max_attempts,
            )
            attempt += 1


def find_or_create_conversation(db: Session, user_a: str, user_b: str) -> tuple[Conversation, bool]:
    """Return the pair's single conversation, creating and committing it if needed."""

    def _operation() -> tuple[Conversation, bool]:
        conversation, created = provision_conversation(db, user_a, user_b)
        db.commit()
        return conversation, created

    return retry_on_pair_conflict(db, _operation)


def start_conversation(db: Session, actor: User, target_user_id: str) -> tuple[Conversation, bool]:
    """Open (or reuse) a conversation between ``actor`` and another registered user."""
    if target_user_id == actor.id:
        raise SelfActionError("You cannot start a conversation with yourself")
    if db.get(User, target_user_id) is None:
        raise NotFoundError("User not found")
    return find_or_create_conversation(db, actor.id, target_user_id)


# --- Participant access ---------------------------------------------------------------
def get_conversation_for_participant(
    db: Session,
    conversation_id: str,
    user: User,
) -> Conversation:
    conversation = db.get(Conversation, conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    if not conversation.has_participant(user.id):
        raise AuthorizationError("You are not a participant in this conversation")
    return conversation


def _other_user(db: Session, conversation: Conversation, viewer_id: str) -> User:
    other = db.get(User, conversation.other_participant_id(viewer_id))
    if other is None:
        raise NotFoundError("User not found")
    return other


# --- Listing and unread counts --------------------------------------------------------
def _active_conversations_query(db: Session, viewer_id: str):
    return db.query(Conversation).filter(
        Conversation.status == ConversationStatus.ACTIVE,
        or_(Conversation.user1_id == viewer_id, Conversation.user2_id == viewer_id),
    )


def list_conversations(db: Session, viewer: User) -> ConversationList:
    """Return the viewer's ACTIVE conversations, most recent activity first."""
    conversations = _active_conversations_query(db, viewer.id).all()
    ids = [conversation.id for conversation in conversations]

    unread: dict[str, int] = {}
    if ids:
        rows = (
            db.query(Message.conversation_id, func.count())
            .filter(
                Message.conversation_id.in_(ids),
                Message.sender_id != viewer.id,
                Message.read_status.is_(False),
            )
            .group_by(Message.conversation_id)
            .all()
        )
        unread = {conversation_id: int(count) for conversation_id, count in rows}

    summaries: list[ConversationSummary] = []
    for conversation in conversations:
        last = (
            db.query(Message)
            .filter(Message.conversation_id == conversation.id)
            .order_by(Message.timestamp.desc(), Message.id.desc())
            .first()
        )
        summaries.append(
            ConversationSummary(
                id=conversation.id,
                status=conversation.status,
                start_timestamp=conversation.start_timestamp,
                other_user=participant_view(_other_user(db, conversation, viewer.id)),
                last_message=(
                    LastMessageOut(
                        content=last.content,
                        timestamp=last.timestamp,
                        sender_id=last.sender_id,
                        is_current_user=last.sender_id == viewer.id,
                    )
                    if last is not None
                    else None
                ),
                unread_count=unread.get(conversation.id, 0),
            )
        )

    summaries.sort(
        key=lambda s: s.last_message.timestamp if s.last_message else s.start_timestamp,
        reverse=True,
    )
    return ConversationList(
        conversations=summaries,
        total_unread_messages=sum(s.unread_count for s in summaries),
    )


def unread_total(db: Session, viewer: User) -> int:
    """Count unread messages from others across the viewer's ACTIVE conversations."""
    return (
        db.query(func.count(Message.id))
        .join(Conversation, Conversation.id == Message.conversation_id)
        .filter(
            Conversation.status == ConversationStatus.ACTIVE,
            or_(Conversation.user1_id == viewer.id, Conversation.user2_id == viewer.id),
            Message.sender_id != viewer.id,
            Message.read_status.is_(False),
        )
        .scalar()
        or 0
    )


# --- Messages -------------------------------------------------------------------------
def send_message(db: Session, conversation_id: str, sender: User, content: str) -> Message:
    """Append an unread message; refused while either participant blocks the other."""
    conversation = get_conversation_for_participant(db, conversation_id, sender)
    other_id = conversation.other_participant_id(sender.id)
    if is_blocked_between(db, sender.id, other_id):
        raise AuthorizationError("You cannot send messages in this conversation")

    message = Message(
        conversation_id=conversation.id,
        sender_id=sender.id,
        content=content,
        read_status=False,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def list_messages(db: Session, conversation_id: str, viewer: User) -> list[MessageOut]:
    """Return all messages oldest first, then mark the other side's unread ones as read.

    The returned entries show each message's read state from before this call.
    """
    conversation = get_conversation_for_participant(db, conversation_id, viewer)

    history = [
        serialize_message(message, viewer.id)
        for message in db.query(Message)
        .filter(Message.conversation_id == conversation.id)
        .order_by(Message.timestamp, Message.id)
        .all()
    ]

    marked = (
        db.query(Message)
        .filter(
            Message.conversation_id == conversation.id,
            Message.sender_id != viewer.id,
            Message.read_status.is_(False),
        )
        .update({Message.read_status: True}, synchronize_session=False)
    )
    db.commit()
    if marked:
        logger.debug("Marked %d messages read in %s", marked, conversation.id)
    return history


# --- Blocking and deletion ------------------------------------------------------------
def toggle_block(db: Session, conversation_id: str, actor: User) -> tuple[bool, ConversationStatus]:
    """Block or unblock the other participant.

    Returns whether ``actor`` now blocks the other user and the recomputed
    conversation status, which is BLOCKED while a block exists either way.
    """
    conversation = get_conversation_for_participant(db, conversation_id, actor)
    other_id = conversation.other_participant_id(actor.id)

    existing = db.query(UserBlock).filter(
        UserBlock.blocker_id == actor.id,
        UserBlock.blocked_id == other_id,
    ).first()
    if existing is not None:
        db.delete(existing)
        is_blocked = False
    else:
        db.add(UserBlock(blocker_id=actor.id, blocked_id=other_id))
        is_blocked = True
    db.flush()

    conversation.status = (
        ConversationStatus.BLOCKED
        if is_blocked_between(db, actor.id, other_id)
        else ConversationStatus.ACTIVE
    )
    db.commit()
    logger.info(
        "User %s %s %s; conversation %s is %s",
        actor.id,
        "blocked" if is_blocked else "unblocked",
        other_id,
        conversation.id,
        conversation.status,
    )
    return is_blocked, conversation.status


def delete_conversation(
    db: Session,
    conversation_id: str,
    actor: User,
    presence: PresenceTracker | None = None,
) -> None:
    """Hard-delete a conversation and all of its messages."""
    conversation = get_conversation_for_participant(db, conversation_id, actor)

    db.query(Confession).filter(Confession.chat_channel_id == conversation.id).update(
        {Confession.chat_channel_id: None},
        synchronize_session=False,
    )
    db.query(Message).filter(Message.conversation_id == conversation.id).delete(
        synchronize_session=False
    )
    db.delete(conversation)
    db.commit()
    if presence is not None:
        presence.forget(conversation_id)
    logger.info("Conversation %s deleted by %s", conversation_id, actor.id)


def get_details(db: Session, conversation_id: str, viewer: User) -> ConversationDetails:
    """Describe the conversation and its block state from the viewer's side."""
    conversation = get_conversation_for_participant(db, conversation_id, viewer)
    other = _other_user(db, conversation, viewer.id)
    is_blocked = block_exists(db, viewer.id, other.id)
    is_blocked_by = block_exists(db, other.id, viewer.id)
    return ConversationDetails(
        id=conversation.id,
        status=conversation.status,
        start_timestamp=conversation.start_timestamp,
        current_user=participant_view(viewer),
        other_user=participant_view(other),
        is_blocked=is_blocked,
        is_blocked_by=is_blocked_by,
        can_message=not (is_blocked or is_blocked_by),
    )


# --- Typing presence ------------------------------------------------------------------
def set_typing(
    db: Session,
    presence: PresenceTracker,
    conversation_id: str,
    user: User,
) -> None:
    conversation = get_conversation_for_participant(db, conversation_id, user)
    presence.record_typing(conversation.id, user.id)


def typing_status(
    db: Session,
    presence: PresenceTracker,
    conversation_id: str,
    viewer: User,
) -> TypingStatus:
    """Return the other users typing in the conversation right now."""
    conversation = get_conversation_for_participant(db, conversation_id, viewer)
    typers: list[TypingUser] = []
    for user_id in presence.active_typers(conversation.id, excluding=viewer.id):
        user = db.get(User, user_id)
        if user is not None:
            typers.append(TypingUser(id=user.id, display_name=user.public_name))
    return TypingStatus(is_typing=bool(typers), typing_users=typers)

