"""Reveal rules and mutual-match conversation provisioning.

Every reveal that can end in a new conversation runs as one transaction:
the confession (or comment) row is locked, flags are updated, the pair's
conversation is found or inserted, and the result is committed once. When a
concurrent request inserted the same pair first, the unique ``pair_key``
rejects our insert; the whole operation is rolled back and re-run, and the
second run reuses the winner's conversation.
"""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from crush_confessions.models import Comment, Confession, ConfessionStatus, User
from crush_confessions.schemas.comment import CommentRevealResponse
from crush_confessions.schemas.confession import RevealResponse

from . import conversations
from .errors import (
    AuthorizationError,
    InvalidStateError,
    NotFoundError,
    SelfActionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

COMMENT_REVEAL_ACTIONS = ("request", "approve")


def _lock_confession(db: Session, confession_id: str) -> Confession:
    confession = (
        db.query(Confession)
        .filter(Confession.id == confession_id)
        .with_for_update()
        .first()
    )
    if confession is None or confession.status == ConfessionStatus.DELETED:
        raise NotFoundError("Confession not found")
    return confession


def _lock_comment(db: Session, comment_id: str) -> Comment:
    comment = db.query(Comment).filter(Comment.id == comment_id).with_for_update().first()
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


def reveal_confession_interest(db: Session, confession_id: str, actor: User) -> RevealResponse:
    """Record that the sender or the target wants to reveal themselves.

    Once both sides revealed on a targeted confession the pair's single
    conversation is found or created and the confession becomes CONNECTED.
    """

    def _operation() -> RevealResponse:
        confession = _lock_confession(db, confession_id)
        is_sender = confession.sender_id == actor.id
        is_target = confession.target_user_id == actor.id
        if not (is_sender or is_target):
            raise AuthorizationError("Only the sender or the target can reveal interest")
        if is_sender and is_target:
            raise SelfActionError("You cannot reveal interest in your own confession")

        if is_sender:
            confession.sender_revealed = True
        else:
            confession.receiver_revealed = True

        conversation_id: str | None = None
        already_exists: bool | None = None
        if confession.mutual_reveal and confession.target_user_id is not None:
            conversation, created = conversations.provision_conversation(
                db,
                confession.sender_id,
                confession.target_user_id,
            )
            confession.status = ConfessionStatus.CONNECTED
            confession.chat_channel_id = conversation.id
            conversation_id = conversation.id
            already_exists = not created
        elif confession.status != ConfessionStatus.CONNECTED:
            confession.status = ConfessionStatus.REVEALED

        db.commit()
        logger.info(
            "Confession %s reveal by %s: status=%s sender=%s receiver=%s",
            confession.id,
            "sender" if is_sender else "target",
            confession.status,
            confession.sender_revealed,
            confession.receiver_revealed,
        )
        mutual = confession.mutual_reveal
        return RevealResponse(
            message=(
                "It's a match! You can now chat with each other."
                if conversation_id
                else "Your interest has been revealed"
            ),
            status=confession.status,
            mutual_reveal=mutual,
            sender_revealed=confession.sender_revealed,
            receiver_revealed=confession.receiver_revealed,
            conversation_id=conversation_id,
            conversation_already_exists=already_exists,
        )

    return conversations.retry_on_pair_conflict(db, _operation)


def request_comment_reveal(db: Session, comment_id: str, actor: User) -> CommentRevealResponse:
    """Let a comment's author ask the confession owner to reveal them.

    Asking again while a request is pending returns the current flags.
    """
    comment = _lock_comment(db, comment_id)
    if comment.user_id != actor.id:
        raise AuthorizationError("Only the comment author can request a reveal")

    if comment.reveal_requested:
        return CommentRevealResponse(
            message="Reveal already requested",
            reveal_requested=True,
            reveal_approved=comment.reveal_approved,
        )

    comment.reveal_requested = True
    db.commit()
    logger.info("Reveal requested on comment %s", comment.id)
    return CommentRevealResponse(
        message="Reveal requested",
        reveal_requested=True,
        reveal_approved=comment.reveal_approved,
    )


def approve_comment_reveal(db: Session, comment_id: str, actor: User) -> CommentRevealResponse:
    """Approve a pending request and connect the confession owner with the author."""

    def _operation() -> CommentRevealResponse:
        comment = _lock_comment(db, comment_id)
        confession = db.get(Confession, comment.confession_id)
        if confession is None or confession.sender_id != actor.id:
            raise AuthorizationError("Only the confession owner can approve a reveal")
        if not comment.reveal_requested:
            raise InvalidStateError("No reveal request is pending for this comment")

        comment.reveal_approved = True
        conversation_id: str | None = None
        already_exists: bool | None = None
        if comment.user_id != confession.sender_id:
            conversation, created = conversations.provision_conversation(
                db,
                confession.sender_id,
                comment.user_id,
            )
            conversation_id = conversation.id
            already_exists = not created

        db.commit()
        logger.info("Reveal approved on comment %s", comment.id)
        return CommentRevealResponse(
            message="Reveal approved",
            reveal_requested=True,
            reveal_approved=True,
            conversation_id=conversation_id,
            conversation_already_exists=already_exists,
        )

    return conversations.retry_on_pair_conflict(db, _operation)


def handle_comment_reveal(
    db: Session,
    comment_id: str,
    actor: User,
    action: str,
) -> CommentRevealResponse:
    if action not in COMMENT_REVEAL_ACTIONS:
        raise ValidationError.for_field("action", "Action must be 'request' or 'approve'")
    if action == "request":
        return request_comment_reveal(db, comment_id, actor)
    return approve_comment_reveal(db, comment_id, actor)
