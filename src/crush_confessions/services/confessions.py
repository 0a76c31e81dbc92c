"""Confession submission, feeds, deletion and likes."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Literal

from sqlalchemy import func, or_
from sqlalchemy.orm import InstrumentedAttribute, Session, joinedload

from crush_confessions.models import (
    Comment,
    CommentLike,
    Confession,
    ConfessionStatus,
    Like,
    User,
    Visibility,
)
from crush_confessions.schemas.confession import ConfessionCreate, ConfessionOut, LikeToggleResponse

from .errors import AuthorizationError, InvalidStateError, NotFoundError

logger = logging.getLogger(__name__)

Feed = Literal["all", "sent", "received"]

ANONYMOUS = "Anonymous"

__all__ = [
    "count_by",
    "create_confession",
    "delete_confession",
    "get_confession_or_404",
    "list_confessions",
    "toggle_confession_like",
]


def count_by(db: Session, column: InstrumentedAttribute[str], ids: Iterable[str]) -> dict[str, int]:
    """Return ``{id: row count}`` for rows whose ``column`` is in ``ids``."""
    keys = list(ids)
    if not keys:
        return {}
    rows = db.query(column, func.count()).filter(column.in_(keys)).group_by(column).all()
    return {key: int(count) for key, count in rows}


def get_confession_or_404(db: Session, confession_id: str) -> Confession:
    confession = db.get(Confession, confession_id)
    if confession is None or confession.status == ConfessionStatus.DELETED:
        raise NotFoundError("Confession not found")
    return confession


def create_confession(db: Session, sender: User, payload: ConfessionCreate) -> Confession:
    """Store a new ACTIVE confession.

    A PRIVATE confession must name a registered target. A PUBLIC one naming
    an unknown address is stored without a target.
    """
    target: User | None = None
    if payload.target_user_email:
        target = (
            db.query(User)
            .filter(func.lower(User.email) == payload.target_user_email.lower())
            .first()
        )

    if payload.visibility == Visibility.PRIVATE:
        if not payload.target_user_email:
            raise InvalidStateError("Private confessions must have a target user")
        if target is None:
            raise NotFoundError("Target user not found. They need to register first.")

    confession = Confession(
        content=payload.content,
        visibility=payload.visibility,
        sender_id=sender.id,
        target_user_id=target.id if target else None,
        status=ConfessionStatus.ACTIVE,
        sender_revealed=False,
        receiver_revealed=False,
    )
    db.add(confession)
    db.commit()
    db.refresh(confession)
    logger.info("Confession %s created by %s", confession.id, sender.id)
    return confession


def _visible_to(confession: Confession, viewer_id: str) -> bool:
    return (
        confession.visibility == Visibility.PUBLIC
        or confession.sender_id == viewer_id
        or confession.target_user_id == viewer_id
    )


def _sender_name(confession: Confession, viewer_id: str) -> str:
    if confession.sender_id == viewer_id:
        return "You"
    if confession.sender_revealed:
        return confession.sender.public_name
    return ANONYMOUS


def serialize_confessions(
    db: Session,
    confessions: Sequence[Confession],
    viewer_id: str,
) -> list[ConfessionOut]:
    """Build feed entries with counts and reveal state for ``viewer_id``."""
    ids = [confession.id for confession in confessions]
    likes = count_by(db, Like.confession_id, ids)
    comments = count_by(db, Comment.confession_id, ids)
    liked: set[str] = set()
    if ids:
        liked = {
            row.confession_id
            for row in db.query(Like.confession_id)
            .filter(Like.user_id == viewer_id, Like.confession_id.in_(ids))
            .all()
        }

    entries: list[ConfessionOut] = []
    for confession in confessions:
        mutual = confession.mutual_reveal
        entries.append(
            ConfessionOut(
                id=confession.id,
                content=confession.content,
                timestamp=confession.timestamp,
                status=confession.status,
                visibility=confession.visibility,
                likes=likes.get(confession.id, 0),
                comments=comments.get(confession.id, 0),
                target_user_name=(
                    confession.target_user.public_name if confession.target_user else ANONYMOUS
                ),
                sender_name=_sender_name(confession, viewer_id),
                has_liked=confession.id in liked,
                is_sender=confession.sender_id == viewer_id,
                is_receiver=confession.target_user_id == viewer_id,
                sender_revealed=confession.sender_revealed,
                receiver_revealed=confession.receiver_revealed,
                mutual_reveal=mutual,
                chat_channel_id=confession.chat_channel_id if mutual else None,
            )
        )
    return entries


def list_confessions(
    db: Session,
    viewer: User,
    feed: Feed = "all",
    confession_id: str | None = None,
) -> list[ConfessionOut]:
    """Return the viewer's feed, newest first, or a single visible confession."""
    query = (
        db.query(Confession)
        .options(joinedload(Confession.sender), joinedload(Confession.target_user))
        .filter(Confession.status != ConfessionStatus.DELETED)
    )

    if confession_id is not None:
        confession = query.filter(Confession.id == confession_id).first()
        if confession is None or not _visible_to(confession, viewer.id):
            raise NotFoundError("Confession not found")
        return serialize_confessions(db, [confession], viewer.id)

    if feed == "sent":
        query = query.filter(Confession.sender_id == viewer.id)
    elif feed == "received":
        query = query.filter(Confession.target_user_id == viewer.id)
    else:
        query = query.filter(
            or_(
                Confession.visibility == Visibility.PUBLIC,
                Confession.target_user_id == viewer.id,
            )
        )

    confessions = query.order_by(Confession.timestamp.desc(), Confession.id).all()
    return serialize_confessions(db, confessions, viewer.id)


def delete_confession(db: Session, confession_id: str, actor: User) -> None:
    """Hard-delete a confession with its likes, comments and comment likes."""
    confession = get_confession_or_404(db, confession_id)
    if confession.sender_id != actor.id:
        raise AuthorizationError("Only the sender can delete this confession")

    comment_ids = [
        row.id for row in db.query(Comment.id).filter(Comment.confession_id == confession.id).all()
    ]
    if comment_ids:
        db.query(CommentLike).filter(CommentLike.comment_id.in_(comment_ids)).delete(
            synchronize_session=False
        )
        # Replies first so no row references a deleted parent.
        db.query(Comment).filter(
            Comment.id.in_(comment_ids),
            Comment.parent_comment_id.is_not(None),
        ).delete(synchronize_session=False)
        db.query(Comment).filter(Comment.id.in_(comment_ids)).delete(synchronize_session=False)
    db.query(Like).filter(Like.confession_id == confession.id).delete(synchronize_session=False)
    db.delete(confession)
    db.commit()
    logger.info("Confession %s deleted by its sender", confession_id)


def toggle_confession_like(db: Session, confession_id: str, user: User) -> LikeToggleResponse:
    """Like the confession, or remove the like if it already exists."""
    confession = get_confession_or_404(db, confession_id)
    existing = db.query(Like).filter(
        Like.user_id == user.id,
        Like.confession_id == confession.id,
    ).first()

    if existing is not None:
        db.delete(existing)
        liked = False
    else:
        db.add(Like(user_id=user.id, confession_id=confession.id))
        liked = True
    db.commit()

    like_count = db.query(Like).filter(Like.confession_id == confession.id).count()
    return LikeToggleResponse(
        message="Confession liked" if liked else "Confession unliked",
        liked=liked,
        like_count=like_count,
    )
