"""Threaded comments, mentions and comment likes."""
from __future__ import annotations

import logging
import re
from collections import defaultdict
from typing import Final

from sqlalchemy.orm import Session, joinedload

from crush_confessions.models import Comment, CommentLike, User
from crush_confessions.schemas.comment import CommentAuthor, CommentCreate, CommentList, CommentOut
from crush_confessions.schemas.confession import LikeToggleResponse

from .confessions import ANONYMOUS, count_by, get_confession_or_404
from .errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MENTION_PATTERN: Final = re.compile(r"@(\w+)", re.ASCII)


def extract_mentions(content: str) -> list[str]:
    """Return the handles mentioned in ``content`` without the leading ``@``."""
    return MENTION_PATTERN.findall(content)


def get_comment_or_404(db: Session, comment_id: str) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


def _serialize_comment(
    comment: Comment,
    *,
    viewer_id: str,
    like_counts: dict[str, int],
    liked: set[str],
    replies: list[CommentOut] | None = None,
) -> CommentOut:
    if comment.reveal_approved:
        author = CommentAuthor(id=comment.user_id, display_name=comment.user.public_name)
    else:
        author = CommentAuthor(display_name=ANONYMOUS)
    return CommentOut(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        likes=like_counts.get(comment.id, 0),
        user_liked=comment.id in liked,
        is_author=comment.user_id == viewer_id,
        user=author,
        mentions=extract_mentions(comment.content),
        reveal_requested=comment.reveal_requested,
        reveal_approved=comment.reveal_approved,
        replies=replies or [],
    )


def create_comment(db: Session, author: User, payload: CommentCreate) -> CommentOut:
    """Add a comment, or a reply to a top-level comment of the same confession."""
    confession = get_confession_or_404(db, payload.confession_id)

    if payload.parent_comment_id:
        parent = db.get(Comment, payload.parent_comment_id)
        if parent is None or parent.confession_id != confession.id:
            raise ValidationError.for_field(
                "parentCommentId",
                "Parent comment not found on this confession",
            )
        if parent.parent_comment_id is not None:
            raise ValidationError.for_field(
                "parentCommentId",
                "Replies can only be added to top-level comments",
            )

    comment = Comment(
        content=payload.content,
        confession_id=confession.id,
        user_id=author.id,
        parent_comment_id=payload.parent_comment_id or None,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return _serialize_comment(comment, viewer_id=author.id, like_counts={}, liked=set())


def list_comments(db: Session, confession_id: str, viewer: User) -> CommentList:
    """Return top-level comments newest first, each with replies oldest first."""
    confession = get_confession_or_404(db, confession_id)
    comments = (
        db.query(Comment)
        .options(joinedload(Comment.user))
        .filter(Comment.confession_id == confession.id)
        .order_by(Comment.created_at, Comment.id)
        .all()
    )

    ids = [comment.id for comment in comments]
    like_counts = count_by(db, CommentLike.comment_id, ids)
    liked: set[str] = set()
    if ids:
        liked = {
            row.comment_id
            for row in db.query(CommentLike.comment_id)
            .filter(CommentLike.user_id == viewer.id, CommentLike.comment_id.in_(ids))
            .all()
        }

    replies_by_parent: dict[str, list[Comment]] = defaultdict(list)
    top_level: list[Comment] = []
    for comment in comments:
        if comment.parent_comment_id is None:
            top_level.append(comment)
        else:
            replies_by_parent[comment.parent_comment_id].append(comment)

    top_level.reverse()
    entries = []
    for comment in top_level:
        replies = replies_by_parent.get(comment.id, [])
        entries.append(
            _serialize_comment(
                comment,
                viewer_id=viewer.id,
                like_counts=like_counts,
                liked=liked,
                replies=[
                    _serialize_comment(
                        reply,
                        viewer_id=viewer.id,
                        like_counts=like_counts,
                        liked=liked,
                    )
                    for reply in replies
                ],
            )
        )

    return CommentList(
        comments=entries,
        current_user_id=viewer.id,
        is_confession_owner=confession.sender_id == viewer.id,
    )


def toggle_comment_like(db: Session, comment_id: str, user: User) -> LikeToggleResponse:
    """Like the comment, or remove the like if it already exists."""
    comment = get_comment_or_404(db, comment_id)
    existing = db.query(CommentLike).filter(
        CommentLike.user_id == user.id,
        CommentLike.comment_id == comment.id,
    ).first()

    if existing is not None:
        db.delete(existing)
        liked = False
    else:
        db.add(CommentLike(user_id=user.id, comment_id=comment.id))
        liked = True
    db.commit()

    like_count = db.query(CommentLike).filter(CommentLike.comment_id == comment.id).count()
    return LikeToggleResponse(
        message="Comment liked" if liked else "Comment unliked",
        liked=liked,
        like_count=like_count,
    )
