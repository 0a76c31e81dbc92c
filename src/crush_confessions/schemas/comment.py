"""Comment-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from .common import CamelModel


class CommentCreate(CamelModel):
    """Schema for creating a comment or a reply."""

    confession_id: str = Field(..., min_length=1)
    content: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Comment text (1-500 characters)",
    )
    parent_comment_id: str | None = Field(
        None,
        description="Top-level comment this reply belongs to",
    )


class CommentAuthor(CamelModel):
    """Author as shown to the viewer; ``id`` is only set once approved."""

    id: str | None = None
    display_name: str


class CommentOut(CamelModel):
    id: str
    content: str
    created_at: datetime
    likes: int
    user_liked: bool
    is_author: bool
    user: CommentAuthor
    mentions: list[str]
    reveal_requested: bool
    reveal_approved: bool
    replies: list[CommentOut] = Field(default_factory=list)


class CommentCreated(CamelModel):
    message: str
    comment: CommentOut


class CommentList(CamelModel):
    """Threaded comments of a confession for one viewer."""

    comments: list[CommentOut]
    current_user_id: str
    is_confession_owner: bool


class CommentRevealRequest(CamelModel):
    """Identity reveal action on a comment."""

    action: Literal["request", "approve"]


class CommentRevealResponse(CamelModel):
    message: str
    reveal_requested: bool
    reveal_approved: bool
    conversation_id: str | None = None
    conversation_already_exists: bool | None = None
