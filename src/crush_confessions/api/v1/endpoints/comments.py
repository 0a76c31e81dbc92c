# src/crush_confessions/api/v1/endpoints/comments.py
"""Comment endpoints for the CrushConfessions API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from crush_confessions.schemas.comment import (
    CommentCreate,
    CommentCreated,
    CommentList,
    CommentRevealRequest,
    CommentRevealResponse,
)
from crush_confessions.schemas.confession import LikeToggleResponse
from crush_confessions.services import match as match_service
from crush_confessions.services import social as social_service

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("", response_model=CommentCreated, status_code=status.HTTP_201_CREATED)
async def create_comment(
    payload: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentCreated:
    """Comment on a confession or reply to a top-level comment."""
    comment = social_service.create_comment(db, current_user, payload)
    return CommentCreated(message="Comment created successfully", comment=comment)


@router.get("", response_model=CommentList)
async def list_comments(
    current_user: CurrentUserDep,
    db: SessionDep,
    confession_id: str = Query(..., alias="confessionId", min_length=1),
) -> CommentList:
    """Return the threaded comments of a confession."""
    return social_service.list_comments(db, confession_id, current_user)


@router.post("/{comment_id}/like", response_model=LikeToggleResponse)
async def toggle_comment_like(
    comment_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> LikeToggleResponse:
    """Like or unlike a comment."""
    return social_service.toggle_comment_like(db, comment_id, current_user)


@router.post("/{comment_id}/reveal", response_model=CommentRevealResponse)
async def comment_reveal(
    comment_id: str,
    payload: CommentRevealRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CommentRevealResponse:
    """Request or approve an identity reveal on a comment."""
    return match_service.handle_comment_reveal(db, comment_id, current_user, payload.action)
