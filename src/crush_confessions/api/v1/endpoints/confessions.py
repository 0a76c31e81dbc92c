# src/crush_confessions/api/v1/endpoints/confessions.py
"""Confession endpoints for the CrushConfessions API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from crush_confessions.schemas.common import MessageResponse
from crush_confessions.schemas.confession import (
    ConfessionCreate,
    ConfessionCreated,
    ConfessionList,
    ConfessionSummary,
    LikeToggleResponse,
    RevealResponse,
)
from crush_confessions.services import confessions as confession_service
from crush_confessions.services import match as match_service
from crush_confessions.services.confessions import Feed

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/confessions", tags=["confessions"])


@router.post("", response_model=ConfessionCreated, status_code=status.HTTP_201_CREATED)
async def create_confession(
    payload: ConfessionCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ConfessionCreated:
    """Submit an anonymous confession."""
    confession = confession_service.create_confession(db, current_user, payload)
    return ConfessionCreated(
        message="Confession created successfully",
        confession=ConfessionSummary.model_validate(confession),
    )


@router.get("", response_model=ConfessionList)
async def list_confessions(
    current_user: CurrentUserDep,
    db: SessionDep,
    feed: Feed = Query("all"),
    confession_id: str | None = Query(None, alias="confessionId"),
) -> ConfessionList:
    """List the caller's feed, or one confession when ``confessionId`` is given."""
    entries = confession_service.list_confessions(
        db,
        current_user,
        feed=feed,
        confession_id=confession_id,
    )
    return ConfessionList(confessions=entries)


@router.delete("/{confession_id}", response_model=MessageResponse)
async def delete_confession(
    confession_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Delete one of the caller's confessions."""
    confession_service.delete_confession(db, confession_id, current_user)
    return MessageResponse(message="Confession deleted successfully")


@router.post("/{confession_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
    confession_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> LikeToggleResponse:
    """Like or unlike a confession."""
    return confession_service.toggle_confession_like(db, confession_id, current_user)


@router.post("/{confession_id}/reveal", response_model=RevealResponse)
async def reveal_interest(
    confession_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> RevealResponse:
    """Reveal interest as the sender or the target of a confession."""
    return match_service.reveal_confession_interest(db, confession_id, current_user)
