# src/crush_confessions/api/v1/endpoints/profile.py
"""Profile endpoints for the CrushConfessions API."""

from fastapi import APIRouter

from crush_confessions.schemas.user import (
    ProfileResponse,
    ProfileUpdateRequest,
    ProfileUpdateResponse,
)
from crush_confessions.services import users as user_service

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileResponse)
async def get_profile(current_user: CurrentUserDep, db: SessionDep) -> ProfileResponse:
    """Return the caller's profile with sent and received confessions."""
    return user_service.get_profile(db, current_user)


@router.put("", response_model=ProfileUpdateResponse)
async def update_profile(
    payload: ProfileUpdateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileUpdateResponse:
    """Update the caller's display name."""
    profile = user_service.update_profile(db, current_user, payload)
    return ProfileUpdateResponse(message="Profile updated successfully", profile=profile)
