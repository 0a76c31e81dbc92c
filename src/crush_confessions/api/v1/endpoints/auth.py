# src/crush_confessions/api/v1/endpoints/auth.py
"""Authentication endpoints for the CrushConfessions API."""

from __future__ import annotations

from fastapi import APIRouter, status

from crush_confessions.core.security import create_access_token
from crush_confessions.schemas.user import (
    LoginRequest,
    SignupRequest,
    SignupResponse,
    TokenResponse,
)
from crush_confessions.services import users as user_service

from ..dependencies import SessionDep

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest, db: SessionDep) -> SignupResponse:
    """Register a campus account."""
    user = user_service.signup(db, payload.email, payload.password)
    return SignupResponse(message="User created successfully", user_id=user.id)


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: SessionDep) -> TokenResponse:
    """Exchange email and password for a bearer token."""
    user = user_service.authenticate(db, payload.email, payload.password)
    return TokenResponse(access_token=create_access_token(user.id))
