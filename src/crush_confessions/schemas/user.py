"""Account and profile Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from crush_confessions.core.settings import settings
from crush_confessions.models import ConfessionStatus, Visibility

from .common import CamelModel


def ensure_campus_email(value: str) -> str:
    """Reject addresses outside the configured campus domain."""
    if not value.lower().endswith(settings.email_suffix):
        raise ValueError(f"Only {settings.email_suffix} email addresses are allowed")
    return value


class SignupRequest(BaseModel):
    """Schema for creating an account."""

    email: EmailStr = Field(..., description="Campus email address")
    password: str = Field(
        ...,
        min_length=8,
        max_length=100,
        description="Password (8-100 characters)",
    )

    @field_validator("email")
    @classmethod
    def validate_domain(cls, v: str) -> str:
        """Only campus addresses may register."""
        return ensure_campus_email(v)


class SignupResponse(CamelModel):
    """Response returned after a successful signup."""

    message: str
    user_id: str


class LoginRequest(BaseModel):
    """Schema for password login."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Response returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type (always 'bearer')")


class ProfileUpdateRequest(CamelModel):
    """Schema for updating user profile information."""

    display_name: str | None = Field(
        None,
        min_length=2,
        max_length=50,
        description="Optional display name (2-50 characters)",
    )


class ProfileOut(CamelModel):
    """Profile fields visible to the account owner."""

    id: str
    email: str
    display_name: str | None
    profile_picture: str | None
    registration_date: datetime


class SentConfessionOut(CamelModel):
    id: str
    content: str
    timestamp: datetime
    status: ConfessionStatus
    visibility: Visibility
    likes: int
    comments: int
    target_user_name: str | None


class ReceivedConfessionOut(CamelModel):
    id: str
    content: str
    timestamp: datetime
    status: ConfessionStatus
    likes: int
    comments: int


class ProfileResponse(CamelModel):
    """Profile plus the confessions the user sent and received."""

    profile: ProfileOut
    sent_confessions: list[SentConfessionOut]
    received_confessions: list[ReceivedConfessionOut]


class ProfileUpdateResponse(CamelModel):
    message: str
    profile: ProfileOut
