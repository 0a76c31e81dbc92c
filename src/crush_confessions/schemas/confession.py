"""Confession-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field, field_validator

from crush_confessions.models import ConfessionStatus, Visibility

from .common import CamelModel
from .user import ensure_campus_email


class ConfessionCreate(CamelModel):
    """Schema for submitting a new confession."""

    content: str = Field(
        ...,
        min_length=10,
        max_length=1000,
        description="Confession text (10-1000 characters)",
    )
    target_user_email: EmailStr | Literal[""] = Field(
        "",
        description="Campus email of the crush, or empty for an open confession",
    )
    visibility: Visibility = Field(Visibility.PUBLIC, description="PUBLIC or PRIVATE")

    @field_validator("target_user_email", mode="before")
    @classmethod
    def blank_to_empty(cls, v: object) -> object:
        if v is None:
            return ""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("target_user_email")
    @classmethod
    def validate_domain(cls, v: str) -> str:
        """Targets must be campus addresses."""
        if not v:
            return v
        return ensure_campus_email(v)


class ConfessionSummary(CamelModel):
    """Fields returned right after creation."""

    id: str
    content: str
    timestamp: datetime
    status: ConfessionStatus
    visibility: Visibility
    sender_revealed: bool
    receiver_revealed: bool
    chat_channel_id: str | None = None


class ConfessionCreated(CamelModel):
    message: str
    confession: ConfessionSummary


class ConfessionOut(CamelModel):
    """Feed entry as seen by a particular viewer."""

    id: str
    content: str
    timestamp: datetime
    status: ConfessionStatus
    visibility: Visibility
    likes: int
    comments: int
    target_user_name: str
    sender_name: str
    has_liked: bool
    is_sender: bool
    is_receiver: bool
    sender_revealed: bool
    receiver_revealed: bool
    mutual_reveal: bool
    chat_channel_id: str | None


class ConfessionList(CamelModel):
    confessions: list[ConfessionOut]


class LikeToggleResponse(CamelModel):
    """Result of toggling a like on a confession or comment."""

    message: str
    liked: bool
    like_count: int


class RevealResponse(CamelModel):
    """Outcome of a confession-level reveal."""

    message: str
    status: ConfessionStatus
    mutual_reveal: bool
    sender_revealed: bool
    receiver_revealed: bool
    conversation_id: str | None = None
    conversation_already_exists: bool | None = None
