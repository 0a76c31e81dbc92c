# src/crush_confessions/models/confession.py
"""Models for anonymous confessions and their likes."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crush_confessions.db.defaults import new_id, utcnow
from crush_confessions.db.session import Base
from crush_confessions.models.user import User


class Visibility(StrEnum):
    """Who may read a confession."""

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class ConfessionStatus(StrEnum):
    """Reveal state machine: ACTIVE -> REVEALED -> CONNECTED."""

    ACTIVE = "ACTIVE"
    REVEALED = "REVEALED"
    CONNECTED = "CONNECTED"
    DELETED = "DELETED"


class Confession(Base):
    """Anonymous message, optionally addressed to a target user."""

    __tablename__ = "confessions"
    __table_args__ = (
        CheckConstraint(
            "visibility <> 'PRIVATE' OR target_user_id IS NOT NULL",
            name="ck_confession_private_has_target",
        ),
        Index("ix_confessions_timestamp", "timestamp"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    visibility: Mapped[Visibility] = mapped_column(
        Enum(Visibility, native_enum=False, length=16),
        nullable=False,
        default=Visibility.PUBLIC,
    )
    sender_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    target_user_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=True,
        index=True,
    )
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    status: Mapped[ConfessionStatus] = mapped_column(
        Enum(ConfessionStatus, native_enum=False, length=16),
        nullable=False,
        default=ConfessionStatus.ACTIVE,
    )
    sender_revealed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    receiver_revealed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Set once both sides revealed and a conversation was provisioned.
    chat_channel_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("conversations.id", ondelete="SET NULL"),
        nullable=True,
    )

    sender: Mapped[User] = relationship(User, foreign_keys=[sender_id])
    target_user: Mapped[User | None] = relationship(User, foreign_keys=[target_user_id])

    @property
    def mutual_reveal(self) -> bool:
        """True once both the sender and the target revealed interest."""
        return bool(self.sender_revealed and self.receiver_revealed)


class Like(Base):
    """A user's like on a confession; row presence is the liked state."""

    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("user_id", "confession_id", name="uq_like_user_confession"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    confession_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("confessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
