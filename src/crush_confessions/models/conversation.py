# src/crush_confessions/models/conversation.py
"""Models for two-party conversations, messages and blocks."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crush_confessions.db.defaults import new_id, utcnow
from crush_confessions.db.session import Base
from crush_confessions.models.user import User


class ConversationStatus(StrEnum):
    """A conversation is BLOCKED while either participant blocks the other."""

    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"


def pair_key(user_a: str, user_b: str) -> str:
    """Return the order-independent key of a participant pair."""
    low, high = sorted((user_a, user_b))
    return f"{low}:{high}"


class Conversation(Base):
    """Durable message channel between exactly two users.

    ``user1_id``/``user2_id`` keep the order in which the pair was created;
    ``pair_key`` is the unordered identity and is unique per pair.
    """

    __tablename__ = "conversations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    user1_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    user2_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    pair_key: Mapped[str] = mapped_column(String(80), nullable=False, unique=True)
    status: Mapped[ConversationStatus] = mapped_column(
        Enum(ConversationStatus, native_enum=False, length=16),
        nullable=False,
        default=ConversationStatus.ACTIVE,
    )
    start_timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    user1: Mapped[User] = relationship(User, foreign_keys=[user1_id])
    user2: Mapped[User] = relationship(User, foreign_keys=[user2_id])

    def has_participant(self, user_id: str) -> bool:
        return user_id in (self.user1_id, self.user2_id)

    def other_participant_id(self, user_id: str) -> str:
        return self.user2_id if self.user1_id == user_id else self.user1_id


class Message(Base):
    """Plain-text message inside a conversation."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_conversation_timestamp", "conversation_id", "timestamp"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    conversation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    read_status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    sender: Mapped[User] = relationship(User)


class UserBlock(Base):
    """Directed block from ``blocker_id`` to ``blocked_id``."""

    __tablename__ = "user_blocks"
    __table_args__ = (
        UniqueConstraint("blocker_id", "blocked_id", name="uq_user_block_pair"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    blocker_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    blocked_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
