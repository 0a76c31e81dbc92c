# src/crush_confessions/models/user.py
"""SQLAlchemy model for campus user accounts."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from sqlalchemy import DateTime, Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from crush_confessions.db.defaults import new_id, utcnow
from crush_confessions.db.session import Base


class AccountStatus(StrEnum):
    """Lifecycle of an account; only ACTIVE accounts may sign in."""

    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    SUSPENDED = "SUSPENDED"


class User(Base):
    """Identity record referenced by every other entity."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    display_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    profile_picture: Mapped[str | None] = mapped_column(Text, nullable=True)
    account_status: Mapped[AccountStatus] = mapped_column(
        Enum(AccountStatus, native_enum=False, length=16),
        nullable=False,
        default=AccountStatus.ACTIVE,
    )
    registration_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    @property
    def public_name(self) -> str:
        """Display name, falling back to the local part of the email."""
        return self.display_name or self.email.split("@")[0]
