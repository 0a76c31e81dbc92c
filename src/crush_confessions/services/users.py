"""Account helpers: signup, login and profile."""
from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from crush_confessions.core import security
from crush_confessions.models import AccountStatus, Comment, Confession, ConfessionStatus, Like, User
from crush_confessions.schemas.user import (
    ProfileOut,
    ProfileResponse,
    ProfileUpdateRequest,
    ReceivedConfessionOut,
    SentConfessionOut,
)

from .confessions import count_by
from .errors import ConflictError, UnauthorizedError

logger = logging.getLogger(__name__)

__all__ = [
    "authenticate",
    "get_active_user",
    "get_profile",
    "get_user_by_email",
    "signup",
    "update_profile",
]


def get_user_by_email(db: Session, email: str) -> User | None:
    """Return the user registered under ``email``, ignoring case."""
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


def get_active_user(db: Session, user_id: str) -> User | None:
    user = db.get(User, user_id)
    if user is None or user.account_status != AccountStatus.ACTIVE:
        return None
    return user


def signup(db: Session, email: str, password: str) -> User:
    """Create an ACTIVE account with a bcrypt password hash."""
    email = email.lower()
    if get_user_by_email(db, email) is not None:
        raise ConflictError("User with this email already exists")

    user = User(
        email=email,
        password_hash=security.hash_password(password),
        account_status=AccountStatus.ACTIVE,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User with this email already exists") from None
    db.refresh(user)
    logger.info("New account registered for %s", email)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the ACTIVE user matching the credentials."""
    user = get_user_by_email(db, email)
    if user is None or not security.verify_password(password, user.password_hash):
        logger.warning("Failed login for %s", email)
        raise UnauthorizedError("Invalid email or password")
    if user.account_status != AccountStatus.ACTIVE:
        logger.warning("Login refused for %s account %s", user.account_status, email)
        raise UnauthorizedError("Account is not active")
    return user


def _profile_out(user: User) -> ProfileOut:
    return ProfileOut(
        id=user.id,
        email=user.email,
        display_name=user.display_name,
        profile_picture=user.profile_picture,
        registration_date=user.registration_date,
    )


def get_profile(db: Session, user: User) -> ProfileResponse:
    """Return the profile with the user's sent and received confessions."""
    sent = (
        db.query(Confession)
        .options(joinedload(Confession.target_user))
        .filter(
            Confession.sender_id == user.id,
            Confession.status != ConfessionStatus.DELETED,
        )
        .order_by(Confession.timestamp.desc())
        .all()
    )
    received = (
        db.query(Confession)
        .filter(
            Confession.target_user_id == user.id,
            Confession.status != ConfessionStatus.DELETED,
        )
        .order_by(Confession.timestamp.desc())
        .all()
    )

    ids = [c.id for c in sent] + [c.id for c in received]
    likes = count_by(db, Like.confession_id, ids)
    comments = count_by(db, Comment.confession_id, ids)

    return ProfileResponse(
        profile=_profile_out(user),
        sent_confessions=[
            SentConfessionOut(
                id=c.id,
                content=c.content,
                timestamp=c.timestamp,
                status=c.status,
                visibility=c.visibility,
                likes=likes.get(c.id, 0),
                comments=comments.get(c.id, 0),
                target_user_name=c.target_user.public_name if c.target_user else None,
            )
            for c in sent
        ],
        received_confessions=[
            ReceivedConfessionOut(
                id=c.id,
                content=c.content,
                timestamp=c.timestamp,
                status=c.status,
                likes=likes.get(c.id, 0),
                comments=comments.get(c.id, 0),
            )
            for c in received
        ],
    )


def update_profile(db: Session, user: User, update_data: ProfileUpdateRequest) -> ProfileOut:
    """Apply partial updates to the user's profile."""
    update_dict = update_data.model_dump(exclude_unset=True)
    for key, value in update_dict.items():
        setattr(user, key, value)

    db.add(user)
    db.commit()
    db.refresh(user)
    return _profile_out(user)
