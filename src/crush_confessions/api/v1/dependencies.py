"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from crush_confessions.core.security import decode_access_token
from crush_confessions.db.session import get_db
from crush_confessions.models import User
from crush_confessions.services.errors import UnauthorizedError
from crush_confessions.services.presence import PresenceTracker
from crush_confessions.services.users import get_active_user

# HTTP Bearer scheme for JWT authentication; missing headers are reported by us
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    db: SessionDep,
) -> User:
    """Get the current authenticated user from JWT token.

    Args:
        credentials: HTTP Bearer token credentials, if any were sent
        db: Database session

    Returns:
        The ACTIVE user named by the token's subject

    Raises:
        UnauthorizedError: If the token is missing, invalid or names no active user
    """
    if credentials is None:
        raise UnauthorizedError("Not authenticated")

    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise UnauthorizedError("Could not validate credentials")

    user = get_active_user(db, user_id)
    if user is None:
        raise UnauthorizedError("User not found")
    return user


def get_presence(request: Request) -> PresenceTracker:
    """Return the typing presence tracker created at application start."""
    tracker: PresenceTracker = request.app.state.presence
    return tracker


# Type alias for current user dependency
CurrentUserDep = Annotated[User, Depends(get_current_user)]
PresenceDep = Annotated[PresenceTracker, Depends(get_presence)]
