# src/crush_confessions/services/__init__.py
"""Business logic services for the CrushConfessions application."""

from .errors import (
    AuthorizationError,
    ConflictError,
    CrushError,
    InternalError,
    InvalidStateError,
    NotFoundError,
    SelfActionError,
    UnauthorizedError,
    ValidationError,
)
from .presence import (
    InMemoryPresenceTracker,
    PresenceTracker,
    RedisPresenceTracker,
    build_presence_tracker,
)

__all__ = [
    "CrushError",
    "UnauthorizedError",
    "NotFoundError",
    "AuthorizationError",
    "ValidationError",
    "InvalidStateError",
    "SelfActionError",
    "ConflictError",
    "InternalError",
    "PresenceTracker",
    "InMemoryPresenceTracker",
    "RedisPresenceTracker",
    "build_presence_tracker",
]
