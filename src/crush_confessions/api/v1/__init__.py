# src/crush_confessions/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    auth_router,
    comments_router,
    confessions_router,
    conversations_router,
    profile_router,
    system_router,
)

__all__ = [
    "auth_router",
    "profile_router",
    "confessions_router",
    "comments_router",
    "conversations_router",
    "system_router",
]
