# src/crush_confessions/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .auth import router as auth_router
from .comments import router as comments_router
from .confessions import router as confessions_router
from .conversations import router as conversations_router
from .profile import router as profile_router
from .system import router as system_router

__all__ = [
    "auth_router",
    "profile_router",
    "confessions_router",
    "comments_router",
    "conversations_router",
    "system_router",
]
