# src/crush_confessions/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentOut, CommentRevealRequest
from .common import CamelModel, ErrorResponse, MessageResponse
from .confession import ConfessionCreate, ConfessionOut, RevealResponse
from .conversation import ConversationCreate, MessageCreate, MessageOut
from .user import LoginRequest, ProfileUpdateRequest, SignupRequest, TokenResponse

__all__ = [
    "CamelModel", "ErrorResponse", "MessageResponse",
    "CommentCreate", "CommentOut", "CommentRevealRequest",
    "ConfessionCreate", "ConfessionOut", "RevealResponse",
    "ConversationCreate", "MessageCreate", "MessageOut",
    "LoginRequest", "ProfileUpdateRequest", "SignupRequest", "TokenResponse",
]
