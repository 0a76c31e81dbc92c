# src/crush_confessions/models/__init__.py
"""SQLAlchemy models for the CrushConfessions application."""

from .comment import Comment, CommentLike
from .confession import Confession, ConfessionStatus, Like, Visibility
from .conversation import Conversation, ConversationStatus, Message, UserBlock, pair_key
from .user import AccountStatus, User

__all__ = [
    "AccountStatus", "User",
    "Confession", "ConfessionStatus", "Like", "Visibility",
    "Comment", "CommentLike",
    "Conversation", "ConversationStatus", "Message", "UserBlock", "pair_key",
]
