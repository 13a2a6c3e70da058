"""Convenience exports for ORM models."""
from .conversation import Conversation, ConversationMessage, LastMessage
from .friend_edge import FriendEdge, FriendStatus
from .notification import Notification
from .publication import Publication, PublicationComment
from .user import User

__all__ = [
    "Conversation",
    "ConversationMessage",
    "LastMessage",
    "FriendEdge",
    "FriendStatus",
    "Notification",
    "Publication",
    "PublicationComment",
    "User",
]
