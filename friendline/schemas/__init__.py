"""Convenience exports for schema layer."""
from .accounts import AccountProfile, AccountSummary
from .auth import AuthResponse, LoginRequest, RegisterRequest
from .conversations import (
    ConversationMessageResponse,
    ConversationSummary,
    ConversationThreadResponse,
    LastMessageResponse,
    MessagePostRequest,
)
from .friends import FriendEdgeResponse, FriendListResponse, FriendRemovalResponse, FriendRespondPayload
from .notifications import MarkReadResponse, NotificationListResponse, NotificationResponse
from .publications import (
    PublicationCommentCreate,
    PublicationCommentResponse,
    PublicationCreate,
    PublicationDetailResponse,
    PublicationFeedResponse,
    PublicationResponse,
)

__all__ = [
    "AccountProfile",
    "AccountSummary",
    "AuthResponse",
    "LoginRequest",
    "RegisterRequest",
    "ConversationMessageResponse",
    "ConversationSummary",
    "ConversationThreadResponse",
    "LastMessageResponse",
    "MessagePostRequest",
    "FriendEdgeResponse",
    "FriendListResponse",
    "FriendRemovalResponse",
    "FriendRespondPayload",
    "MarkReadResponse",
    "NotificationListResponse",
    "NotificationResponse",
    "PublicationCommentCreate",
    "PublicationCommentResponse",
    "PublicationCreate",
    "PublicationDetailResponse",
    "PublicationFeedResponse",
    "PublicationResponse",
]
