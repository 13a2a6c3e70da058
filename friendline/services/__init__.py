"""Convenience exports for service layer."""
from .account_service import account_exists, get_account, require_accounts
from .auth_service import (
    authenticate_user,
    create_access_token,
    decode_access_token,
    get_current_user,
    register_user,
)
from .conversation_service import (
    get_conversation,
    get_or_create_conversation,
    list_conversations,
    list_messages,
    post_message,
    refresh_last_message,
)
from .errors import (
    DuplicateRelationshipError,
    FriendlineError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    PartialWriteFailure,
)
from .friendship_service import list_edges, remove, respond, send_request
from .notification_service import (
    NotificationType,
    add_notification,
    count_unread_notifications,
    list_notifications,
    mark_all_read,
)
from .publication_service import add_comment, create_publication, get_publication, list_feed

__all__ = [
    "account_exists",
    "get_account",
    "require_accounts",
    "authenticate_user",
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "register_user",
    "get_conversation",
    "get_or_create_conversation",
    "list_conversations",
    "list_messages",
    "post_message",
    "refresh_last_message",
    "FriendlineError",
    "NotFoundError",
    "DuplicateRelationshipError",
    "InvalidInputError",
    "InvalidTransitionError",
    "PartialWriteFailure",
    "send_request",
    "respond",
    "remove",
    "list_edges",
    "NotificationType",
    "add_notification",
    "count_unread_notifications",
    "list_notifications",
    "mark_all_read",
    "create_publication",
    "list_feed",
    "get_publication",
    "add_comment",
]
