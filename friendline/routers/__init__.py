"""Aggregate router exports."""
from .accounts import router as accounts_router
from .auth import router as auth_router
from .conversations import router as conversations_router
from .friends import router as friends_router
from .notifications import router as notifications_router
from .publications import router as publications_router

__all__ = [
    "accounts_router",
    "auth_router",
    "conversations_router",
    "friends_router",
    "notifications_router",
    "publications_router",
]
