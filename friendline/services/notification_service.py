"""Notification helpers backed by the relational store."""
from __future__ import annotations

import logging
from enum import StrEnum
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import Notification
from .account_service import require_accounts
from .clock import utcnow
from .errors import NotFoundError

logger = logging.getLogger(__name__)


class NotificationType(StrEnum):
    GENERIC = "generic"
    FRIEND_REQUEST = "friend.request"
    FRIEND_ACCEPTED = "friend.accepted"
    PUBLICATION_COMMENT = "publication.comment"


def list_notifications(db: Session, user_id: UUID) -> list[Notification]:
    """Return notifications for the supplied recipient ordered newest first."""

    stmt = (
        select(Notification)
        .where(Notification.recipient_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
    )
    return list(db.scalars(stmt))


def count_unread_notifications(db: Session, user_id: UUID) -> int:
    stmt = (
        select(func.count())
        .select_from(Notification)
        .where(Notification.recipient_id == user_id, Notification.read.is_(False))
    )
    return int(db.scalar(stmt) or 0)


def add_notification(
    db: Session,
    *,
    recipient_id: UUID,
    sender_id: UUID,
    content: str,
    type_: NotificationType | str = NotificationType.GENERIC,
) -> Notification:
    """Persist a new notification for the given recipient."""

    require_accounts(db, recipient_id, sender_id)

    notification = Notification(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=str(type_),
        content=content,
        created_at=utcnow(),
    )
    try:
        db.add(notification)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(notification)
    return notification


def notify_quietly(db: Session, **kwargs) -> Notification | None:
    """Add a notification, logging instead of raising when delivery fails.

    Used after a primary write has committed so a notification problem never
    reverses or masks the outcome of that write.
    """

    try:
        return add_notification(db, **kwargs)
    except (SQLAlchemyError, NotFoundError):
        logger.warning("Notification for %s could not be stored", kwargs.get("recipient_id"), exc_info=True)
        return None


def mark_all_read(db: Session, recipient_id: UUID) -> int:
    """Mark all notifications for the given recipient as read, returning how many changed."""

    stmt = (
        update(Notification)
        .where(Notification.recipient_id == recipient_id, Notification.read.is_(False))
        .values(read=True)
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return int(result.rowcount or 0)


__all__ = [
    "NotificationType",
    "list_notifications",
    "count_unread_notifications",
    "add_notification",
    "notify_quietly",
    "mark_all_read",
]
