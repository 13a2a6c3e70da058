"""Business logic for publications and their comment threads."""
from __future__ import annotations

import logging
from typing import cast
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models import Publication, PublicationComment, User
from .clock import utcnow
from .errors import InvalidInputError, NotFoundError
from .notification_service import NotificationType, notify_quietly

logger = logging.getLogger(__name__)

DEFAULT_FEED_LIMIT = 50


def _clean(value: str | None) -> str:
    return (value or "").strip()


def create_publication(
    db: Session,
    *,
    owner: User,
    title: str,
    description: str,
    image_url: str | None = None,
) -> Publication:
    cleaned_title = _clean(title)
    cleaned_description = _clean(description)
    if not cleaned_title or not cleaned_description:
        raise InvalidInputError("Title and description are required")

    publication = Publication(
        owner_id=owner.id,
        title=cleaned_title,
        description=cleaned_description,
        image_url=_clean(image_url) or None,
        created_at=utcnow(),
    )
    try:
        db.add(publication)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create publication for %s", owner.id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create publication") from exc

    db.refresh(publication)
    return publication


def list_feed(db: Session, *, owner_id: UUID | None = None, limit: int = DEFAULT_FEED_LIMIT) -> list[Publication]:
    """Return publications newest first, optionally for a single owner."""

    stmt = (
        select(Publication)
        .options(selectinload(Publication.owner), selectinload(Publication.comments))
        .order_by(Publication.created_at.desc(), Publication.id.desc())
        .limit(limit)
    )
    if owner_id is not None:
        stmt = stmt.where(Publication.owner_id == owner_id)
    return list(db.scalars(stmt))


def get_publication(db: Session, publication_id: UUID) -> Publication:
    stmt = (
        select(Publication)
        .where(Publication.id == publication_id)
        .options(
            selectinload(Publication.owner),
            selectinload(Publication.comments).selectinload(PublicationComment.owner),
        )
    )
    publication = db.scalar(stmt)
    if publication is None:
        raise NotFoundError("Publication not found")
    return publication


def add_comment(db: Session, *, publication_id: UUID, owner: User, comment: str) -> PublicationComment:
    text = _clean(comment)
    if not text:
        raise InvalidInputError("Comment cannot be empty")

    publication = db.get(Publication, publication_id)
    if publication is None:
        raise NotFoundError("Publication not found")

    record = PublicationComment(
        publication_id=publication_id,
        owner_id=owner.id,
        comment=text,
        created_at=utcnow(),
    )
    try:
        db.add(record)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to add comment") from exc
    db.refresh(record)

    publication_owner = cast(UUID, publication.owner_id)
    if publication_owner != owner.id:
        notify_quietly(
            db,
            recipient_id=publication_owner,
            sender_id=owner.id,
            content=f"{owner.username} commented on your publication",
            type_=NotificationType.PUBLICATION_COMMENT,
        )
    return record


__all__ = [
    "create_publication",
    "list_feed",
    "get_publication",
    "add_comment",
]
