"""Business logic for mirrored friendship edges.

Every friendship is stored twice, once on each participant's edge list. The
two copies always carry the same ``status`` and ``initiator_id``; operations
that touch both copies stage them one after the other inside a single
transaction so a failure on the second write never leaves half a pair behind.
"""
from __future__ import annotations

import logging
from typing import Callable, cast
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import and_, delete, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..models import FriendEdge, FriendStatus
from .account_service import require_accounts
from .clock import utcnow
from .errors import (
    DuplicateRelationshipError,
    InvalidInputError,
    InvalidTransitionError,
    NotFoundError,
    PartialWriteFailure,
)
from .notification_service import NotificationType, notify_quietly

logger = logging.getLogger(__name__)

RESPONSE_STATUSES = frozenset({FriendStatus.ACCEPTED, FriendStatus.REJECTED})


def _find_edge(db: Session, account_id: UUID, peer_id: UUID) -> FriendEdge | None:
    stmt = select(FriendEdge).where(FriendEdge.account_id == account_id, FriendEdge.peer_id == peer_id)
    return db.scalar(stmt)


def _write_mirrored(
    db: Session,
    stage_first: Callable[[], None],
    stage_second: Callable[[], None],
    *,
    action: str,
    on_conflict: Callable[[], HTTPException] | None = None,
) -> None:
    """Flush two linked edge writes in order, then commit them together."""

    try:
        stage_first()
        db.flush()
    except IntegrityError as exc:
        db.rollback()
        if on_conflict is not None:
            raise on_conflict() from exc
        logger.exception("Integrity error while trying to %s", action)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to {action}") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to %s", action)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to {action}") from exc

    try:
        stage_second()
        db.flush()
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if on_conflict is not None:
            raise on_conflict() from exc
        logger.error("Mirrored write failed while trying to %s; rolled back", action)
        raise PartialWriteFailure(f"Failed to {action}: mirrored write rejected") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Mirrored write failed while trying to %s; rolled back", action)
        raise PartialWriteFailure(f"Failed to {action}: mirrored write failed") from exc


def send_request(db: Session, *, from_id: UUID, to_id: UUID) -> FriendEdge:
    """Create a pending edge on both accounts and return the requester's copy."""

    if from_id == to_id:
        raise InvalidInputError("Cannot befriend yourself")
    require_accounts(db, from_id, to_id)

    if _find_edge(db, from_id, to_id) is not None:
        raise DuplicateRelationshipError()

    created_at = utcnow()
    outgoing = FriendEdge(
        account_id=from_id,
        peer_id=to_id,
        status=FriendStatus.PENDING.value,
        initiator_id=from_id,
        created_at=created_at,
        updated_at=created_at,
    )
    incoming = FriendEdge(
        account_id=to_id,
        peer_id=from_id,
        status=FriendStatus.PENDING.value,
        initiator_id=from_id,
        created_at=created_at,
        updated_at=created_at,
    )

    _write_mirrored(
        db,
        lambda: db.add(outgoing),
        lambda: db.add(incoming),
        action="send friend request",
        on_conflict=DuplicateRelationshipError,
    )
    db.refresh(outgoing)
    logger.info("Friend request %s -> %s created", from_id, to_id)

    notify_quietly(
        db,
        recipient_id=to_id,
        sender_id=from_id,
        content="You have a new friend request",
        type_=NotificationType.FRIEND_REQUEST,
    )
    return outgoing


def respond(db: Session, *, user_id: UUID, peer_id: UUID, new_status: str) -> FriendEdge:
    """Move both copies of the edge between ``user_id`` and ``peer_id`` to ``new_status``.

    Either participant may respond, the initiator included. Only pending edges
    change status; repeating the current status is a no-op.
    """

    try:
        target = FriendStatus(new_status)
    except ValueError as exc:
        raise InvalidInputError("Status must be 'accepted' or 'rejected'") from exc
    if target not in RESPONSE_STATUSES:
        raise InvalidInputError("Status must be 'accepted' or 'rejected'")

    own = _find_edge(db, user_id, peer_id)
    mirror = _find_edge(db, peer_id, user_id)
    if own is None or mirror is None:
        raise NotFoundError("Relationship not found")

    current = cast(str, own.status)
    if current == target and mirror.status == target:
        return own
    if current not in (FriendStatus.PENDING, target):
        raise InvalidTransitionError(f"Relationship already {current}")

    changed_at = utcnow()

    def _stage(edge: FriendEdge) -> Callable[[], None]:
        def _apply() -> None:
            setattr(edge, "status", target.value)
            setattr(edge, "updated_at", changed_at)
        return _apply

    _write_mirrored(db, _stage(own), _stage(mirror), action=f"mark friendship {target.value}")
    db.refresh(own)
    logger.info("Friendship %s <-> %s marked %s by %s", user_id, peer_id, target.value, user_id)

    if target is FriendStatus.ACCEPTED:
        notify_quietly(
            db,
            recipient_id=peer_id,
            sender_id=user_id,
            content="Your friend request was accepted",
            type_=NotificationType.FRIEND_ACCEPTED,
        )
    return own


def remove(db: Session, *, user_id: UUID, peer_id: UUID) -> int:
    """Delete both copies of the edge; returns how many rows were removed."""

    require_accounts(db, user_id, peer_id)

    stmt = delete(FriendEdge).where(
        or_(
            and_(FriendEdge.account_id == user_id, FriendEdge.peer_id == peer_id),
            and_(FriendEdge.account_id == peer_id, FriendEdge.peer_id == user_id),
        )
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to remove friendship %s <-> %s", user_id, peer_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to remove friendship") from exc

    removed = int(result.rowcount or 0)
    if removed:
        logger.info("Friendship %s <-> %s removed (%d edges)", user_id, peer_id, removed)
    return removed


def list_edges(db: Session, *, user_id: UUID, status_filter: str | None = None) -> list[FriendEdge]:
    """Return the account's edges with each peer loaded for display."""

    require_accounts(db, user_id)

    stmt = (
        select(FriendEdge)
        .where(FriendEdge.account_id == user_id)
        .options(selectinload(FriendEdge.peer))
        .order_by(FriendEdge.created_at.asc(), FriendEdge.id.asc())
    )
    if status_filter is not None:
        try:
            wanted = FriendStatus(status_filter)
        except ValueError as exc:
            raise InvalidInputError("Unknown relationship status") from exc
        stmt = stmt.where(FriendEdge.status == wanted.value)
    return list(db.scalars(stmt))


__all__ = [
    "send_request",
    "respond",
    "remove",
    "list_edges",
]
