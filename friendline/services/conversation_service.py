"""Direct conversations between two accounts and their message ledger."""
from __future__ import annotations

import logging
from typing import cast
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..models import Conversation, ConversationMessage
from .account_service import require_accounts
from .clock import utcnow
from .errors import InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)


def _ordered_pair(a: UUID, b: UUID) -> tuple[UUID, UUID]:
    return (a, b) if str(a) < str(b) else (b, a)


def pair_key(a: UUID, b: UUID) -> str:
    """Return the order-independent key identifying the conversation between ``a`` and ``b``."""

    first, second = _ordered_pair(a, b)
    return f"{first}:{second}"


def _find_conversation(db: Session, key: str) -> Conversation | None:
    return db.scalar(select(Conversation).where(Conversation.pair_key == key))


def _create_conversation(db: Session, user_id: UUID, peer_id: UUID) -> Conversation:
    key = pair_key(user_id, peer_id)
    first, second = _ordered_pair(user_id, peer_id)
    conversation = Conversation(
        participant_a_id=first,
        participant_b_id=second,
        pair_key=key,
        created_at=utcnow(),
    )
    try:
        db.add(conversation)
        db.commit()
    except IntegrityError:
        # Another request created the pair first; use its row.
        db.rollback()
        existing = _find_conversation(db, key)
        if existing is None:
            logger.exception("Conversation %s vanished after a uniqueness conflict", key)
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to open conversation")
        return existing
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create conversation %s", key)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to open conversation") from exc

    db.refresh(conversation)
    logger.info("Conversation %s created for %s", conversation.id, key)
    return conversation


def list_messages(db: Session, *, conversation_id: UUID) -> list[ConversationMessage]:
    """Return the conversation's messages in chronological order."""

    stmt = (
        select(ConversationMessage)
        .where(ConversationMessage.conversation_id == conversation_id)
        .order_by(ConversationMessage.created_at.asc(), ConversationMessage.id.asc())
    )
    return list(db.scalars(stmt))


def get_or_create_conversation(
    db: Session,
    *,
    user_id: UUID,
    peer_id: UUID,
) -> tuple[Conversation, list[ConversationMessage]]:
    """Return the conversation between two accounts, opening it on first contact."""

    if user_id == peer_id:
        raise InvalidInputError("A conversation needs two different participants")
    require_accounts(db, user_id, peer_id)

    conversation = _find_conversation(db, pair_key(user_id, peer_id))
    if conversation is None:
        conversation = _create_conversation(db, user_id, peer_id)
    return conversation, list_messages(db, conversation_id=cast(UUID, conversation.id))


def get_conversation(
    db: Session,
    *,
    conversation_id: UUID,
    requester_id: UUID,
) -> tuple[Conversation, list[ConversationMessage]]:
    conversation = db.get(Conversation, conversation_id)
    if conversation is None or not conversation.involves(requester_id):
        raise NotFoundError("Conversation not found")
    return conversation, list_messages(db, conversation_id=conversation_id)


def list_conversations(db: Session, *, user_id: UUID) -> list[Conversation]:
    """Return the account's conversations, most recently active first."""

    stmt = (
        select(Conversation)
        .where(or_(Conversation.participant_a_id == user_id, Conversation.participant_b_id == user_id))
        .order_by(
            Conversation.last_message_at.desc().nulls_last(),
            Conversation.created_at.desc(),
        )
    )
    return list(db.scalars(stmt))


def _apply_last_message(conversation: Conversation, message: ConversationMessage | None) -> None:
    if message is None:
        setattr(conversation, "last_message_content", None)
        setattr(conversation, "last_message_sender_id", None)
        setattr(conversation, "last_message_at", None)
        return
    setattr(conversation, "last_message_content", message.content)
    setattr(conversation, "last_message_sender_id", message.sender_id)
    setattr(conversation, "last_message_at", message.created_at)


def post_message(
    db: Session,
    *,
    conversation_id: UUID,
    sender_id: UUID,
    content: str,
) -> ConversationMessage:
    """Append a message to the ledger and refresh the cached last message."""

    if not (content or "").strip():
        raise InvalidInputError("Message content required")
    max_length = get_settings().message_max_length
    if len(content) > max_length:
        raise InvalidInputError(f"Message content exceeds {max_length} characters")

    conversation = db.get(Conversation, conversation_id)
    if conversation is None or not conversation.involves(sender_id):
        raise NotFoundError("Conversation not found")

    message = ConversationMessage(
        conversation_id=conversation_id,
        sender_id=sender_id,
        content=content,
        created_at=utcnow(),
    )
    try:
        db.add(message)
        db.flush()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to persist message in conversation %s", conversation_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to persist message") from exc

    # The projection is a cache; losing this update must not lose the message.
    try:
        with db.begin_nested():
            _apply_last_message(conversation, message)
    except SQLAlchemyError:
        logger.warning("Last-message projection for conversation %s not updated", conversation_id, exc_info=True)

    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to commit message in conversation %s", conversation_id)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to persist message") from exc

    db.refresh(message)
    return message


def refresh_last_message(db: Session, *, conversation_id: UUID) -> Conversation:
    """Recompute the cached last message from the ledger."""

    conversation = db.get(Conversation, conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")

    latest = db.scalar(
        select(ConversationMessage)
        .where(ConversationMessage.conversation_id == conversation_id)
        .order_by(ConversationMessage.created_at.desc(), ConversationMessage.id.desc())
        .limit(1)
    )
    _apply_last_message(conversation, latest)
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to refresh conversation") from exc
    db.refresh(conversation)
    return conversation


__all__ = [
    "pair_key",
    "get_or_create_conversation",
    "get_conversation",
    "list_conversations",
    "list_messages",
    "post_message",
    "refresh_last_message",
]
