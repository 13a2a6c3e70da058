"""ORM models for direct conversations and their message ledger."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from friendline.database import Base


@dataclass(frozen=True, slots=True)
class LastMessage:
    """Snapshot of the newest message, cached on the conversation row."""

    content: str
    sender_id: uuid.UUID
    timestamp: datetime


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    participant_a_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    participant_b_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    pair_key = Column(String(80), nullable=False)
    last_message_content = Column(Text, nullable=True)
    last_message_sender_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    last_message_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (UniqueConstraint("pair_key", name="uq_conversation_pair"),)

    @property
    def participants(self) -> frozenset[uuid.UUID]:
        return frozenset({self.participant_a_id, self.participant_b_id})

    def involves(self, user_id: uuid.UUID) -> bool:
        return user_id in self.participants

    @property
    def last_message(self) -> LastMessage | None:
        if self.last_message_at is None or self.last_message_sender_id is None:
            return None
        return LastMessage(
            content=self.last_message_content or "",
            sender_id=self.last_message_sender_id,
            timestamp=self.last_message_at,
        )


class ConversationMessage(Base):
    __tablename__ = "conversation_messages"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    conversation_id = Column(
        UUID(as_uuid=True),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sender_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)


__all__ = ["Conversation", "ConversationMessage", "LastMessage"]
