"""Schemas used by the direct conversation endpoints."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class MessagePostRequest(BaseModel):
    content: str


class LastMessageResponse(BaseModel):
    content: str
    sender_id: UUID
    timestamp: datetime


class ConversationMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    conversation_id: UUID
    sender_id: UUID
    content: str
    created_at: datetime


class ConversationSummary(BaseModel):
    id: UUID
    participants: list[UUID]
    last_message: LastMessageResponse | None = None
    created_at: datetime


class ConversationThreadResponse(ConversationSummary):
    messages: list[ConversationMessageResponse]


__all__ = [
    "MessagePostRequest",
    "LastMessageResponse",
    "ConversationMessageResponse",
    "ConversationSummary",
    "ConversationThreadResponse",
]
