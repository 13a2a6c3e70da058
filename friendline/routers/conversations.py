"""Direct conversation API routes."""
from __future__ import annotations

from typing import cast
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import Conversation, ConversationMessage, User
from ..schemas import (
    ConversationMessageResponse,
    ConversationSummary,
    ConversationThreadResponse,
    LastMessageResponse,
    MessagePostRequest,
)
from ..services import (
    get_conversation,
    get_current_user,
    get_or_create_conversation,
    list_conversations,
    post_message,
)

router = APIRouter(prefix="/conversations", tags=["conversations"])


def _summary_fields(conversation: Conversation) -> dict:
    snapshot = conversation.last_message
    return {
        "id": cast(UUID, conversation.id),
        "participants": sorted(conversation.participants, key=str),
        "last_message": (
            LastMessageResponse(
                content=snapshot.content,
                sender_id=snapshot.sender_id,
                timestamp=snapshot.timestamp,
            )
            if snapshot is not None
            else None
        ),
        "created_at": conversation.created_at,
    }


def _thread_response(conversation: Conversation, messages: list[ConversationMessage]) -> ConversationThreadResponse:
    return ConversationThreadResponse(
        **_summary_fields(conversation),
        messages=[ConversationMessageResponse.model_validate(message) for message in messages],
    )


@router.get("/", response_model=list[ConversationSummary])
async def conversations_overview(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> list[ConversationSummary]:
    conversations = list_conversations(db, user_id=current_user.id)
    return [ConversationSummary(**_summary_fields(item)) for item in conversations]


@router.post("/with/{peer_id}", response_model=ConversationThreadResponse)
async def open_conversation(
    peer_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ConversationThreadResponse:
    conversation, messages = get_or_create_conversation(db, user_id=current_user.id, peer_id=peer_id)
    return _thread_response(conversation, messages)


@router.get("/{conversation_id}", response_model=ConversationThreadResponse)
async def conversation_thread(
    conversation_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ConversationThreadResponse:
    conversation, messages = get_conversation(db, conversation_id=conversation_id, requester_id=current_user.id)
    return _thread_response(conversation, messages)


@router.post(
    "/{conversation_id}/messages",
    response_model=ConversationMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def send_conversation_message(
    conversation_id: UUID,
    payload: MessagePostRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> ConversationMessageResponse:
    message = post_message(
        db,
        conversation_id=conversation_id,
        sender_id=current_user.id,
        content=payload.content,
    )
    return ConversationMessageResponse.model_validate(message)


__all__ = ["router"]
