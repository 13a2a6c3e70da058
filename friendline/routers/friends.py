"""Friendship API routes."""
from __future__ import annotations

from typing import cast
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import FriendEdge, User
from ..schemas import (
    AccountSummary,
    FriendEdgeResponse,
    FriendListResponse,
    FriendRemovalResponse,
    FriendRespondPayload,
)
from ..services import get_current_user, list_edges, remove, respond, send_request

router = APIRouter(prefix="/friends", tags=["friends"])


def _edge_response(edge: FriendEdge, viewer: User) -> FriendEdgeResponse:
    initiator_id = cast(UUID, edge.initiator_id)
    return FriendEdgeResponse(
        peer=AccountSummary.model_validate(edge.peer),
        status=edge.status,
        initiator_id=initiator_id,
        direction="outgoing" if initiator_id == viewer.id else "incoming",
        created_at=edge.created_at,
    )


@router.get("/", response_model=FriendListResponse)
async def friends_overview(
    status_filter: str | None = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> FriendListResponse:
    edges = list_edges(db, user_id=current_user.id, status_filter=status_filter)
    return FriendListResponse(edges=[_edge_response(edge, current_user) for edge in edges])


@router.post("/{peer_id}", response_model=FriendEdgeResponse, status_code=status.HTTP_201_CREATED)
async def send_friend_request(
    peer_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> FriendEdgeResponse:
    edge = send_request(db, from_id=current_user.id, to_id=peer_id)
    return _edge_response(edge, current_user)


@router.post("/{peer_id}/respond", response_model=FriendEdgeResponse)
async def respond_to_friend_request(
    peer_id: UUID,
    payload: FriendRespondPayload,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> FriendEdgeResponse:
    edge = respond(db, user_id=current_user.id, peer_id=peer_id, new_status=payload.status)
    return _edge_response(edge, current_user)


@router.delete("/{peer_id}", response_model=FriendRemovalResponse)
async def remove_friend(
    peer_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> FriendRemovalResponse:
    removed = remove(db, user_id=current_user.id, peer_id=peer_id)
    return FriendRemovalResponse(peer_id=peer_id, removed=removed)


__all__ = ["router"]
