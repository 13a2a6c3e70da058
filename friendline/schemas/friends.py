"""Schemas for friendship edges."""
from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field

from .accounts import AccountSummary


class FriendEdgeResponse(BaseModel):
    peer: AccountSummary
    status: Literal["pending", "accepted", "rejected"]
    initiator_id: UUID
    direction: Literal["outgoing", "incoming"] = Field(..., description="Whether the viewer sent the request")
    created_at: datetime


class FriendListResponse(BaseModel):
    edges: list[FriendEdgeResponse]


class FriendRespondPayload(BaseModel):
    status: str = Field(..., description="Either 'accepted' or 'rejected'")


class FriendRemovalResponse(BaseModel):
    peer_id: UUID
    removed: int


__all__ = [
    "FriendEdgeResponse",
    "FriendListResponse",
    "FriendRespondPayload",
    "FriendRemovalResponse",
]
