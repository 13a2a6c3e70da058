"""Pydantic schemas for publications and comments."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .accounts import AccountSummary


class PublicationCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    image_url: str | None = Field(default=None, max_length=1024)


class PublicationCommentCreate(BaseModel):
    comment: str = Field(..., min_length=1, max_length=1000)


class PublicationCommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    publication_id: UUID
    owner: AccountSummary
    comment: str
    created_at: datetime


class PublicationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner: AccountSummary
    title: str
    description: str
    image_url: str | None = None
    created_at: datetime
    comment_count: int = 0


class PublicationDetailResponse(PublicationResponse):
    comments: list[PublicationCommentResponse]


class PublicationFeedResponse(BaseModel):
    items: list[PublicationResponse]


__all__ = [
    "PublicationCreate",
    "PublicationCommentCreate",
    "PublicationCommentResponse",
    "PublicationResponse",
    "PublicationDetailResponse",
    "PublicationFeedResponse",
]
