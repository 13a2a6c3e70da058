"""Schemas describing accounts as other users see them."""
from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class AccountSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    display_name: str | None = None
    avatar_url: str | None = None


class AccountProfile(AccountSummary):
    banner_url: str | None = None
    page_description: str | None = None
    created_at: datetime


__all__ = ["AccountSummary", "AccountProfile"]
