"""SQLAlchemy ORM model for accounts."""
from __future__ import annotations

import uuid

from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from friendline.database import Base

DEFAULT_BANNER_URL = "https://www.solidbackgrounds.com/images/1920x1080/1920x1080-black-solid-color-background.jpg"
DEFAULT_PAGE_DESCRIPTION = "No description yet"


class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(150), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=True)
    display_name = Column(String(150), nullable=True)
    hashed_password = Column(String(255), nullable=False)
    avatar_url = Column(String(1024), nullable=True)
    banner_url = Column(String(1024), nullable=False, default=DEFAULT_BANNER_URL)
    page_description = Column(String(500), nullable=False, default=DEFAULT_PAGE_DESCRIPTION)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # One row per side of each friendship; the peer holds the mirror.
    friend_edges = relationship(
        "FriendEdge",
        foreign_keys="FriendEdge.account_id",
        back_populates="account",
        cascade="all, delete-orphan",
        order_by="FriendEdge.created_at",
    )
    notifications = relationship(
        "Notification",
        foreign_keys="Notification.recipient_id",
        back_populates="recipient",
        cascade="all, delete-orphan",
    )
    publications = relationship("Publication", back_populates="owner", cascade="all, delete-orphan")


__all__ = ["User", "DEFAULT_BANNER_URL", "DEFAULT_PAGE_DESCRIPTION"]
