"""ORM model for one side of a mirrored friendship edge."""
from __future__ import annotations

import uuid
from enum import StrEnum

from sqlalchemy import Column, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from friendline.database import Base
from .base import TimestampMixin


class FriendStatus(StrEnum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class FriendEdge(TimestampMixin, Base):
    __tablename__ = "friend_edges"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    account_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    peer_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(*(member.value for member in FriendStatus), name="friend_edge_status"),
        nullable=False,
        default=FriendStatus.PENDING.value,
    )
    initiator_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    account = relationship("User", foreign_keys=[account_id], back_populates="friend_edges")
    peer = relationship("User", foreign_keys=[peer_id])

    __table_args__ = (UniqueConstraint("account_id", "peer_id", name="uq_friend_edge_pair"),)

    def mirrors(self, other: "FriendEdge") -> bool:
        """Return True when ``other`` is the consistent opposite copy of this edge."""
        return (
            self.account_id == other.peer_id
            and self.peer_id == other.account_id
            and self.status == other.status
            and self.initiator_id == other.initiator_id
        )


__all__ = ["FriendEdge", "FriendStatus"]
