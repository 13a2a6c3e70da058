"""Notification API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import MarkReadResponse, NotificationListResponse, NotificationResponse
from ..services import count_unread_notifications, get_current_user, list_notifications, mark_all_read

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/", response_model=NotificationListResponse)
async def get_notifications(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> NotificationListResponse:
    items = list_notifications(db, current_user.id)
    return NotificationListResponse(
        items=[NotificationResponse.model_validate(item) for item in items],
        unread_count=count_unread_notifications(db, current_user.id),
    )


@router.post("/read-all", response_model=MarkReadResponse)
async def mark_notifications_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> MarkReadResponse:
    return MarkReadResponse(updated=mark_all_read(db, current_user.id))


__all__ = ["router"]
