"""Public account lookups."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import User
from ..schemas import AccountProfile
from ..services import get_account, get_current_user

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("/{account_id}", response_model=AccountProfile)
async def account_profile(
    account_id: UUID,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> AccountProfile:
    return AccountProfile.model_validate(get_account(db, account_id))


__all__ = ["router"]
