"""Account lookups shared by the graph, ledger and publication services."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import User
from .errors import NotFoundError


def account_exists(db: Session, account_id: UUID) -> bool:
    stmt = select(User.id).where(User.id == account_id)
    return db.scalar(stmt) is not None


def get_account(db: Session, account_id: UUID) -> User:
    user = db.get(User, account_id)
    if user is None:
        raise NotFoundError("Account not found")
    return user


def require_accounts(db: Session, *account_ids: UUID) -> None:
    """Raise :class:`NotFoundError` unless every supplied account exists."""

    for account_id in account_ids:
        if not account_exists(db, account_id):
            raise NotFoundError("Account not found")


__all__ = ["account_exists", "get_account", "require_accounts"]
