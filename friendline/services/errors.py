"""Typed failures raised by the graph and ledger services.

Each error is an :class:`HTTPException` so routers can let them propagate and
FastAPI renders the status code and detail without extra translation.
"""
from __future__ import annotations

from fastapi import HTTPException, status


class FriendlineError(HTTPException):
    """Base class carrying a default status code and detail."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(status_code=type(self).status_code, detail=detail or self.default_detail)


class NotFoundError(FriendlineError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class DuplicateRelationshipError(FriendlineError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Relationship already exists"


class InvalidInputError(FriendlineError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class InvalidTransitionError(InvalidInputError):
    """A settled friendship edge cannot move to the requested status."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Relationship already settled"


class PartialWriteFailure(FriendlineError):
    """The second of two linked writes failed after the first was staged.

    The surrounding transaction has been rolled back, so neither write is
    persisted and the caller may retry.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Linked write failed; nothing was saved"


__all__ = [
    "FriendlineError",
    "NotFoundError",
    "DuplicateRelationshipError",
    "InvalidInputError",
    "InvalidTransitionError",
    "PartialWriteFailure",
]
