"""Publication API routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_session
from ..models import Publication, User
from ..schemas import (
    AccountSummary,
    PublicationCommentCreate,
    PublicationCommentResponse,
    PublicationCreate,
    PublicationDetailResponse,
    PublicationFeedResponse,
    PublicationResponse,
)
from ..services import add_comment, create_publication, get_current_user, get_publication, list_feed

router = APIRouter(prefix="/publications", tags=["publications"])


def _to_response(publication: Publication) -> PublicationResponse:
    return PublicationResponse(
        id=publication.id,
        owner=AccountSummary.model_validate(publication.owner),
        title=publication.title,
        description=publication.description,
        image_url=publication.image_url,
        created_at=publication.created_at,
        comment_count=len(publication.comments),
    )


@router.get("/", response_model=PublicationFeedResponse)
async def publication_feed(
    owner_id: UUID | None = Query(None),
    limit: int = Query(50, ge=1, le=100),
    _: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> PublicationFeedResponse:
    items = list_feed(db, owner_id=owner_id, limit=limit)
    return PublicationFeedResponse(items=[_to_response(item) for item in items])


@router.post("/", response_model=PublicationResponse, status_code=status.HTTP_201_CREATED)
async def create_publication_endpoint(
    payload: PublicationCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> PublicationResponse:
    publication = create_publication(
        db,
        owner=current_user,
        title=payload.title,
        description=payload.description,
        image_url=payload.image_url,
    )
    return _to_response(get_publication(db, publication.id))


@router.get("/{publication_id}", response_model=PublicationDetailResponse)
async def publication_detail(
    publication_id: UUID,
    _: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> PublicationDetailResponse:
    publication = get_publication(db, publication_id)
    return PublicationDetailResponse(
        **_to_response(publication).model_dump(),
        comments=[PublicationCommentResponse.model_validate(item) for item in publication.comments],
    )


@router.post(
    "/{publication_id}/comments",
    response_model=PublicationCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def comment_on_publication(
    publication_id: UUID,
    payload: PublicationCommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_session),
) -> PublicationCommentResponse:
    record = add_comment(db, publication_id=publication_id, owner=current_user, comment=payload.comment)
    return PublicationCommentResponse.model_validate(record)


__all__ = ["router"]
