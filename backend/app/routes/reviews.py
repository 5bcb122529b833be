"""
LocalBiz Directory — Review Route Handlers
============================================

What:  Public review listings and authenticated review management.

    GET    /reviews/all            public, newest first
    GET    /reviews/{businessId}   public; ?rating=&sortBy=&order=
    POST   /reviews/{businessId}   bearer
    PUT    /reviews/{id}           bearer, author only
    DELETE /reviews/{id}           bearer, author only
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.review import ReviewCreate, ReviewOut, ReviewUpdate
from app.security.gates import require_identity
from app.security.tokens import Identity
from app.services.review_service import review_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.api_prefix}/reviews", tags=["Reviews"])

_OWNER_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Not the author", "model": ErrorResponse},
    404: {"description": "Review not found", "model": ErrorResponse},
}


@router.get("/all", response_model=List[ReviewOut], summary="All reviews, newest first")
async def list_all_reviews(
    db: AsyncSession = Depends(get_db_session),
) -> List[ReviewOut]:
    return await review_service.list_all(db)


@router.get(
    "/{business_id}",
    response_model=List[ReviewOut],
    responses={400: {"description": "Unknown sort column or order", "model": ErrorResponse}},
    summary="Reviews of one business",
)
async def list_business_reviews(
    business_id: int,
    rating: Optional[int] = Query(default=None, description="Exact rating; no match gives an empty list"),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    order: str = Query(default="desc", description="'asc' or 'desc', any case"),
    db: AsyncSession = Depends(get_db_session),
) -> List[ReviewOut]:
    return await review_service.list_for_business(
        db, business_id, rating=rating, sort_by=sort_by, order=order
    )


@router.post(
    "/{business_id}",
    status_code=201,
    response_model=ReviewOut,
    responses={
        400: {"description": "Invalid body", "model": ErrorResponse},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        500: {"description": "Review rejected by the store", "model": ErrorResponse},
    },
    summary="Review a business",
)
async def create_review(
    business_id: int,
    body: ReviewCreate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> ReviewOut:
    return await review_service.create_review(db, identity, business_id, body)


@router.put(
    "/{review_id}",
    response_model=ReviewOut,
    responses=_OWNER_ERRORS,
    summary="Edit your review",
)
async def update_review(
    review_id: int,
    body: ReviewUpdate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> ReviewOut:
    return await review_service.update_review(db, identity, review_id, body)


@router.delete(
    "/{review_id}",
    response_model=MessageResponse,
    responses=_OWNER_ERRORS,
    summary="Delete your review",
)
async def delete_review(
    review_id: int,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await review_service.delete_review(db, identity, review_id)
    return MessageResponse(message="Review deleted successfully")
