"""
LocalBiz Directory — Business Route Handlers
==============================================

What:  Public browsing of listings plus owner/admin management.
Who:   Dashboard and BusinessDetails views (public), AdminDashboard (ADMIN).

Gate summary:
    GET    /businesses                      public
    GET    /businesses/{id}                 public
    POST   /businesses                      bearer + ADMIN
    PUT    /businesses/{id}                 bearer, owner (checked in the service)
    DELETE /businesses/{id}                 bearer, owner (checked in the service)
    GET    /businesses/admin/my-businesses  bearer + ADMIN

Public reads return BusinessOut (ownerId only, no owner account). POST, PUT
and /admin/my-businesses answer the owner and return OwnedBusinessOut.

/admin/my-businesses is declared before /{business_id} so the literal path
wins the match.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.models.user import Role
from app.schemas.business import (
    BusinessCreate,
    BusinessOut,
    BusinessUpdate,
    OwnedBusinessOut,
)
from app.schemas.common import ErrorResponse, MessageResponse
from app.security.gates import require_identity, require_role
from app.security.tokens import Identity
from app.services.business_service import business_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.api_prefix}/businesses", tags=["Businesses"])

require_admin = require_role(Role.ADMIN)

_AUTH_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Not allowed", "model": ErrorResponse},
}


@router.get(
    "/admin/my-businesses",
    response_model=List[OwnedBusinessOut],
    responses=_AUTH_ERRORS,
    summary="Listings owned by the calling admin, newest first",
)
async def list_my_businesses(
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> List[OwnedBusinessOut]:
    return await business_service.list_owned(db, identity)


@router.get(
    "",
    response_model=List[BusinessOut],
    responses={400: {"description": "Unknown sort column", "model": ErrorResponse}},
    summary="List businesses with optional filters and sorting",
)
async def list_businesses(
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    location: Optional[str] = Query(default=None, description="Substring of the location"),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    order: str = Query(default="asc", description="'asc' or 'desc'"),
    db: AsyncSession = Depends(get_db_session),
) -> List[BusinessOut]:
    return await business_service.list_businesses(
        db,
        category_id=category_id,
        location=location,
        sort_by=sort_by,
        order=order,
    )


@router.get(
    "/{business_id}",
    response_model=BusinessOut,
    responses={404: {"description": "Business not found", "model": ErrorResponse}},
    summary="Get one business with its category and reviews",
)
async def get_business(
    business_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> BusinessOut:
    return await business_service.get_business(db, business_id)


@router.post(
    "",
    status_code=201,
    response_model=OwnedBusinessOut,
    responses={
        400: {"description": "Invalid body or category", "model": ErrorResponse},
        **_AUTH_ERRORS,
    },
    summary="Create a business owned by the calling admin",
)
async def create_business(
    body: BusinessCreate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> OwnedBusinessOut:
    return await business_service.create_business(db, identity, body)


@router.put(
    "/{business_id}",
    response_model=OwnedBusinessOut,
    responses={
        400: {"description": "Invalid body or category", "model": ErrorResponse},
        404: {"description": "Business not found", "model": ErrorResponse},
        **_AUTH_ERRORS,
    },
    summary="Update a business the caller owns",
)
async def update_business(
    business_id: int,
    body: BusinessUpdate,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> OwnedBusinessOut:
    return await business_service.update_business(db, identity, business_id, body)


@router.delete(
    "/{business_id}",
    response_model=MessageResponse,
    responses=_AUTH_ERRORS,
    summary="Delete a business the caller owns",
)
async def delete_business(
    business_id: int,
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await business_service.delete_business(db, identity, business_id)
    return MessageResponse(message="Business deleted successfully")
