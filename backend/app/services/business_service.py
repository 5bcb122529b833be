"""
LocalBiz Directory — Business Service
=======================================

What:  CRUD for directory listings with ownership enforcement.
How:   Every read goes through _select_business(), which eager-loads the
       category and the reviews (with their authors) so the result can be
       validated into BusinessOut without lazy loading. The owner's account
       is loaded only for owner-facing results (OwnedBusinessOut); public
       reads expose ownerId alone.
Who:   Called by the /businesses route handlers.

Ownership rules:
    create   ADMIN role (checked by the role gate before we are called)
    update   404 if missing, 403 if not the owner, then 400 for a bad category
    delete   403 for both missing and not-owned listings
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import (
    DatabaseError,
    DirectoryError,
    InvalidCategoryError,
    NotFoundError,
)
from app.models.business import Business
from app.models.category import Category
from app.models.review import Review
from app.schemas.business import (
    BusinessCreate,
    BusinessOut,
    BusinessUpdate,
    OwnedBusinessOut,
)
from app.security.gates import authorize
from app.security.tokens import Identity
from app.services.category_service import category_service
from app.services.ordering import resolve_order

logger = logging.getLogger(__name__)


def _select_business(with_owner: bool = False):
    options = [
        selectinload(Business.category),
        selectinload(Business.reviews).selectinload(Review.user),
    ]
    if with_owner:
        options.append(selectinload(Business.owner))
    return select(Business).options(*options)


class BusinessService:
    """
    Business logic layer for listings.

    Error Handling Strategy:
        Application exceptions propagate unchanged. SQLAlchemy errors are
        logged and wrapped in DatabaseError so driver messages never reach
        the client.
    """

    async def _load(
        self, db: AsyncSession, business_id: int, with_owner: bool = False
    ) -> Optional[Business]:
        # populate_existing: a row already in the session (e.g. just flushed)
        # gets its relationships loaded too
        result = await db.execute(
            _select_business(with_owner)
            .where(Business.id == business_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _resolve_category(self, db: AsyncSession, name: str) -> Category:
        category = await category_service.get_by_name(db, name)
        if category is None:
            raise InvalidCategoryError(category=name)
        return category

    async def create_business(
        self, db: AsyncSession, identity: Identity, payload: BusinessCreate
    ) -> OwnedBusinessOut:
        """
        Create a listing owned by the caller.

        Raises:
            InvalidCategoryError: payload.category names no category (→ 400);
                                  nothing is inserted
            DatabaseError: insert failed (→ 500)
        """
        try:
            category = await self._resolve_category(db, payload.category)

            business = Business(
                name=payload.name,
                description=payload.description,
                address=payload.address,
                location=payload.location,
                category_id=category.id,
                owner_id=identity.user_id,
            )
            db.add(business)
            await db.flush()

            created = await self._load(db, business.id, with_owner=True)
        except DirectoryError:
            raise
        except SQLAlchemyError as e:
            logger.error("Error creating business: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error creating business",
                context={"error_type": type(e).__name__},
            )

        logger.info(
            "Business %s created by user %s in category '%s'",
            created.id, identity.user_id, category.name,
        )
        return OwnedBusinessOut.model_validate(created)

    async def list_businesses(
        self,
        db: AsyncSession,
        category_id: Optional[int] = None,
        location: Optional[str] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> List[BusinessOut]:
        """
        Public listing with optional filters.

        Args:
            category_id: exact match on the category
            location: literal substring match on the location (% and _ are
                      not wildcards)
            sort_by: any business column (default createdAt)
            order: 'desc' sorts descending, anything else ascending

        Raises:
            InvalidSortError: sort_by is not a business column (→ 400)
        """
        query = _select_business()
        if category_id is not None:
            query = query.where(Business.category_id == category_id)
        if location:
            query = query.where(Business.location.contains(location, autoescape=True))
        query = query.order_by(
            *resolve_order(Business, sort_by, order, default_sort="created_at", default_order="asc")
        )

        try:
            result = await db.execute(query)
            businesses = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Error fetching businesses: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to fetch businesses")

        return [BusinessOut.model_validate(b) for b in businesses]

    async def get_business(self, db: AsyncSession, business_id: int) -> BusinessOut:
        """
        Raises:
            NotFoundError: no business with that id (→ 404)
        """
        try:
            business = await self._load(db, business_id)
        except SQLAlchemyError as e:
            logger.error("Error fetching business %s: %s", business_id, str(e))
            raise DatabaseError(message="Failed to fetch business")

        if business is None:
            raise NotFoundError(resource="business", resource_id=business_id)
        return BusinessOut.model_validate(business)

    async def update_business(
        self,
        db: AsyncSession,
        identity: Identity,
        business_id: int,
        payload: BusinessUpdate,
    ) -> OwnedBusinessOut:
        """
        Update a listing the caller owns.

        The category is looked up by name on every update, even when it is
        the one already stored.

        Raises:
            NotFoundError: no business with that id (→ 404)
            ForbiddenError: the caller is not the owner (→ 403)
            InvalidCategoryError: payload.category names no category (→ 400)
        """
        try:
            result = await db.execute(select(Business).where(Business.id == business_id))
            business = result.scalar_one_or_none()
            if business is None:
                raise NotFoundError(resource="business", resource_id=business_id)

            authorize(identity, business, message="Not authorized to update this business")

            category = await self._resolve_category(db, payload.category)

            changes = payload.model_dump(exclude_none=True, exclude={"category"})
            for field, value in changes.items():
                setattr(business, field, value)
            business.category_id = category.id
            await db.flush()

            updated = await self._load(db, business_id, with_owner=True)
        except DirectoryError:
            raise
        except SQLAlchemyError as e:
            logger.error("Error updating business %s: %s", business_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update business",
                context={"business_id": business_id},
            )

        logger.info("Business %s updated by user %s", business_id, identity.user_id)
        return OwnedBusinessOut.model_validate(updated)

    async def delete_business(
        self, db: AsyncSession, identity: Identity, business_id: int
    ) -> None:
        """
        Delete a listing the caller owns. Its reviews go with it (ON DELETE CASCADE).

        Raises:
            ForbiddenError: the business does not exist OR belongs to someone
                            else; the two cases are reported identically (→ 403)
        """
        try:
            result = await db.execute(select(Business).where(Business.id == business_id))
            authorize(
                identity,
                result.scalar_one_or_none(),
                message="You are not authorized to delete this business.",
            )
            await db.execute(delete(Business).where(Business.id == business_id))
        except DirectoryError:
            raise
        except SQLAlchemyError as e:
            logger.error("Error deleting business %s: %s", business_id, str(e), exc_info=True)
            raise DatabaseError(message="Failed to delete business")

        logger.info("Business %s deleted by user %s", business_id, identity.user_id)

    async def list_owned(
        self, db: AsyncSession, identity: Identity
    ) -> List[OwnedBusinessOut]:
        """Listings owned by the caller, newest first."""
        query = (
            _select_business(with_owner=True)
            .where(Business.owner_id == identity.user_id)
            .order_by(Business.created_at.desc(), Business.id.desc())
        )
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Error fetching businesses of user %s: %s", identity.user_id, str(e))
            raise DatabaseError(message="Failed to fetch businesses")
        return [OwnedBusinessOut.model_validate(b) for b in result.scalars().all()]


business_service = BusinessService()
