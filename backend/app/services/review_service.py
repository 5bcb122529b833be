"""
LocalBiz Directory — Review Service
=====================================

What:  Create, list, update and delete reviews.
How:   Reads eager-load the author and the business so ReviewOut can carry
       their names. create_review() does not look the business up first:
       the foreign key on reviews.business_id rejects orphans, and that
       rejection surfaces as a DatabaseError.
Who:   Called by the /reviews route handlers.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import DatabaseError, DirectoryError, NotFoundError
from app.models.review import Review
from app.schemas.review import ReviewCreate, ReviewOut, ReviewUpdate
from app.security.gates import authorize
from app.security.tokens import Identity
from app.services.ordering import resolve_order

logger = logging.getLogger(__name__)


def _select_review():
    return select(Review).options(
        selectinload(Review.user),
        selectinload(Review.business),
    )


class ReviewService:

    async def _load(self, db: AsyncSession, review_id: int) -> Optional[Review]:
        result = await db.execute(
            _select_review()
            .where(Review.id == review_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _get_owned(
        self, db: AsyncSession, identity: Identity, review_id: int, action: str
    ) -> Review:
        result = await db.execute(select(Review).where(Review.id == review_id))
        review = result.scalar_one_or_none()
        if review is None:
            raise NotFoundError(resource="review", resource_id=review_id)
        return authorize(identity, review, message=f"Not authorized to {action} this review")

    async def create_review(
        self,
        db: AsyncSession,
        identity: Identity,
        business_id: int,
        payload: ReviewCreate,
    ) -> ReviewOut:
        """
        Any authenticated user may review any business.

        Raises:
            DatabaseError: the insert was rejected, e.g. the business does not exist (→ 500)
        """
        review = Review(
            rating=payload.rating,
            comment=payload.comment,
            business_id=business_id,
            user_id=identity.user_id,
        )
        try:
            db.add(review)
            await db.flush()
            created = await self._load(db, review.id)
        except IntegrityError as e:
            logger.warning(
                "Review by user %s for business %s rejected by constraint: %s",
                identity.user_id, business_id, str(e.orig),
            )
            raise DatabaseError(
                message="Failed to create review",
                context={"business_id": business_id},
            )
        except SQLAlchemyError as e:
            logger.error("Error creating review: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to create review")

        logger.info("Review %s created for business %s", created.id, business_id)
        return ReviewOut.model_validate(created)

    async def list_for_business(
        self,
        db: AsyncSession,
        business_id: int,
        rating: Optional[int] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
    ) -> List[ReviewOut]:
        """
        Reviews of one business, newest first unless told otherwise.

        Raises:
            InvalidSortError: unknown column or direction (→ 400)
        """
        query = _select_review().where(Review.business_id == business_id)
        if rating is not None:
            query = query.where(Review.rating == rating)
        query = query.order_by(
            *resolve_order(
                Review, sort_by, order,
                default_sort="created_at", default_order="desc", strict_order=True,
            )
        )
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Error fetching reviews of business %s: %s", business_id, str(e))
            raise DatabaseError(message="Failed to fetch reviews")
        return [ReviewOut.model_validate(r) for r in result.scalars().all()]

    async def list_all(self, db: AsyncSession) -> List[ReviewOut]:
        """Every review with author and business names, newest first."""
        query = _select_review().order_by(Review.created_at.desc(), Review.id.desc())
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Error fetching all reviews: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to fetch reviews")
        return [ReviewOut.model_validate(r) for r in result.scalars().all()]

    async def update_review(
        self,
        db: AsyncSession,
        identity: Identity,
        review_id: int,
        payload: ReviewUpdate,
    ) -> ReviewOut:
        """
        Raises:
            NotFoundError: no review with that id (→ 404)
            ForbiddenError: the caller did not write it (→ 403)
        """
        try:
            review = await self._get_owned(db, identity, review_id, "update")
            # exclude_unset: an explicit "comment": null clears the comment;
            # rating is NOT NULL, so a null rating is ignored
            changes = payload.model_dump(exclude_unset=True)
            if changes.get("rating") is None:
                changes.pop("rating", None)
            for field, value in changes.items():
                setattr(review, field, value)
            await db.flush()
            updated = await self._load(db, review_id)
        except DirectoryError:
            raise
        except SQLAlchemyError as e:
            logger.error("Error updating review %s: %s", review_id, str(e), exc_info=True)
            raise DatabaseError(message="Failed to update review")

        logger.info("Review %s updated by user %s", review_id, identity.user_id)
        return ReviewOut.model_validate(updated)

    async def delete_review(
        self, db: AsyncSession, identity: Identity, review_id: int
    ) -> None:
        """
        Raises:
            NotFoundError: no review with that id (→ 404)
            ForbiddenError: the caller did not write it (→ 403)
        """
        try:
            await self._get_owned(db, identity, review_id, "delete")
            await db.execute(delete(Review).where(Review.id == review_id))
        except DirectoryError:
            raise
        except SQLAlchemyError as e:
            logger.error("Error deleting review %s: %s", review_id, str(e), exc_info=True)
            raise DatabaseError(message="Failed to delete review")

        logger.info("Review %s deleted by user %s", review_id, identity.user_id)


review_service = ReviewService()
