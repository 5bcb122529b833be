"""
LocalBiz Directory — Category Service
=======================================

What:  Category listing, name lookup and the startup seed.
How:   ensure_defaults() reads which seed names already exist and inserts
       only the missing ones. Existing rows are never touched, so running it
       any number of times leaves exactly one row per seed name.
Who:   /categories route, BusinessService (name → id), application lifespan.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError
from app.models.category import Category
from app.schemas.category import CategoryOut

logger = logging.getLogger(__name__)


DEFAULT_CATEGORIES = (
    # Food & Dining
    "Restaurants & Cafes",
    "Fast Food",
    "Bakery",
    # Shopping
    "Retail Stores",
    "Grocery & Supermarket",
    "Fashion & Clothing",
    # Services
    "Professional Services",
    "Beauty & Spa",
    "Auto Services",
    # Healthcare
    "Healthcare & Medical",
    "Fitness & Wellness",
    "Pharmacy",
    # Entertainment
    "Entertainment & Recreation",
    "Arts & Culture",
    # Education
    "Education & Training",
    "Tutoring",
    # Technology
    "IT & Technology",
    # Others
    "Home Services",
    "Travel & Hotels",
)


class CategoryService:

    async def list_categories(self, db: AsyncSession) -> List[CategoryOut]:
        """All categories ordered by name ascending."""
        try:
            result = await db.execute(select(Category).order_by(Category.name.asc()))
            return [CategoryOut.model_validate(c) for c in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error("Database error listing categories: %s", str(e), exc_info=True)
            raise DatabaseError(message="Failed to fetch categories")

    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[Category]:
        result = await db.execute(select(Category).where(Category.name == name))
        return result.scalar_one_or_none()

    async def ensure_defaults(
        self, db: AsyncSession, names: tuple = DEFAULT_CATEGORIES
    ) -> int:
        """
        Create every seed category that does not exist yet.

        Returns:
            Number of categories inserted (0 when all already exist)
        """
        result = await db.execute(select(Category.name).where(Category.name.in_(names)))
        existing = set(result.scalars().all())

        missing = [name for name in dict.fromkeys(names) if name not in existing]
        for name in missing:
            db.add(Category(name=name))
        if missing:
            await db.flush()

        logger.info(
            "Default categories ensured: %d created, %d already present",
            len(missing),
            len(existing),
        )
        return len(missing)


category_service = CategoryService()
