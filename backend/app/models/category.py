"""
LocalBiz Directory — Category SQLAlchemy Model
================================================

What:  ORM model for the `categories` table.
Who:   CategoryService (list, ensure_defaults) and BusinessService, which
       resolves a category name to its id on create and update.
"""

from typing import List, TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.business import Business


class Category(Base):
    """A business category. Names are unique; rows are never updated."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(
        String(120),
        nullable=False,
        unique=True,
        comment="Display name, also the lookup key used by business forms",
    )

    businesses: Mapped[List["Business"]] = relationship(
        back_populates="category", lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name='{self.name}')>"
