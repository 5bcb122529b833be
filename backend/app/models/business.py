"""
LocalBiz Directory — Business SQLAlchemy Model
================================================

What:  ORM model for the `businesses` table.
Who:   BusinessService for CRUD; ReviewService reads the business name.

Table Design:
    - category_id: required FK; a business always has an existing category
    - owner_id: required FK to users; the owner is the only one allowed to
      update or delete the listing
    - created_at: default sort key for public listings
    - reviews are removed by the database (ON DELETE CASCADE on reviews.business_id)
"""

from datetime import datetime, timezone
from typing import List, TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.category import Category
    from app.models.review import Review
    from app.models.user import User


class Business(Base):
    """A directory listing owned by one user."""

    __tablename__ = "businesses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    address: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    # Free text city/area; the public listing filters on it by substring
    location: Mapped[str] = mapped_column(String(120), nullable=False, default="")

    category_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=False,
        index=True,
    )

    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    category: Mapped["Category"] = relationship(back_populates="businesses", lazy="raise")
    owner: Mapped["User"] = relationship(back_populates="businesses", lazy="raise")
    reviews: Mapped[List["Review"]] = relationship(
        back_populates="business",
        lazy="raise",
        passive_deletes=True,
        order_by="Review.created_at.desc()",
    )

    __table_args__ = (
        Index("idx_businesses_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Business(id={self.id}, name='{self.name}', "
            f"owner_id={self.owner_id}, category_id={self.category_id})>"
        )
