"""
LocalBiz Directory — Review SQLAlchemy Model
==============================================

What:  ORM model for the `reviews` table.

Constraints:
    - rating between 1 and 5 (CHECK constraint plus schema validation)
    - business_id FK with ON DELETE CASCADE; inserting a review for a missing
      business is rejected by the database, not by the service
"""

from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.business import Business
    from app.models.user import User


class Review(Base):
    """A rating and comment left by a user on a business."""

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    business_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[int] = mapped_column(
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

    business: Mapped["Business"] = relationship(back_populates="reviews", lazy="raise")
    user: Mapped["User"] = relationship(back_populates="reviews", lazy="raise")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
    )

    def __repr__(self) -> str:
        return (
            f"<Review(id={self.id}, business_id={self.business_id}, "
            f"user_id={self.user_id}, rating={self.rating})>"
        )
