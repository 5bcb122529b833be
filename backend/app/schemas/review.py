"""
LocalBiz Directory — Review Schemas
=====================================

What:  Review request bodies and responses.
How:   ReviewOut embeds only the names of the author and the business; the
       services always load both relationships before validating.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel


class ReviewCreate(CamelModel):
    rating: int = Field(ge=1, le=5, description="Star rating, 1 to 5")
    comment: Optional[str] = Field(default=None, max_length=5000)


class ReviewUpdate(CamelModel):
    """Fields left out of the body keep their stored value; "comment": null clears it."""
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=5000)


class NameRef(CamelModel):
    name: str


class ReviewOut(CamelModel):
    id: int
    rating: int
    comment: Optional[str] = None
    business_id: int
    user_id: int
    created_at: datetime
    user: Optional[NameRef] = None
    business: Optional[NameRef] = None


class BusinessReviewOut(CamelModel):
    """A review as embedded inside a business payload."""
    id: int
    rating: int
    comment: Optional[str] = None
    business_id: int
    user_id: int
    created_at: datetime
    user: Optional[NameRef] = None
