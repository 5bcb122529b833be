"""
LocalBiz Directory — Business Schemas
=======================================

What:  Business request bodies and the joined business payload.
How:   Forms send the category by *name*; BusinessService resolves it to an
       id. Responses carry both categoryId and the joined category object.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.schemas.category import CategoryOut
from app.schemas.common import CamelModel
from app.schemas.review import BusinessReviewOut
from app.schemas.user import UserOut


class BusinessCreate(CamelModel):
    """Body of POST /api/businesses."""
    name: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=5000)
    address: str = Field(default="", max_length=255)
    location: str = Field(default="", max_length=120)
    category: str = Field(min_length=1, description="Category name, e.g. 'Bakery'")


class BusinessUpdate(CamelModel):
    """
    Body of PUT /api/businesses/{id}.

    category is required and re-resolved on every update; the other fields
    keep their stored value when omitted.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    address: Optional[str] = Field(default=None, max_length=255)
    location: Optional[str] = Field(default=None, max_length=120)
    category: str = Field(min_length=1, description="Category name")


class BusinessOut(CamelModel):
    id: int
    name: str
    description: str
    address: str
    location: str
    category_id: int
    owner_id: int
    created_at: datetime
    category: Optional[CategoryOut] = None
    reviews: List[BusinessReviewOut] = Field(default_factory=list)


class OwnedBusinessOut(BusinessOut):
    """
    A business as its owner sees it: the public payload plus the owner's
    account. Only returned by owner-authenticated endpoints; public reads
    use BusinessOut and carry ownerId alone.
    """
    owner: Optional[UserOut] = None
