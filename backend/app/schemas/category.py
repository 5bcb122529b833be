"""Category schemas."""

from app.schemas.common import CamelModel


class CategoryOut(CamelModel):
    id: int
    name: str
