"""
LocalBiz Directory — ORM Models
=================================

Importing this package registers every model on Base.metadata, which is what
Alembic autogenerate and init_models() read.
"""

from app.models.user import Role, User
from app.models.category import Category
from app.models.business import Business
from app.models.review import Review

__all__ = ["Role", "User", "Category", "Business", "Review"]
