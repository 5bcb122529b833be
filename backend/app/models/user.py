"""
LocalBiz Directory — User SQLAlchemy Model
============================================

What:  ORM model representing the `users` table.
How:   Inherits from DeclarativeBase; Alembic reads this for migrations.
Who:   Used by UserService (register, login, profile) and as the owner side
       of businesses and reviews.

Table Design:
    - email: unique index; login looks users up by email
    - password_hash: passlib hash, never the plain password
    - role: 'USER' or 'ADMIN', stored as a short string
"""

import enum
from datetime import datetime, timezone
from typing import List, TYPE_CHECKING

from sqlalchemy import DateTime, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.business import Business
    from app.models.review import Review


class Role(str, enum.Enum):
    """Roles carried inside the session token."""

    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    """
    A registered account.

    Lifecycle:
        Created by registration; never updated or deleted through the API.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(120), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Login identifier, unique across users",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="passlib hash of the password",
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=Role.USER.value,
        server_default=text("'USER'"),
        comment="USER or ADMIN",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # lazy="raise": async sessions cannot lazy load; queries must ask for
    # relationships explicitly with selectinload()
    businesses: Mapped[List["Business"]] = relationship(
        back_populates="owner", lazy="raise"
    )
    reviews: Mapped[List["Review"]] = relationship(
        back_populates="user", lazy="raise"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
