"""
LocalBiz Directory — User Service
===================================

What:  Registration, login and profile lookup.
How:   Passwords are hashed with passlib before they touch the database;
       register and login both answer with a freshly issued session token.
Who:   Called by the /users route handlers.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    DatabaseError,
    DirectoryError,
    NotFoundError,
    UnauthenticatedError,
    ValidationError,
)
from app.models.user import Role, User
from app.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserOut
from app.security.passwords import hash_password, verify_password
from app.security.tokens import Identity, token_codec

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """
    Business logic for accounts.

    Responsibilities:
        - register(): create the account and issue a token
        - login(): check credentials and issue a token
        - get_profile(): the caller's own account
    """

    def _auth_response(self, user: User) -> AuthResponse:
        token = token_codec.issue(user.id, Role(user.role))
        return AuthResponse(token=token, user=UserOut.model_validate(user))

    async def register(self, db: AsyncSession, payload: RegisterRequest) -> AuthResponse:
        """
        Create a user and log them in.

        Raises:
            ValidationError: the email is already registered (→ 400)
            DatabaseError: insert failed for another reason (→ 500)
        """
        email = _normalize_email(payload.email)
        try:
            existing = await db.execute(select(User.id).where(User.email == email))
            if existing.scalar_one_or_none() is not None:
                raise ValidationError(message="Email is already registered", field="email")

            user = User(
                name=payload.name,
                email=email,
                password_hash=hash_password(payload.password),
                role=payload.role.value,
            )
            db.add(user)
            await db.flush()
        except DirectoryError:
            raise
        except IntegrityError:
            # Lost a race with a concurrent registration for the same email
            raise ValidationError(message="Email is already registered", field="email")
        except SQLAlchemyError as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not register the user. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Registered user %s (role=%s)", user.id, user.role)
        return self._auth_response(user)

    async def login(self, db: AsyncSession, payload: LoginRequest) -> AuthResponse:
        """
        Raises:
            UnauthenticatedError: unknown email or wrong password (→ 401)
        """
        email = _normalize_email(payload.email)
        try:
            result = await db.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(message="Could not log in. Please try again.")

        if user is None or not verify_password(payload.password, user.password_hash):
            raise UnauthenticatedError(message="Invalid credentials")

        logger.info("User %s logged in", user.id)
        return self._auth_response(user)

    async def get_profile(self, db: AsyncSession, identity: Identity) -> UserOut:
        """
        Raises:
            NotFoundError: the token outlived the account (→ 404)
        """
        try:
            user = await db.get(User, identity.user_id)
        except SQLAlchemyError as e:
            logger.error("Database error loading profile %s: %s", identity.user_id, str(e))
            raise DatabaseError(message="Could not load the profile. Please try again.")

        if user is None:
            raise NotFoundError(resource="user", resource_id=identity.user_id)
        return UserOut.model_validate(user)


user_service = UserService()
