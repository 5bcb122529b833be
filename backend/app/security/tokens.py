"""
LocalBiz Directory — Session Token Codec
==========================================

What:  Issues and verifies signed session tokens carrying a user id and role.
How:   HS256 JWTs via python-jose. Claims:
           sub   user id (string, as the JWT spec requires)
           role  'USER' or 'ADMIN'
           exp   expiry, ACCESS_TOKEN_EXPIRE_MINUTES after issue
Who:   UserService issues tokens on register/login; the auth gate verifies them.

The role is trusted from the token for its whole lifetime. A role change in
the database is only seen after the user logs in again.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.exceptions import InvalidTokenError
from app.models.user import Role


@dataclass(frozen=True)
class Identity:
    """The (user_id, role) pair resolved from a verified token."""

    user_id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class TokenCodec:
    """Pure functions over a shared secret; holds no per-request state."""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, user_id: int, role: Role, expires_minutes: Optional[int] = None) -> str:
        minutes = self.expire_minutes if expires_minutes is None else expires_minutes
        expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
        claims = {
            "sub": str(user_id),
            "role": Role(role).value,
            "exp": expire,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Identity:
        """
        Check signature and expiry and return the embedded identity.

        Raises:
            InvalidTokenError: bad signature, expired, or malformed claims
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise InvalidTokenError("token expired")
        except JWTError as e:
            raise InvalidTokenError(f"token rejected: {e}")

        sub = payload.get("sub")
        role = payload.get("role")
        try:
            user_id = int(sub)
            resolved_role = Role(role)
        except (TypeError, ValueError):
            raise InvalidTokenError("malformed token payload")

        return Identity(user_id=user_id, role=resolved_role)


token_codec = TokenCodec(
    secret=settings.jwt_secret,
    algorithm=settings.jwt_algorithm,
    expire_minutes=settings.access_token_expire_minutes,
)
