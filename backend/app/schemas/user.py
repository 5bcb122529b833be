"""
LocalBiz Directory — User Schemas
===================================

What:  Registration/login request bodies and the user payloads returned by
       /users endpoints and embedded as a business owner.
"""

from pydantic import EmailStr, Field

from app.models.user import Role
from app.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """
    Body of POST /api/users/register.

    role defaults to USER; registering as ADMIN is how business owners sign up.
    """
    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(min_length=1, max_length=256)
    role: Role = Field(default=Role.USER)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserOut(CamelModel):
    """Public view of a user. Never carries the password hash."""
    id: int
    name: str
    email: str
    role: Role


class AuthResponse(CamelModel):
    """
    Returned by register (201) and login (200).

    The client stores `token` and sends it back as `Authorization: Bearer <token>`.
    """
    token: str
    token_type: str = "bearer"
    user: UserOut
