"""
LocalBiz Directory — User Route Handlers
==========================================

What:  POST /users/register, POST /users/login, GET /users/profile.
Who:   Called by the Register, Login and Profile views of the client.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserOut
from app.security.gates import require_identity
from app.security.tokens import Identity
from app.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.api_prefix}/users", tags=["Users"])


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResponse,
    responses={
        400: {"description": "Invalid body or email already registered", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded", "model": ErrorResponse},
    },
    summary="Register a user and receive a session token",
)
async def register(
    body: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await user_service.register(db, body)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        401: {"description": "Invalid credentials", "model": ErrorResponse},
        429: {"description": "Rate limit exceeded", "model": ErrorResponse},
    },
    summary="Exchange email and password for a session token",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await user_service.login(db, body)


@router.get(
    "/profile",
    response_model=UserOut,
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="The caller's own account",
)
async def profile(
    identity: Identity = Depends(require_identity),
    db: AsyncSession = Depends(get_db_session),
) -> UserOut:
    return await user_service.get_profile(db, identity)
