"""
LocalBiz Directory — Test Configuration (conftest.py)
=======================================================

What:  Shared fixtures for unit and endpoint tests.
How:   Unit tests drive services with a mocked AsyncSession. Endpoint tests
       run the real app over httpx's ASGITransport, with get_db_session
       overridden to use a fresh in-memory SQLite database per test.

Fixtures:
    mock_db_session   AsyncMock standing in for AsyncSession
    db_engine         in-memory aiosqlite engine with all tables and the
                      seed categories
    db_session        a session on db_engine, for service-level tests
    test_client       httpx AsyncClient bound to the app and db_engine
    register_user     coroutine fixture: register via the API, return the body
"""

import os

# Settings are read at import time; these must be set before any app import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["SEED_CATEGORIES_ON_STARTUP"] = "false"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import build_engine, get_db_session, init_models
from app.services.category_service import category_service


@pytest.fixture
def mock_db_session():
    """
    A mock async database session.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = row
        result = await business_service.get_business(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.get = AsyncMock()
    session.add = MagicMock()
    return session


@pytest_asyncio.fixture
async def db_engine():
    # StaticPool: every session shares the one in-memory connection
    engine = build_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    await init_models(engine)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await category_service.ensure_defaults(session)
        await session.commit()

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the app; every request gets its own session
    on the test database, committed or rolled back like in production.
    """
    from app.main import app

    async def override_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture
def register_user(test_client):
    """Register through the API. Returns the AuthResponse body."""

    async def _register(name="Ada", email=None, password="s3cret-pass", role="USER"):
        email = email or f"{name.lower()}@directory.io"
        response = await test_client.post(
            "/api/users/register",
            json={"name": name, "email": email, "password": password, "role": role},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _register
