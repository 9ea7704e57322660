"""
TechNotes Backend - Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── mock_db_session: AsyncMock session for service unit tests (no DB)
    ├── db_engine: in-memory aiosqlite engine with all tables created
    ├── db_session_factory: sessionmaker bound to db_engine
    └── test_client: HTTPX AsyncClient against a fresh app using db_engine
"""

import os

# Settings are read at import time, so the environment must be in place
# before anything from technotes is imported.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CORS_ORIGINS"] = "http://localhost:3000,https://technotes.example.com"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from technotes.database import Base, get_db_session
from technotes.models.note import Note  # noqa: F401
from technotes.models.user import User  # noqa: F401


ALLOWED_ORIGIN = "http://localhost:3000"


def scalar_result(value: Any) -> MagicMock:
    """A mock db.execute() result whose scalar_one_or_none() returns value."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar.return_value = value
    return result


# ══════════════════════════════════════════════════════════════════════════
# Service Unit Test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_delete(mock_db_session):
            mock_db_session.execute.return_value = scalar_result(None)
            ...
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database and HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite engine with the schema created.

    StaticPool keeps the single in-memory connection alive for the whole test,
    so every session sees the same database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_client(db_session_factory):
    """
    HTTPX AsyncClient talking to a fresh app whose sessions use db_engine.

    Requests carry no Origin header unless a test sets one.
    """
    from technotes.main import create_app

    app = create_app()

    async def override_get_db_session():
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def create_user(test_client):
    """Factory: POST /users and return the created user's record from GET /users."""

    async def _create(
        username: str = "alice",
        password: str = "s3cret-pass",
        roles: Optional[list] = None,
    ) -> dict:
        response = await test_client.post(
            "/users",
            json={"username": username, "password": password, "roles": roles or ["Employee"]},
        )
        assert response.status_code == 201, response.text
        users = (await test_client.get("/users")).json()
        return next(u for u in users if u["username"] == username)

    return _create
