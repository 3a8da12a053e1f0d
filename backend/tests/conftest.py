"""
Tasklane Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for pure unit tests
    ├── db_engine: in-memory SQLite (aiosqlite) with all tables created
    │   └── session_factory
    │       ├── db_session: one session, as a handler would receive it
    │       ├── test_client: HTTPX AsyncClient against a fresh app
    │       └── admin_client: same, with the admin routes mounted
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SEED_ON_STARTUP"] = "false"
os.environ["ENABLE_ADMIN_ROUTES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  (registers tables on Base.metadata)
from app.config import settings
from app.database import Base, get_db_session


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_lookup(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = board
            result = await ensure_board_exists(mock_db_session, "1")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite database, fresh for each test.

    StaticPool keeps the single in-memory connection alive across sessions,
    so data written by one request is visible to the next.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# HTTP Fixtures
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def _client_for(session_factory):
    """
    Build a fresh app (fresh middleware state) wired to the test database.

    The overridden dependency mirrors get_db_session: commit on success,
    rollback on error.
    """
    from app.main import create_app

    application = create_app()

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_db_session] = override_get_db_session

    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    Usage:
        async def test_get_boards(test_client):
            response = await test_client.get("/api/boards")
            assert response.status_code == 200
    """
    async with _client_for(session_factory) as client:
        yield client


@pytest_asyncio.fixture
async def admin_client(session_factory, monkeypatch):
    """Client for an app built with ENABLE_ADMIN_ROUTES on."""
    monkeypatch.setattr(settings, "enable_admin_routes", True)
    async with _client_for(session_factory) as client:
        yield client
