"""
KeepNotes Backend — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── db_engine: In-memory SQLite engine (aiosqlite) with the schema created
    ├── db_session: AsyncSession bound to db_engine, for service tests
    ├── mock_db_session: AsyncMock session for store-failure paths
    ├── auth_headers: Factory returning Authorization headers for a user id
    └── test_client: HTTPX AsyncClient wired to the app, sessions from db_engine
"""

import os

# Override settings for testing BEFORE any keepnotes import
# (keepnotes.config and keepnotes.database read them at import time)
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator, Callable, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from keepnotes.database import Base, get_db_session
from keepnotes.models.note import Note  # noqa: F401
from keepnotes.security import create_access_token


@pytest_asyncio.fixture
async def db_engine():
    """
    Fresh in-memory database per test.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    A real AsyncSession for service-level tests.

    Usage:
        async def test_create(db_session):
            note = await NoteService().create_note(db_session, "user-1", data)
    """
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def auth_headers() -> Callable[[str], Dict[str, str]]:
    """
    Factory for bearer-token headers.

    Usage:
        await test_client.get("/api/notes", headers=auth_headers("user-1"))
    """
    def _headers(user_id: str = "user-1") -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return _headers


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    Async HTTP client talking to the FastAPI app through ASGITransport.

    The app's session dependency is overridden to use db_engine, with the
    same commit-on-success / rollback-on-error behavior as get_db_session.
    """
    from keepnotes.main import app

    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
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
    app.dependency_overrides.clear()
