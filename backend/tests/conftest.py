"""
VisitorBook Backend: Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the backend test suite.
How:   Every test that needs a store gets a fresh file-backed SQLite
       database (aiosqlite driver) in pytest's tmp_path, initialized
       exactly the way the app lifespan initializes PostgreSQL.

Fixtures:
    ├── database: Initialized Database store handle (disposed after the test)
    ├── test_settings: Settings pointing at that database
    ├── test_client: HTTPX AsyncClient wired to a fresh app via ASGITransport
    └── mock_db_session: AsyncMock session for failure-injection tests
"""

import os

# Override settings BEFORE any app imports so the module-level app never
# points at a real PostgreSQL server
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import Settings
from app.database import Database


@pytest.fixture
def database_url(tmp_path):
    """URL of a SQLite file unique to the current test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'visitorbook.db'}"


@pytest_asyncio.fixture
async def database(database_url):
    """
    Provides an initialized store handle.

    Tables exist and the visitor counter row is seeded with 0.
    """
    db = Database(database_url)
    await db.init()
    yield db
    await db.dispose()


@pytest.fixture
def test_settings(database_url):
    return Settings(database_url=database_url, log_level="WARNING")


@pytest_asyncio.fixture
async def test_client(database, test_settings):
    """
    Provides an async HTTP test client for endpoint testing.

    ASGITransport does not run the lifespan, so the app is bound to the
    already initialized `database` fixture.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from app.main import create_app

    app = create_app(settings=test_settings, database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception())
        await visitor_service.get_count(mock_db_session)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session
