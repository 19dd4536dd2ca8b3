"""
Arboriza Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own application built by create_app() on top of a
       fresh SQLite file (aiosqlite driver) with the schema created from the
       ORM metadata, plus an HTTPX AsyncClient talking to it in-process.

Fixture Hierarchy (all function-scoped):
    ├── test_settings: Settings pointing at tmp_path/test.db
    ├── app:           FastAPI app with its tables created
    ├── client:        HTTPX AsyncClient bound to the app
    ├── db_session:    AsyncSession on the same database, for seeding/asserting
    ├── mock_db_session: AsyncMock session for store-failure paths
    ├── row_count:     table row counts through db_session
    └── make_user / make_room: helpers going through the public API
"""

import os
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

# Keep test output quiet; set before the app modules read their settings
os.environ["LOG_LEVEL"] = "WARNING"

from arboriza.config import Settings  # noqa: E402
from arboriza.main import create_app  # noqa: E402


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        log_level="WARNING",
        rate_limit_requests=10_000,
        rate_limit_window=900,
    )


@pytest_asyncio.fixture
async def app(test_settings):
    application = create_app(test_settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client routed straight into the ASGI app.

    Usage:
        async def test_health(client):
            response = await client.get("/api/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def db_session(app):
    """A separate session on the test database for seeding and row counts."""
    async with app.state.database.session_factory() as session:
        yield session


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for exercising store-failure paths.

    `begin()` works as an async context manager so transactional services
    can run against it.
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()

    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=transaction)
    transaction.__aexit__ = AsyncMock(return_value=False)
    session.begin = MagicMock(return_value=transaction)
    return session


@pytest.fixture
def make_user(client):
    """Register a user through the API and return its {id, username}."""

    async def _make_user(username: str = "maria", password: str = "secret") -> dict:
        response = await client.post(
            "/api/auth/register", json={"username": username, "password": password}
        )
        assert response.status_code == 201, response.text
        return response.json()["user"]

    return _make_user


@pytest.fixture
def make_room(client):
    """Create a room through the API and return the room row."""

    async def _make_room(creator_id: int, name: str = "Ipês do Recife", description: str = None) -> dict:
        response = await client.post(
            "/api/rooms",
            json={"name": name, "creator_id": creator_id, "description": description},
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _make_room


@pytest.fixture
def row_count(db_session):
    """
    Count the rows of a model's table.

    The read transaction is ended right away: SQLite would otherwise keep a
    shared lock that blocks the app's writes.
    """

    async def _row_count(model) -> int:
        result = await db_session.execute(select(func.count()).select_from(model))
        count = result.scalar_one()
        await db_session.rollback()
        return count

    return _row_count
