"""
Eats Server: Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the whole suite.
How:   Every test that needs a database gets its own SQLite file under
       pytest's tmp_path, served through aiosqlite, so tests never share rows
       and ids always start at 1.

Fixture Overview:
    test_settings:    Settings pointing at a fresh SQLite file
    app:              create_app(test_settings) with tables created
    db_session:       AsyncSession bound to the app's engine (store tests)
    test_client:      HTTPX AsyncClient talking to `app` over ASGI
    add_places:       Inserts N places directly, bypassing the API
    place_payload:    Valid JSON body for POST/PUT /places
    mock_db_session:  AsyncMock session for driver-failure tests
"""

import os

# Environment for the module-level `eats.main:app`, set before any eats import
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from eats.config import Settings  # noqa: E402
from eats.database import create_tables, dispose_engine  # noqa: E402
from eats.main import create_app  # noqa: E402
from eats.models.place import Place  # noqa: E402


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'eats.db'}",
        log_level="WARNING",
        db_create_tables=True,
    )


@pytest_asyncio.fixture
async def app(test_settings):
    """
    A fully wired application with an empty `places` table.

    ASGITransport does not run the lifespan, so tables are created here
    and the engine is disposed on teardown.
    """
    application = create_app(test_settings)
    await create_tables(application.state.engine)
    yield application
    await dispose_engine(application.state.engine)


@pytest_asyncio.fixture
async def db_session(app):
    async with app.state.session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(app):
    """
    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def add_places(app):
    """
    Returns a coroutine function inserting `count` places named
    "Place 0" .. "Place N-1", optionally already approved.
    """

    async def _add(count: int = 1, approved: bool = False):
        async with app.state.session_factory() as session:
            for i in range(max(count, 1)):
                session.add(
                    Place(
                        name=f"Place {i}",
                        budget=2,
                        location="location",
                        mood="mood",
                        cuisine="cuisine",
                        mealtime="mealtime",
                        rating=4,
                        approved=approved,
                    )
                )
            await session.commit()

    return _add


@pytest.fixture
def place_payload():
    return {
        "name": "testname",
        "budget": 12,
        "location": "testlocation",
        "mood": "testmood",
        "cuisine": "testcuisine",
        "mealtime": "testmealtime",
        "rating": 1,
    }


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession for driver-failure paths.

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
