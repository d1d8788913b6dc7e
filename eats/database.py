"""
Eats Server: Database Engine & Session Management
====================================================

What:  Async SQLAlchemy engine construction, session factory, table bootstrap,
       and the per-request session dependency.
How:   `build_engine()` creates a pooled async engine from Settings. The
       application factory stores the engine and its session factory on
       `app.state`; `get_db_session()` pulls the factory from the current
       request, so every app instance (and every test) owns its own pool.
Who:   Used by `eats.main` (lifespan) and by route handlers via Depends().

Connection Pooling:
    PostgreSQL (asyncpg): QueuePool sized by DB_POOL_SIZE / DB_MAX_OVERFLOW,
    pre-ping enabled, connections recycled hourly.
    SQLite (aiosqlite): SQLAlchemy's default pool for the dialect; pool sizing
    arguments are not accepted there and are skipped.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from eats.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object between `create_tables()` and Alembic.
    """
    pass


# ── Engine Construction ───────────────────────────────────────────────────
def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine (connection pool) for the configured database.

    No connection is opened here; the first checkout happens on the first
    query, so constructing an app never touches the network.
    """
    url = settings.sqlalchemy_url
    kwargs = {
        # Echo SQL only in DEBUG mode
        "echo": settings.log_level == "DEBUG",
    }
    if not settings.is_sqlite:
        kwargs.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )

    logger.info("Database target: %s", url.render_as_string(hide_password=True))
    return create_async_engine(url, **kwargs)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False: records returned by the store stay readable after
    the store commits (response serialization happens later).
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


# ── Table Bootstrap ───────────────────────────────────────────────────────
async def create_tables(engine: AsyncEngine) -> None:
    """
    Idempotently create every table registered on `Base.metadata`.

    Equivalent to CREATE TABLE IF NOT EXISTS; existing tables are left alone.
    Errors propagate: failing to reach the database at startup is fatal.
    """
    # Registers Place on Base.metadata
    from eats.models import place  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    logger.info("Tables created if not already present")


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's session factory
        2. Yields it to the route handler
        3. On error: rolls back and re-raises for the global error handlers
        4. Always: closes the session (returns the connection to the pool)

    Writes are committed by PlaceStore before the handler returns. Cleanup
    after `yield` runs once the response has been sent, so a commit here
    could fail after the client was already told the write succeeded.
    """
    session_factory: async_sessionmaker[AsyncSession] = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_engine(engine: AsyncEngine) -> None:
    """Closes all pooled connections. Called during application shutdown."""
    await engine.dispose()
