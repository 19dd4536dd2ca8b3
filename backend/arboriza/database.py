"""
Arboriza Backend - Database Engine & Session Management
========================================================

What:  Async SQLAlchemy engine, session factory, declarative Base and the
       FastAPI session dependency.
How:   `Database` bundles one engine (connection pool) with its session
       factory. `create_app()` builds exactly one per application and stores
       it on `app.state.database`; route handlers receive a session through
       `get_db_session`.
When:  Engine is created with the app (lazily connects); sessions are
       created per request; the pool is disposed on shutdown.

Transactions:
    - Reads run in the session's implicit transaction.
    - Single-statement writes commit right after the statement.
    - Multi-statement writes (registration, room creation) use
      `async with session.begin()`: commit on success, rollback on error.
    - The dependency rolls back whatever is still open when the handler
      raises, and always closes the session.
"""

import logging
from typing import Any, AsyncGenerator, Dict

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from arboriza.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models (shared metadata for Alembic)."""
    pass


class Database:
    """
    Process-scoped store handle: async engine plus session factory.

    Pool configuration comes from settings and only applies to Postgres;
    SQLite (used by the test suite) keeps SQLAlchemy's default pool.
    """

    def __init__(self, settings: Settings):
        engine_kwargs: Dict[str, Any] = {
            "echo": settings.log_level == "DEBUG",
        }
        if settings.is_postgres:
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_pre_ping=settings.db_pool_pre_ping,
                pool_recycle=3600,
            )
            ssl_context = settings.ssl_context()
            if ssl_context is not None:
                engine_kwargs["connect_args"] = {"ssl": ssl_context}

        self.engine: AsyncEngine = create_async_engine(settings.database_url, **engine_kwargs)

        # expire_on_commit=False: returned ORM objects stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def ping(self) -> None:
        """Run SELECT 1 on a fresh connection; raises if the store is unreachable."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_all(self) -> None:
        """Create every mapped table. Used by tests; deployments run Alembic."""
        # Import models so they register with Base.metadata
        from arboriza import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Close all pooled connections. Called on application shutdown."""
        await self.engine.dispose()


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the application's Database."""
    return request.app.state.database


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the application's factory
        2. Yields it to the route handler
        3. On error: rolls back anything still open, then re-raises
        4. Always: closes the session (returns the connection to the pool)

    Example usage in a route:
        @router.get("/rooms")
        async def list_rooms(db: AsyncSession = Depends(get_db_session)):
            return await forum_service.list_rooms(db)
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
