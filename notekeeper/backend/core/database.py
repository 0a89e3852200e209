"""
Database Configuration.

SQLAlchemy async engine and session management.
Uses lazy initialization to prevent import-time failures when configuration is missing.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from notekeeper.backend.core.exceptions import StorageError
from notekeeper.backend.core.logging import get_logger

logger = get_logger(__name__)

# Module-level state for lazy initialization
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _engine_options(url: str) -> dict[str, Any]:
    """Build create_async_engine keyword arguments for the given URL."""
    from notekeeper.backend.core.config import get_app_config

    db_config = get_app_config().database
    options: dict[str, Any] = {"echo": db_config.echo}

    parsed = make_url(url)
    if parsed.get_backend_name() == "sqlite":
        # SQLite files live relative to the working directory
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
        return options

    options.update(
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_recycle=db_config.pool_recycle,
    )
    return options


def _create_engine() -> AsyncEngine:
    """Create async SQLAlchemy engine."""
    from notekeeper.backend.core.config import get_database_url

    url = get_database_url()
    engine = create_async_engine(url, **_engine_options(url))
    logger.debug(
        "Database engine created",
        extra={"url": make_url(url).render_as_string(hide_password=True)},
    )
    return engine


def get_engine() -> AsyncEngine:
    """
    Get the database engine, creating it on first use.

    Returns:
        SQLAlchemy async engine instance
    """
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Get the session factory, creating it on first use.

    Also used as a FastAPI dependency by endpoints that open one
    session per unit of work (the batched procedure transport).
    """
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
        )
    return _async_session_factory


@asynccontextmanager
async def session_scope(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """
    Open a session that commits on success and rolls back on error.

    A database error raised by the commit itself surfaces as StorageError.

    Usage:
        async with session_scope(get_session_factory()) as session:
            await NoteService(session).create_note(data)
    """
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise

        try:
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error("Commit failed", extra={"error": str(e)})
            raise StorageError("Database operation failed: commit") from e


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency that provides a database session.

    Usage in endpoints:
        @router.get("/items")
        async def get_items(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with session_scope(get_session_factory()) as session:
        yield session


async def create_tables() -> None:
    """Create all tables known to the model metadata (idempotent)."""
    from notekeeper.backend.models.base import Base
    from notekeeper.backend.models.note import Note  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")


async def dispose_engine() -> None:
    """Dispose the engine and forget the cached session factory."""
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _async_session_factory = None
