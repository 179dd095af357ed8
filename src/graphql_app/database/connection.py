"""
Database connection management
"""

import threading
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import HTTPException, Request, status
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import get_database_url, settings, to_async_url
from ..logging import get_logger

logger = get_logger(__name__)

# Process-wide connection pool, created at startup and disposed at shutdown
_async_engine: AsyncEngine | None = None
_async_session_local: async_sessionmaker[AsyncSession] | None = None
_initialized = False
_init_lock = threading.Lock()

# Errors that mean a pooled connection could not be handed to a request
CONNECTION_UNAVAILABLE_ERRORS = (PoolTimeoutError, DBAPIError, OSError)


def reset_database() -> None:
    """Forget the current engine without disposing it (for tests)."""
    global _async_engine, _async_session_local, _initialized
    _async_engine = None
    _async_session_local = None
    _initialized = False


def make_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


def init_database(
    database_url: str | None = None,
    force_reinit: bool = False,
    engine: AsyncEngine | None = None,
) -> AsyncEngine:
    """Initialize the shared async connection pool.

    An already built engine can be passed in, which is how tests run against
    an in-memory SQLite database.
    """
    global _async_engine, _async_session_local, _initialized

    if _initialized and not force_reinit and database_url is None and engine is None:
        assert _async_engine is not None
        return _async_engine

    with _init_lock:
        if _initialized and not force_reinit and database_url is None and engine is None:
            assert _async_engine is not None
            return _async_engine

        if engine is None:
            db_url = to_async_url(database_url or get_database_url())
            engine = create_async_engine(
                db_url,
                pool_size=settings.database_pool_size,
                max_overflow=settings.database_max_overflow,
                pool_timeout=settings.database_pool_timeout,
                echo=settings.sql_echo,
            )

        _async_engine = engine
        _async_session_local = make_session_factory(engine)
        _initialized = True
        logger.info(
            "Database initialized",
            database_url=_async_engine.url.render_as_string(hide_password=True),
        )
        return _async_engine


async def dispose_database() -> None:
    """Close every pooled connection and forget the engine."""
    if _async_engine is not None:
        await _async_engine.dispose()
        logger.info("Database connections disposed")
    reset_database()


def get_async_engine() -> AsyncEngine:
    """Get the shared async SQLAlchemy engine."""
    if _async_engine is None:
        return init_database()
    return _async_engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory bound to the shared pool."""
    if _async_session_local is None:
        init_database()

    if _async_session_local is None:
        raise RuntimeError("Database not initialized")
    return _async_session_local


async def test_database_connection(engine: AsyncEngine | None = None) -> tuple[bool, str | None]:
    """
    Test the database connection (the shared pool unless an engine is given).

    Returns:
        tuple: (success: bool, error_message: str | None)
    """
    try:
        async with (engine or get_async_engine()).connect() as conn:
            await conn.execute(text("SELECT 1"))
            return True, None
    except CONNECTION_UNAVAILABLE_ERRORS as e:
        error_str = str(e)
        if "Connection refused" in error_str or "could not connect" in error_str:
            return False, (
                f"Cannot connect to database server: {error_str}\n"
                f"Please check that PostgreSQL is running and accessible."
            )
        if "does not exist" in error_str:
            return False, (
                f"Cannot connect to database: {error_str}\n"
                f"Create the database and run `graphql-app db upgrade`."
            )
        return False, f"Database connection error ({type(e).__name__}): {error_str}"


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session from the shared pool."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def get_request_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency holding one pooled connection for a whole request.

    The connection is checked out before the request is processed so that an
    exhausted pool or an unreachable database turns into a 503 instead of a
    GraphQL error. It goes back to the pool when the request finishes.
    """
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        session_factory = get_session_factory()

    async with session_factory() as session:
        try:
            await session.connection()
        except CONNECTION_UNAVAILABLE_ERRORS as e:
            logger.warning(
                "Database connection unavailable",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Database connection unavailable",
            ) from e

        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
