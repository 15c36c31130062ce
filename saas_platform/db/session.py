from __future__ import annotations

import asyncio
import logging
from typing import AsyncGenerator, Optional

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from .config import get_settings

logger = logging.getLogger(__name__)

_SETTINGS = get_settings()
_ENGINE: AsyncEngine | None = None
_SESSION_MAKER: async_sessionmaker[AsyncSession] | None = None

# Errors raised by the driver when the store cannot be reached.
TRANSIENT_ERRORS = (OperationalError, InterfaceError)


def _ensure_engine_initialized() -> None:
    """
    Lazily initialize the AsyncEngine and session maker.
    """
    global _ENGINE, _SESSION_MAKER
    if _ENGINE is None:
        _ENGINE = create_async_engine(
            _SETTINGS.async_database_url,
            echo=_SETTINGS.SQL_ECHO,
            pool_pre_ping=True,
        )
    if _SESSION_MAKER is None:
        _SESSION_MAKER = create_session_maker(_ENGINE)


# PUBLIC_INTERFACE
def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Build the session factory used for every unit of work."""
    return async_sessionmaker(
        bind=engine, expire_on_commit=False, autoflush=False, autocommit=False
    )


# PUBLIC_INTERFACE
def get_engine() -> AsyncEngine:
    """Return the global AsyncEngine instance."""
    _ensure_engine_initialized()
    assert _ENGINE is not None
    return _ENGINE


# PUBLIC_INTERFACE
def get_session_maker() -> async_sessionmaker[AsyncSession]:
    """Return the global session factory."""
    _ensure_engine_initialized()
    assert _SESSION_MAKER is not None
    return _SESSION_MAKER


# PUBLIC_INTERFACE
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield an AsyncSession with a live connection.
    Ensures engine/session factory is initialized.
    """
    async with get_session_maker()() as session:
        await connect_with_retry(session)
        yield session


# PUBLIC_INTERFACE
async def connect_with_retry(
    session: AsyncSession,
    *,
    max_attempts: Optional[int] = None,
    base_delay: Optional[float] = None,
    max_delay: Optional[float] = None,
) -> None:
    """
    Acquire the session's connection, retrying transient connectivity failures.

    Delays grow exponentially from base_delay and never exceed max_delay. Once
    the attempts are exhausted the last driver error is re-raised untouched.
    Only connection acquisition is retried; statements are never replayed.
    """
    attempts = max_attempts or _SETTINGS.DB_CONNECT_MAX_RETRIES
    delay = _SETTINGS.DB_CONNECT_RETRY_BASE_DELAY if base_delay is None else base_delay
    cap = _SETTINGS.DB_CONNECT_MAX_RETRY_DELAY if max_delay is None else max_delay

    for attempt in range(1, attempts + 1):
        try:
            await session.connection()
            return
        except TRANSIENT_ERRORS as exc:
            if attempt >= attempts:
                logger.error("Database unreachable after %d attempts: %s", attempt, exc)
                raise
            wait = min(cap, delay * (2 ** (attempt - 1)))
            logger.warning(
                "Database connection attempt %d/%d failed (%s); retrying in %.2fs",
                attempt,
                attempts,
                exc.__class__.__name__,
                wait,
            )
            await session.rollback()
            await asyncio.sleep(wait)
