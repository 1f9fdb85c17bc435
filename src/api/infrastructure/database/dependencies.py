"""Database dependency injection for FastAPI.

Provides the platform engine, its session factory and a session dependency
with connection pooling. Tenant databases are reached through the tenant
connection registry instead.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_platform_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Module-level engine instance (created on first use)
_platform_engine: AsyncEngine | None = None
_platform_sessionmaker: async_sessionmaker[AsyncSession] | None = None

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()


def get_platform_engine() -> AsyncEngine:
    """Get the platform database engine (singleton).

    Creates engine on first call and caches for subsequent calls.
    Uses double-check locking for thread-safe initialization.
    Also creates and caches the sessionmaker for efficient session creation.

    Returns:
        Configured async engine for the platform database
    """
    global _platform_engine, _platform_sessionmaker
    if _platform_engine is None:
        with _engine_lock:
            # Double-check after acquiring lock
            if _platform_engine is None:
                settings = get_database_settings()
                _platform_engine = create_platform_engine(settings)
                _platform_sessionmaker = async_sessionmaker(
                    _platform_engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.engine_created(
                    host=settings.host,
                    database=settings.database,
                    pool_size=settings.pool_size,
                )
    return _platform_engine


def get_platform_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the platform session factory, creating the engine if needed."""
    get_platform_engine()
    assert _platform_sessionmaker is not None
    return _platform_sessionmaker


async def get_platform_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a platform session (FastAPI dependency).

    The session is configured to NOT auto-commit. Callers must explicitly
    manage transactions using `async with session.begin()` or commit.

    Yields:
        AsyncSession for platform database operations
    """
    async with get_platform_sessionmaker()() as session:
        yield session


async def close_database_connections() -> None:
    """Close the platform engine connections.

    Should be called on application shutdown to properly cleanup connections.
    Also resets the sessionmaker to allow reinitialization.
    """
    global _platform_engine, _platform_sessionmaker

    if _platform_engine is not None:
        await _platform_engine.dispose()
        _probe.engine_disposed()
        _platform_engine = None
        _platform_sessionmaker = None
