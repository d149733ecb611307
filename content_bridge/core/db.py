"""Database connection and session management."""

import os
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from content_bridge.core.config import Settings, settings

# Lazy database initialization - don't create engine at import time
engine: AsyncEngine | None = None
async_session_factory: async_sessionmaker[AsyncSession] | None = None


def to_async_url(database_url: str) -> str:
    """Rewrite a PostgreSQL URL to use the asyncpg driver."""
    for prefix in ("postgresql+psycopg2://", "postgresql://", "postgres://"):
        if database_url.startswith(prefix):
            return database_url.replace(prefix, "postgresql+asyncpg://", 1)
    return database_url


def _initialize_database(app_settings: Settings | None = None) -> None:
    """Initialize database engine and session factory.

    Args:
        app_settings: Settings to connect with; defaults to the environment
    """
    global engine, async_session_factory

    if engine is not None:
        return  # Already initialized

    if os.getenv("TESTING") == "true" and not os.getenv("TEST_DATABASE_URL"):
        # Tests without a database use the in-memory store
        return

    app_settings = app_settings or settings
    engine = create_async_engine(
        to_async_url(app_settings.DATABASE_URL),
        pool_size=app_settings.MAX_CONNECTIONS,
        max_overflow=0,
        echo=False,
    )

    async_session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


def get_engine(app_settings: Settings | None = None) -> AsyncEngine:
    """Get the engine, creating it on first use."""
    _initialize_database(app_settings)
    if engine is None:
        raise RuntimeError("Database not initialized - cannot create engine")
    return engine


async def dispose_engine() -> None:
    """Close all pooled connections."""
    global engine, async_session_factory

    if engine is not None:
        await engine.dispose()
    engine = None
    async_session_factory = None


async def get_session(
    app_settings: Settings | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Get database session.

    Args:
        app_settings: Settings to connect with; defaults to the environment

    Yields:
        AsyncSession: Database session
    """
    _initialize_database(app_settings)

    if async_session_factory is None:
        raise RuntimeError("Database not initialized - cannot create session")

    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
