"""Tests for application startup and shutdown."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI

from content_bridge.core import db
from content_bridge.core.config import Settings
from content_bridge.core.events import (
    create_lifespan,
    create_start_app_handler,
    create_stop_app_handler,
)
from content_bridge.database.base import Base
from content_bridge.database.repositories import SqlContentStore
from content_bridge.store import InMemoryContentStore


@pytest.fixture
def memory_settings() -> Settings:
    return Settings(
        CONTENT_STORE_BACKEND="memory",
        JSON_LOGS=False,
        CONTENT_TYPES=["page", "article", "event"],
    )


@pytest.mark.asyncio
async def test_start_handler_creates_memory_store(memory_settings: Settings) -> None:
    """Startup registers every configured content type."""
    app = FastAPI()

    await create_start_app_handler(app, memory_settings)()

    store = app.state.content_store
    assert isinstance(store, InMemoryContentStore)
    for name in ("page", "article", "event"):
        assert await store.content_type_exists(name)
    assert not await store.content_type_exists("blog")


@pytest.mark.asyncio
async def test_stop_handler_memory_backend(memory_settings: Settings) -> None:
    """Shutdown with the memory backend has nothing to release."""
    app = FastAPI()

    await create_stop_app_handler(app, memory_settings)()


@pytest.mark.asyncio
async def test_lifespan_runs_start_and_stop(memory_settings: Settings) -> None:
    app = FastAPI()
    lifespan = create_lifespan(memory_settings)

    async with lifespan(app):
        assert isinstance(app.state.content_store, InMemoryContentStore)


@pytest.mark.asyncio
async def test_start_and_stop_sql_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    """Startup creates the tables and registers each configured type."""
    monkeypatch.setattr(db, "engine", None)
    monkeypatch.setattr(db, "async_session_factory", None)
    monkeypatch.delenv("TESTING", raising=False)
    monkeypatch.delenv("TEST_DATABASE_URL", raising=False)
    settings = Settings(
        CONTENT_STORE_BACKEND="sql",
        DATABASE_URL="postgresql://bridge@startup-db/bridge",
        JSON_LOGS=False,
        CONTENT_TYPES=["page", "article"],
    )
    app = FastAPI()

    connection = AsyncMock()
    engine = MagicMock()
    engine.begin.return_value.__aenter__.return_value = connection
    engine.dispose = AsyncMock()
    session_factory = MagicMock()
    session_factory.return_value.__aenter__.return_value = AsyncMock()

    with patch(
        "content_bridge.core.db.create_async_engine", return_value=engine
    ) as create_engine:
        with patch(
            "content_bridge.core.db.async_sessionmaker", return_value=session_factory
        ):
            with patch.object(
                SqlContentStore, "register_content_type", new_callable=AsyncMock
            ) as register:
                await create_start_app_handler(app, settings)()

    assert create_engine.call_args.args == (
        "postgresql+asyncpg://bridge@startup-db/bridge",
    )
    connection.run_sync.assert_awaited_once_with(Base.metadata.create_all)
    assert [call.args[0].machine_name for call in register.await_args_list] == [
        "page",
        "article",
    ]
    assert not hasattr(app.state, "content_store")

    await create_stop_app_handler(app, settings)()

    engine.dispose.assert_awaited_once()
    assert db.engine is None
