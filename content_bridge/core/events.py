"""Application startup and shutdown events."""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

from fastapi import FastAPI
from prometheus_client import Counter, Histogram

from content_bridge.core.config import Settings
from content_bridge.core.logging import configure_logging, get_logger
from content_bridge.models import ContentType
from content_bridge.store import InMemoryContentStore

# Prometheus metrics
REQUESTS_TOTAL = Counter(
    "content_bridge_http_requests_total",
    "Total number of HTTP requests",
    labelnames=["method", "path"],
)

RESPONSES_TOTAL = Counter(
    "content_bridge_http_responses_total",
    "Total number of HTTP responses",
    labelnames=["status_code"],
)

REQUEST_DURATION_SECONDS = Histogram(
    "content_bridge_http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=["method", "path"],
)

HOMEPAGE_UPDATES_TOTAL = Counter(
    "content_bridge_homepage_updates_total",
    "Number of successful homepage updates",
)

IMPORTED_ITEMS_TOTAL = Counter(
    "content_bridge_imported_items_total",
    "Number of items processed by bulk import",
    labelnames=["outcome"],
)

logger = get_logger(__name__)


def _content_types(settings: Settings) -> list[ContentType]:
    return [
        ContentType(machine_name=name, label=name.replace("_", " ").title())
        for name in settings.CONTENT_TYPES
    ]


async def _start_sql_store(settings: Settings) -> None:
    from content_bridge.core import db
    from content_bridge.database.base import Base
    from content_bridge.database.repositories import SqlContentStore

    engine = db.get_engine(settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if db.async_session_factory is None:
        raise RuntimeError("Database not initialized - cannot seed content types")
    async with db.async_session_factory() as session:
        store = SqlContentStore(session)
        for content_type in _content_types(settings):
            await store.register_content_type(content_type)


def create_start_app_handler(
    app: FastAPI, settings: Settings
) -> Callable[[], Awaitable[None]]:
    """Create startup handler.

    Configures logging and prepares the configured content store backend.
    """

    async def start_app() -> None:
        configure_logging(level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)

        if settings.CONTENT_STORE_BACKEND == "sql":
            await _start_sql_store(settings)
        else:
            app.state.content_store = InMemoryContentStore(
                content_types=settings.CONTENT_TYPES
            )

        logger.info(
            "app_started",
            backend=settings.CONTENT_STORE_BACKEND,
            content_types=settings.CONTENT_TYPES,
        )

    return start_app


def create_stop_app_handler(
    app: FastAPI, settings: Settings
) -> Callable[[], Awaitable[None]]:
    """Create shutdown handler."""

    async def stop_app() -> None:
        if settings.CONTENT_STORE_BACKEND == "sql":
            from content_bridge.core import db

            await db.dispose_engine()
        logger.info("app_stopped")

    return stop_app


def create_lifespan(
    settings: Settings,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Wrap the start and stop handlers in a lifespan context."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await create_start_app_handler(app, settings)()
        try:
            yield
        finally:
            await create_stop_app_handler(app, settings)()

    return lifespan
