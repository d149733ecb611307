"""FastAPI dependencies shared by the v1 routes."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request

from content_bridge.core.config import Settings, settings
from content_bridge.core.errors import InternalError, ValidationError
from content_bridge.models import Actor
from content_bridge.models.actor import ANONYMOUS_ID
from content_bridge.store import ContentStore

ACTOR_HEADER = "X-Actor-ID"


def get_settings(request: Request) -> Settings:
    """Return the settings the application was built with."""
    return getattr(request.app.state, "settings", settings)


async def get_content_store(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[ContentStore, None]:
    """Yield the configured content store.

    The sql backend gets a fresh session per request; the memory backend
    shares the instance created at startup.
    """
    if settings.CONTENT_STORE_BACKEND == "sql":
        from content_bridge.core.db import get_session
        from content_bridge.database.repositories import SqlContentStore

        async for session in get_session(settings):
            yield SqlContentStore(session)
        return

    store = getattr(request.app.state, "content_store", None)
    if store is None:
        raise InternalError("Content store is not initialized")
    yield store


def resolve_actor(actor_id: int, settings: Settings) -> Actor:
    """Build an actor with the permissions configured for its id."""
    if actor_id == ANONYMOUS_ID:
        return Actor(id=ANONYMOUS_ID, permissions=frozenset(settings.ANONYMOUS_PERMISSIONS))

    permissions = set(settings.AUTHENTICATED_PERMISSIONS)
    permissions.update(settings.ACTOR_PERMISSIONS.get(str(actor_id), []))
    return Actor(id=actor_id, permissions=frozenset(permissions))


def get_current_actor(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Actor:
    """Resolve the caller from the ``X-Actor-ID`` header.

    A missing header means anonymous.

    Raises:
        ValidationError: If the header is not a non-negative integer
    """
    raw = request.headers.get(ACTOR_HEADER, "").strip()
    if not raw:
        return resolve_actor(ANONYMOUS_ID, settings)
    try:
        actor_id = int(raw)
    except ValueError:
        raise ValidationError(f"Invalid {ACTOR_HEADER} header")
    if actor_id < 0:
        raise ValidationError(f"Invalid {ACTOR_HEADER} header")
    return resolve_actor(actor_id, settings)
