"""Tests for the default view access policy."""

import pytest

from content_bridge.models import Actor, ContentDraft
from content_bridge.models.actor import (
    ACCESS_CONTENT,
    BYPASS_ACCESS,
    VIEW_OWN_UNPUBLISHED,
)
from content_bridge.store import InMemoryContentStore, default_access_policy

ANONYMOUS = Actor(permissions=frozenset({ACCESS_CONTENT}))
OWNER = Actor(id=5, permissions=frozenset({ACCESS_CONTENT, VIEW_OWN_UNPUBLISHED}))
STRANGER = Actor(id=6, permissions=frozenset({ACCESS_CONTENT, VIEW_OWN_UNPUBLISHED}))
ADMIN = Actor(id=1, permissions=frozenset({BYPASS_ACCESS}))
NOBODY = Actor(id=8)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "actor,published,expected",
    [
        (ANONYMOUS, True, True),
        (ANONYMOUS, False, False),
        (OWNER, True, True),
        (OWNER, False, True),
        (STRANGER, False, False),
        (ADMIN, True, True),
        (ADMIN, False, True),
        (NOBODY, True, False),
        (NOBODY, False, False),
    ],
)
async def test_default_policy(
    content_store: InMemoryContentStore,
    actor: Actor,
    published: bool,
    expected: bool,
) -> None:
    item = await content_store.create(
        ContentDraft(title="Item", published=published, owner_id=5)
    )

    assert default_access_policy(item, actor) is expected
    assert await content_store.can_view(item, actor) is expected


@pytest.mark.asyncio
async def test_anonymous_never_owns_unpublished(
    content_store: InMemoryContentStore,
) -> None:
    """Items owned by the anonymous user stay hidden to anonymous callers."""
    item = await content_store.create(
        ContentDraft(title="Orphan", published=False, owner_id=0)
    )
    anonymous = Actor(permissions=frozenset({ACCESS_CONTENT, VIEW_OWN_UNPUBLISHED}))

    assert not await content_store.can_view(item, anonymous)


def test_actor_properties() -> None:
    assert Actor().is_anonymous
    assert not OWNER.is_anonymous
    assert OWNER.has_permission(VIEW_OWN_UNPUBLISHED)
    assert not OWNER.has_permission(BYPASS_ACCESS)
