"""View access rules for content items."""

from collections.abc import Callable

from content_bridge.models import Actor, ContentItem
from content_bridge.models.actor import (
    ACCESS_CONTENT,
    BYPASS_ACCESS,
    VIEW_OWN_UNPUBLISHED,
)

AccessPolicy = Callable[[ContentItem, Actor], bool]


def default_access_policy(item: ContentItem, actor: Actor) -> bool:
    """Permission-based view check.

    Bypass sees everything. Published items need ``access content``;
    unpublished items are visible to their non-anonymous owner only.
    """
    if actor.has_permission(BYPASS_ACCESS):
        return True
    if item.published:
        return actor.has_permission(ACCESS_CONTENT)
    return (
        not actor.is_anonymous
        and item.owner_id == actor.id
        and actor.has_permission(VIEW_OWN_UNPUBLISHED)
    )
