"""Content store interface and adapters."""

from content_bridge.store.access import AccessPolicy, default_access_policy
from content_bridge.store.base import (
    PUBLISHED,
    PUBLISHED_PROMOTED,
    ContentFilter,
    ContentStore,
    Mutator,
    SortOrder,
)
from content_bridge.store.memory import InMemoryContentStore

__all__ = [
    "PUBLISHED",
    "PUBLISHED_PROMOTED",
    "AccessPolicy",
    "ContentFilter",
    "ContentStore",
    "InMemoryContentStore",
    "Mutator",
    "SortOrder",
    "default_access_policy",
]
