"""Domain models shared by stores and handlers."""

from content_bridge.models.actor import Actor
from content_bridge.models.content import (
    ContentDraft,
    ContentItem,
    ContentType,
    Revision,
    RevisionInfo,
)

__all__ = [
    "Actor",
    "ContentDraft",
    "ContentItem",
    "ContentType",
    "Revision",
    "RevisionInfo",
]
