"""Abstract content store interface."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from content_bridge.models import (
    Actor,
    ContentDraft,
    ContentItem,
    ContentType,
    Revision,
    RevisionInfo,
)
from content_bridge.store.access import AccessPolicy, default_access_policy

# Receives a mutable copy of the item and edits it in place
Mutator = Callable[[ContentItem], None]

# Fields a mutator is not allowed to change
IMMUTABLE_FIELDS = ("id", "uuid", "created_at")


class SortOrder(str, Enum):
    """Ordering by creation time."""

    CREATED_DESC = "created_desc"
    CREATED_ASC = "created_asc"


@dataclass(frozen=True)
class ContentFilter:
    """Conditions on item flags; ``None`` means no condition."""

    published: Optional[bool] = None
    promoted: Optional[bool] = None

    def matches(self, item: ContentItem) -> bool:
        if self.published is not None and item.published != self.published:
            return False
        if self.promoted is not None and item.promoted != self.promoted:
            return False
        return True


PUBLISHED = ContentFilter(published=True)
PUBLISHED_PROMOTED = ContentFilter(published=True, promoted=True)


def next_changed_at(previous: datetime, now: datetime) -> datetime:
    """Return a change time strictly after ``previous``."""
    floor = previous + timedelta(microseconds=1)
    return now if now >= floor else floor


class ContentStore(ABC):
    """Create, read, query and update content items.

    Implementations own id assignment, timestamps and the revision log.
    """

    def __init__(self, access_policy: AccessPolicy | None = None) -> None:
        self.access_policy = access_policy or default_access_policy

    @abstractmethod
    async def query(
        self,
        filter: ContentFilter,
        sort: SortOrder = SortOrder.CREATED_DESC,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> list[int]:
        """Return ids of matching items in ``sort`` order."""

    @abstractmethod
    async def count(self, filter: ContentFilter) -> int:
        """Count matching items."""

    @abstractmethod
    async def load(self, id: int) -> Optional[ContentItem]:
        """Load one item, or ``None`` if absent."""

    @abstractmethod
    async def load_many(self, ids: Sequence[int]) -> list[ContentItem]:
        """Load items in the order of ``ids``, skipping missing ones."""

    @abstractmethod
    async def create(self, draft: ContentDraft) -> ContentItem:
        """Create an item.

        Raises:
            ValidationError: If the title is empty or the type is unknown
        """

    @abstractmethod
    async def update(
        self,
        id: int,
        mutator: Mutator,
        revision: Optional[RevisionInfo] = None,
    ) -> ContentItem:
        """Apply ``mutator`` to an item and persist it.

        A revision is appended when ``revision`` is given.

        Raises:
            NotFoundError: If no item has this id
        """

    @abstractmethod
    async def content_type_exists(self, machine_name: str) -> bool:
        """Check whether a content type is registered."""

    @abstractmethod
    async def register_content_type(self, content_type: ContentType) -> None:
        """Register a content type; registering twice is a no-op."""

    @abstractmethod
    async def revisions(self, item_id: int) -> list[Revision]:
        """Return the revision log of an item, oldest first."""

    async def can_view(self, item: ContentItem, actor: Actor) -> bool:
        """Check whether ``actor`` may view ``item``."""
        return self.access_policy(item, actor)
