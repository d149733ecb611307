"""In-memory content store."""

from collections.abc import Iterable, Sequence
from typing import Optional
from uuid import uuid4

from content_bridge.core.clock import Clock, utcnow
from content_bridge.core.errors import NotFoundError, ValidationError
from content_bridge.core.logging import get_logger
from content_bridge.models import (
    ContentDraft,
    ContentItem,
    ContentType,
    Revision,
    RevisionInfo,
)
from content_bridge.store.access import AccessPolicy
from content_bridge.store.base import (
    IMMUTABLE_FIELDS,
    ContentFilter,
    ContentStore,
    Mutator,
    SortOrder,
    next_changed_at,
)

logger = get_logger(__name__)


class InMemoryContentStore(ContentStore):
    """Dict-backed store with an append-only revision log per item.

    Items handed out are copies; callers never hold references to stored
    state.
    """

    def __init__(
        self,
        content_types: Iterable[str] = (),
        access_policy: AccessPolicy | None = None,
        clock: Clock = utcnow,
    ) -> None:
        super().__init__(access_policy)
        self.clock = clock
        self._items: dict[int, ContentItem] = {}
        self._revisions: dict[int, list[Revision]] = {}
        self._types: dict[str, ContentType] = {
            name: ContentType(machine_name=name, label=name.title())
            for name in content_types
        }
        self._next_id = 1

    def _sorted(self, items: list[ContentItem], sort: SortOrder) -> list[ContentItem]:
        reverse = sort == SortOrder.CREATED_DESC
        return sorted(items, key=lambda i: (i.created_at, i.id), reverse=reverse)

    async def query(
        self,
        filter: ContentFilter,
        sort: SortOrder = SortOrder.CREATED_DESC,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> list[int]:
        matching = [item for item in self._items.values() if filter.matches(item)]
        ordered = self._sorted(matching, sort)
        end = None if limit is None else offset + limit
        return [item.id for item in ordered[offset:end]]

    async def count(self, filter: ContentFilter) -> int:
        return sum(1 for item in self._items.values() if filter.matches(item))

    async def load(self, id: int) -> Optional[ContentItem]:
        item = self._items.get(id)
        return item.model_copy() if item else None

    async def load_many(self, ids: Sequence[int]) -> list[ContentItem]:
        return [self._items[id].model_copy() for id in ids if id in self._items]

    async def create(self, draft: ContentDraft) -> ContentItem:
        title = draft.title.strip()
        if not title:
            raise ValidationError("Title cannot be empty")
        if draft.content_type not in self._types:
            raise ValidationError(f"Unknown content type '{draft.content_type}'")

        now = self.clock()
        item = ContentItem(
            id=self._next_id,
            uuid=uuid4(),
            title=title,
            body=draft.body,
            content_type=draft.content_type,
            published=draft.published,
            promoted=draft.promoted,
            created_at=now,
            changed_at=now,
            owner_id=draft.owner_id,
        )
        self._next_id += 1
        self._items[item.id] = item
        logger.debug("content_item_created", item_id=item.id, type=item.content_type)
        return item.model_copy()

    async def update(
        self,
        id: int,
        mutator: Mutator,
        revision: Optional[RevisionInfo] = None,
    ) -> ContentItem:
        current = self._items.get(id)
        if current is None:
            raise NotFoundError(f"Content item {id} not found")

        updated = current.model_copy()
        mutator(updated)
        for field in IMMUTABLE_FIELDS:
            setattr(updated, field, getattr(current, field))
        if not updated.title.strip():
            raise ValidationError("Title cannot be empty")
        updated.changed_at = next_changed_at(current.changed_at, self.clock())

        self._items[id] = updated
        if revision is not None:
            self._revisions.setdefault(id, []).append(
                Revision(
                    item_id=id,
                    editor_id=revision.editor_id,
                    timestamp=revision.timestamp,
                    log_message=revision.log_message,
                    title=updated.title,
                    body=updated.body,
                )
            )
        return updated.model_copy()

    async def content_type_exists(self, machine_name: str) -> bool:
        return machine_name in self._types

    async def register_content_type(self, content_type: ContentType) -> None:
        self._types.setdefault(content_type.machine_name, content_type)

    async def revisions(self, item_id: int) -> list[Revision]:
        return list(self._revisions.get(item_id, []))
