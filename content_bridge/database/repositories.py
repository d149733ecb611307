"""SQLAlchemy-backed content store."""

from collections.abc import Sequence
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from content_bridge.core.clock import Clock, utcnow
from content_bridge.core.errors import NotFoundError, ValidationError
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

from .models import ContentItemModel, ContentRevisionModel, ContentTypeModel

# Columns copied back from a mutated item
WRITABLE_FIELDS = ("title", "body", "content_type", "published", "promoted", "owner_id")


class SqlContentStore(ContentStore):
    """Content store over an ``AsyncSession``.

    One instance per session; a failed write rolls the session back so the
    next call can proceed.
    """

    def __init__(
        self,
        session: AsyncSession,
        access_policy: AccessPolicy | None = None,
        clock: Clock = utcnow,
    ) -> None:
        super().__init__(access_policy)
        self.session = session
        self.clock = clock

    def _apply_filter(self, query: Select, filter: ContentFilter) -> Select:
        if filter.published is not None:
            query = query.filter(ContentItemModel.published == filter.published)
        if filter.promoted is not None:
            query = query.filter(ContentItemModel.promoted == filter.promoted)
        return query

    @staticmethod
    def _to_item(row: ContentItemModel) -> ContentItem:
        return ContentItem.model_validate(row)

    async def query(
        self,
        filter: ContentFilter,
        sort: SortOrder = SortOrder.CREATED_DESC,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> list[int]:
        query = self._apply_filter(select(ContentItemModel.id), filter)
        if sort == SortOrder.CREATED_DESC:
            query = query.order_by(
                ContentItemModel.created_at.desc(), ContentItemModel.id.desc()
            )
        else:
            query = query.order_by(
                ContentItemModel.created_at.asc(), ContentItemModel.id.asc()
            )
        query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count(self, filter: ContentFilter) -> int:
        query = self._apply_filter(
            select(func.count()).select_from(ContentItemModel), filter
        )
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def load(self, id: int) -> Optional[ContentItem]:
        row = await self.session.get(ContentItemModel, id)
        return self._to_item(row) if row else None

    async def load_many(self, ids: Sequence[int]) -> list[ContentItem]:
        if not ids:
            return []
        query = select(ContentItemModel).filter(ContentItemModel.id.in_(list(ids)))
        result = await self.session.execute(query)
        rows = {row.id: row for row in result.scalars().all()}
        return [self._to_item(rows[id]) for id in ids if id in rows]

    async def create(self, draft: ContentDraft) -> ContentItem:
        title = draft.title.strip()
        if not title:
            raise ValidationError("Title cannot be empty")
        if not await self.content_type_exists(draft.content_type):
            raise ValidationError(f"Unknown content type '{draft.content_type}'")

        now = self.clock()
        row = ContentItemModel(
            title=title,
            body=draft.body,
            content_type=draft.content_type,
            published=draft.published,
            promoted=draft.promoted,
            owner_id=draft.owner_id,
            created_at=now,
            changed_at=now,
        )
        self.session.add(row)
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        await self.session.refresh(row)
        return self._to_item(row)

    async def update(
        self,
        id: int,
        mutator: Mutator,
        revision: Optional[RevisionInfo] = None,
    ) -> ContentItem:
        row = await self.session.get(ContentItemModel, id)
        if row is None:
            raise NotFoundError(f"Content item {id} not found")

        current = self._to_item(row)
        updated = current.model_copy()
        mutator(updated)
        for field in IMMUTABLE_FIELDS:
            setattr(updated, field, getattr(current, field))
        if not updated.title.strip():
            raise ValidationError("Title cannot be empty")

        for field in WRITABLE_FIELDS:
            setattr(row, field, getattr(updated, field))
        row.changed_at = next_changed_at(current.changed_at, self.clock())

        if revision is not None:
            self.session.add(
                ContentRevisionModel(
                    item_id=id,
                    editor_id=revision.editor_id,
                    timestamp=revision.timestamp,
                    log_message=revision.log_message,
                    title=updated.title,
                    body=updated.body,
                )
            )
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise
        await self.session.refresh(row)
        return self._to_item(row)

    async def content_type_exists(self, machine_name: str) -> bool:
        return await self.session.get(ContentTypeModel, machine_name) is not None

    async def register_content_type(self, content_type: ContentType) -> None:
        if await self.content_type_exists(content_type.machine_name):
            return
        self.session.add(
            ContentTypeModel(
                machine_name=content_type.machine_name,
                label=content_type.label,
            )
        )
        await self.session.commit()

    async def revisions(self, item_id: int) -> list[Revision]:
        query = (
            select(ContentRevisionModel)
            .filter(ContentRevisionModel.item_id == item_id)
            .order_by(ContentRevisionModel.id)
        )
        result = await self.session.execute(query)
        return [Revision.model_validate(row) for row in result.scalars().all()]
