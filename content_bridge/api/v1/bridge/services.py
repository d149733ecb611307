"""Handlers behind the bridge endpoints.

Each handler talks to the content store only. Typed ``BridgeError``s pass
through; any other failure from the store is logged and replaced by an
``InternalError`` with a generic message.
"""

from typing import Any, Optional

from content_bridge.api.v1.bridge.models import (
    ExportedItem,
    ExportPage,
    HomepageUpdateResponse,
    ImportedItem,
    ImportResult,
    PaginationMeta,
    PaginationRequest,
    SiteInfoResponse,
)
from content_bridge.api.v1.utils import (
    build_canonical_url,
    calculate_total_pages,
    clamp,
    coerce_int,
)
from content_bridge.core.clock import Clock, utcnow
from content_bridge.core.config import Settings
from content_bridge.core.errors import (
    BridgeError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from content_bridge.core.events import HOMEPAGE_UPDATES_TOTAL, IMPORTED_ITEMS_TOTAL
from content_bridge.core.logging import get_logger
from content_bridge.core.sanitize import Sanitizer, sanitize_text
from content_bridge.models import Actor, ContentDraft, ContentItem, RevisionInfo
from content_bridge.store import (
    PUBLISHED,
    PUBLISHED_PROMOTED,
    ContentStore,
    SortOrder,
)

logger = get_logger(__name__)

HOMEPAGE_UPDATED_MESSAGE = "Homepage updated successfully!"


class SiteInfoHandler:
    """Report configured site metadata."""

    def __init__(self, settings: Settings, clock: Clock = utcnow):
        self.settings = settings
        self.clock = clock

    def handle(self) -> SiteInfoResponse:
        return SiteInfoResponse(
            site_name=self.settings.SITE_NAME,
            slogan=self.settings.SITE_SLOGAN,
            current_timestamp=self.clock(),
        )


class HomepageUpdateHandler:
    """Prepend a bold paragraph to the newest promoted, published item."""

    def __init__(
        self,
        store: ContentStore,
        settings: Settings,
        sanitizer: Sanitizer = sanitize_text,
        clock: Clock = utcnow,
    ):
        self.store = store
        self.settings = settings
        self.sanitizer = sanitizer
        self.clock = clock

    def _update_text(self, payload: Any) -> str:
        if not isinstance(payload, dict):
            raise ValidationError("Missing required field: updateText")
        raw = payload.get("updateText", payload.get("update_text"))
        if raw is None or raw == "":
            raise ValidationError("Missing required field: updateText")
        if not isinstance(raw, str):
            raise ValidationError("Field updateText must be a string")

        text = self.sanitizer(raw)
        if not text:
            raise ValidationError("Field updateText is empty after sanitization")
        return text

    async def _find_homepage(self) -> Optional[ContentItem]:
        ids = await self.store.query(
            PUBLISHED_PROMOTED, SortOrder.CREATED_DESC, offset=0, limit=1
        )
        if not ids:
            return None
        return await self.store.load(ids[0])

    async def handle(self, payload: Any, actor: Actor) -> HomepageUpdateResponse:
        """
        Apply the update.

        Raises:
            ValidationError: If ``updateText`` is missing or empty
            NotFoundError: If there is no promoted, published item
            InternalError: If the store fails
        """
        text = self._update_text(payload)
        prefix = f"<p><strong>{text}</strong></p>"

        def prepend(item: ContentItem) -> None:
            item.body = prefix + item.body

        try:
            homepage = await self._find_homepage()
            if homepage is None:
                raise NotFoundError("No promoted homepage item found")

            updated = await self.store.update(
                homepage.id,
                prepend,
                revision=RevisionInfo(
                    editor_id=actor.id,
                    timestamp=self.clock(),
                    log_message=self.settings.HOMEPAGE_REVISION_LOG_MESSAGE,
                ),
            )
        except BridgeError:
            raise
        except Exception as exc:
            logger.error("homepage_update_failed", error=str(exc), exc_info=exc)
            raise InternalError(
                "An error occurred while updating the homepage"
            ) from exc

        HOMEPAGE_UPDATES_TOTAL.inc()
        logger.info("homepage_updated", item_id=updated.id, editor_id=actor.id)
        return HomepageUpdateResponse(
            message=HOMEPAGE_UPDATED_MESSAGE,
            id=updated.id,
            changed_at=updated.changed_at,
        )


class BulkExportHandler:
    """Page through published items visible to the caller."""

    def __init__(self, store: ContentStore, settings: Settings):
        self.store = store
        self.settings = settings

    def paginate(self, page: Any = None, limit: Any = None) -> PaginationRequest:
        """Normalize raw ``page`` and ``limit`` parameters."""
        return PaginationRequest(
            page=max(1, coerce_int(page, 1)),
            limit=clamp(
                coerce_int(limit, self.settings.EXPORT_DEFAULT_LIMIT),
                1,
                self.settings.EXPORT_MAX_LIMIT,
            ),
        )

    def _export(self, item: ContentItem) -> ExportedItem:
        return ExportedItem(
            id=item.id,
            uuid=item.uuid,
            title=item.title,
            created_at=item.created_at,
            changed_at=item.changed_at,
            published=item.published,
            type=item.content_type,
            body=item.body,
            canonical_url=build_canonical_url(
                self.settings.PUBLIC_BASE_URL,
                self.settings.CANONICAL_PATH_TEMPLATE,
                item.id,
            ),
        )

    async def handle(
        self, page: Any = None, limit: Any = None, actor: Optional[Actor] = None
    ) -> ExportPage:
        """
        Build one export page.

        Items the actor may not view are dropped from ``data``; ``total``
        still counts every published item.

        Raises:
            InternalError: If the store fails
        """
        actor = actor or Actor()
        pagination = self.paginate(page, limit)

        try:
            total = await self.store.count(PUBLISHED)
            # Past the last page; also keeps huge offsets away from the store
            ids: list[int] = []
            if pagination.offset < total:
                ids = await self.store.query(
                    PUBLISHED,
                    SortOrder.CREATED_DESC,
                    offset=pagination.offset,
                    limit=pagination.limit,
                )
            visible = [
                item
                for item in await self.store.load_many(ids)
                if await self.store.can_view(item, actor)
            ]
        except BridgeError:
            raise
        except Exception as exc:
            logger.error("bulk_export_failed", error=str(exc), exc_info=exc)
            raise InternalError("An error occurred while exporting content") from exc

        logger.info(
            "bulk_export_served",
            page=pagination.page,
            limit=pagination.limit,
            total=total,
            returned=len(visible),
            hidden=len(ids) - len(visible),
        )
        return ExportPage(
            data=[self._export(item) for item in visible],
            pagination=PaginationMeta(
                total=total,
                page=pagination.page,
                limit=pagination.limit,
                pages=calculate_total_pages(total, pagination.limit),
            ),
        )


class BulkImportHandler:
    """Create up to ``IMPORT_MAX_ITEMS`` items, reporting failures inline."""

    def __init__(
        self,
        store: ContentStore,
        settings: Settings,
        sanitizer: Sanitizer = sanitize_text,
    ):
        self.store = store
        self.settings = settings
        self.sanitizer = sanitizer

    def _validate_batch(self, payload: Any) -> list[Any]:
        if not isinstance(payload, list):
            raise ValidationError("Invalid payload: expected JSON array")
        if len(payload) > self.settings.IMPORT_MAX_ITEMS:
            raise ValidationError(
                f"Too many items. Maximum {self.settings.IMPORT_MAX_ITEMS} "
                "items per request."
            )
        return payload

    async def _import_item(self, entry: Any, actor: Actor) -> ImportedItem:
        if not isinstance(entry, dict):
            raise ValidationError("Expected a JSON object")

        raw_title = entry.get("title")
        if not raw_title:
            raise ValidationError("Missing required field 'title'")

        raw_type = entry.get("type")
        content_type = (
            self.sanitizer(str(raw_type))
            if raw_type
            else self.settings.DEFAULT_CONTENT_TYPE
        )
        if not await self.store.content_type_exists(content_type):
            raise ValidationError(f"Invalid content type '{content_type}'")

        raw_body = entry.get("body")
        item = await self.store.create(
            ContentDraft(
                title=self.sanitizer(str(raw_title)),
                body=self.sanitizer(str(raw_body)) if raw_body is not None else "",
                content_type=content_type,
                published=True,
                promoted=content_type in self.settings.PROMOTED_CONTENT_TYPES,
                owner_id=actor.id,
            )
        )
        return ImportedItem(id=item.id, uuid=item.uuid, title=item.title)

    async def handle(self, payload: Any, actor: Actor) -> ImportResult:
        """
        Import a batch.

        Every entry yields exactly one created item or one error string
        prefixed with its index.

        Raises:
            ValidationError: If the payload is not an array or is too long
        """
        batch = self._validate_batch(payload)
        created: list[ImportedItem] = []
        errors: list[str] = []

        for index, entry in enumerate(batch):
            try:
                created.append(await self._import_item(entry, actor))
            except BridgeError as exc:
                errors.append(f"Item {index}: {exc.message}")
            except Exception as exc:
                logger.error(
                    "bulk_import_item_failed",
                    index=index,
                    error=str(exc),
                    exc_info=exc,
                )
                errors.append(f"Item {index}: Failed to create content item")

        IMPORTED_ITEMS_TOTAL.labels(outcome="created").inc(len(created))
        IMPORTED_ITEMS_TOTAL.labels(outcome="failed").inc(len(errors))

        result = ImportResult(created=created, count=len(created))
        if errors:
            result.errors = errors
            result.error_count = len(errors)

        logger.info(
            "bulk_import_completed",
            submitted=len(batch),
            created=len(created),
            failed=len(errors),
            outcome=result.outcome.value,
        )
        return result
