"""Bridge endpoints: site info, homepage update, bulk export and import."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse

from content_bridge.api.v1.bridge.models import (
    ExportPage,
    HomepageUpdateResponse,
    ImportResult,
    SiteInfoResponse,
)
from content_bridge.api.v1.bridge.services import (
    BulkExportHandler,
    BulkImportHandler,
    HomepageUpdateHandler,
    SiteInfoHandler,
)
from content_bridge.api.v1.dependencies import (
    get_content_store,
    get_current_actor,
    get_settings,
)
from content_bridge.api.v1.utils import read_json_body
from content_bridge.core.config import Settings
from content_bridge.models import Actor
from content_bridge.store import ContentStore

router = APIRouter(tags=["bridge"])

TOTAL_COUNT_HEADER = "X-Total-Count"


@router.get("/site-info", response_model=SiteInfoResponse)
async def site_info(settings: Settings = Depends(get_settings)) -> SiteInfoResponse:
    """Return the site name, slogan and current server time."""
    return SiteInfoHandler(settings).handle()


@router.post("/homepage-update", response_model=HomepageUpdateResponse)
async def homepage_update(
    request: Request,
    store: ContentStore = Depends(get_content_store),
    actor: Actor = Depends(get_current_actor),
    settings: Settings = Depends(get_settings),
) -> HomepageUpdateResponse:
    """
    Prepend ``updateText`` to the body of the homepage item.

    The homepage is the most recently created item that is both published
    and promoted. A revision is recorded for the change.
    """
    payload = await read_json_body(request)
    return await HomepageUpdateHandler(store, settings).handle(payload, actor)


@router.get("/bulk-export", response_model=ExportPage)
async def bulk_export(
    response: Response,
    page: Optional[str] = Query(None, description="Page number, from 1"),
    limit: Optional[str] = Query(None, description="Items per page, 1-50"),
    store: ContentStore = Depends(get_content_store),
    actor: Actor = Depends(get_current_actor),
    settings: Settings = Depends(get_settings),
) -> ExportPage:
    """
    Export published items, newest first.

    Out-of-range ``page`` and ``limit`` values are clamped rather than
    rejected. Items the caller may not view are left out of ``data``.
    """
    result = await BulkExportHandler(store, settings).handle(page, limit, actor)

    response.headers["Cache-Control"] = (
        f"max-age={settings.EXPORT_CACHE_MAX_AGE}, public"
    )
    response.headers[TOTAL_COUNT_HEADER] = str(result.pagination.total)
    return result


@router.post(
    "/bulk-import",
    response_model=ImportResult,
    response_model_exclude_none=True,
    responses={
        207: {"model": ImportResult, "description": "Some items failed"},
        400: {"description": "Invalid payload, too many items or all failed"},
    },
)
async def bulk_import(
    request: Request,
    store: ContentStore = Depends(get_content_store),
    actor: Actor = Depends(get_current_actor),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    """
    Create content items from a JSON array of ``{title, body?, type?}``.

    Each entry is processed on its own; failures are listed in ``errors``
    with the entry's index.
    """
    payload = await read_json_body(request)
    result = await BulkImportHandler(store, settings).handle(payload, actor)
    return JSONResponse(
        status_code=result.status_code,
        content=result.model_dump(mode="json", by_alias=True, exclude_none=True),
    )
