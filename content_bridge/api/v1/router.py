"""API v1 router module."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from content_bridge.api.v1.bridge.router import router as bridge_router
from content_bridge.api.v1.dependencies import get_settings
from content_bridge.core.config import Settings

router = APIRouter(default_response_class=JSONResponse)

router.include_router(bridge_router)


@router.get("/")
async def get_api_metadata(settings: Settings = Depends(get_settings)) -> dict[str, str]:
    """Describe this API."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "openapi_url": "/openapi.json",
        "documentation_url": "/docs",
        "api_status": "healthy",
    }


@router.get("/health")
async def health_check(
    request: Request, settings: Settings = Depends(get_settings)
) -> dict[str, str]:
    """
    Health check endpoint.

    Returns
    -------
        Dict containing health status information
    """
    return {
        "status": "healthy",
        "version": settings.version,
        "backend": settings.CONTENT_STORE_BACKEND,
        "correlation_id": getattr(request.state, "correlation_id", "unknown"),
    }
