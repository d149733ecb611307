"""Request metrics middleware for Prometheus monitoring."""

import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from content_bridge.core.events import (
    REQUEST_DURATION_SECONDS,
    REQUESTS_TOTAL,
    RESPONSES_TOTAL,
)
from content_bridge.core.logging import get_logger

logger = get_logger(__name__)

# Label for requests that matched no route
UNMATCHED_PATH = "unmatched"


def route_label(request: Request) -> str:
    """Path template of the matched route, e.g. ``/api/v1/bulk-export``.

    Only known after routing; unmatched requests share one label so that
    arbitrary URLs cannot create new series. Routers that are mounted under
    a prefix record it in ``root_path`` rather than in the route's own path.
    """
    route = request.scope.get("route")
    path = getattr(route, "path_format", None) or getattr(route, "path", None)
    if not path:
        return UNMATCHED_PATH
    prefix = request.scope.get("root_path", "").rstrip("/")
    if prefix and not (path == prefix or path.startswith(prefix + "/")):
        path = prefix + path
    return path.rstrip("/") or "/"


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Count requests per route and responses per status, time each request.

    Records:
    - Total requests by method and path
    - Total responses by status code
    - Request duration histogram by method and path
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            REQUESTS_TOTAL.labels(method=request.method, path=route_label(request)).inc()
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(exc),
            )
            raise
        duration = time.perf_counter() - start_time

        path = route_label(request)
        REQUESTS_TOTAL.labels(method=request.method, path=path).inc()
        RESPONSES_TOTAL.labels(status_code=str(response.status_code)).inc()
        REQUEST_DURATION_SECONDS.labels(method=request.method, path=path).observe(
            duration
        )

        logger.info(
            "request_processed",
            method=request.method,
            path=request.url.path,
            route=path,
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 2),
        )
        return response
