"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.status import (
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from content_bridge.core.errors import BridgeError
from content_bridge.core.logging import get_logger

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


def _correlation_id(request: Request) -> str | None:
    correlation_id = getattr(request.state, "correlation_id", None)
    return str(correlation_id) if correlation_id is not None else None


def _error_detail(exc: Exception) -> tuple[str, int]:
    """Get the caller-visible message and status code for an exception."""
    if isinstance(exc, BridgeError):
        return exc.message, exc.status_code
    if isinstance(exc, StarletteHTTPException):
        return str(exc.detail), exc.status_code
    if isinstance(exc, RequestValidationError):
        return str(exc.errors()), HTTP_422_UNPROCESSABLE_ENTITY
    # Anything else is a bug or a backend failure; keep the cause server-side
    return GENERIC_ERROR_MESSAGE, HTTP_500_INTERNAL_SERVER_ERROR


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an exception and render it as the standard error envelope.

    Args:
        request: The request that caused the exception
        exc: The exception to render

    Returns:
        JSON response with ``error``, ``message``, ``status_code`` and
        ``correlation_id``
    """
    error_type = exc.__class__.__name__
    detail, status_code = _error_detail(exc)
    correlation_id = _correlation_id(request)

    logger.error(
        "request_error",
        error_type=error_type,
        error_message=detail,
        status_code=status_code,
        path=request.url.path,
        method=request.method,
        correlation_id=correlation_id,
        exc_info=exc if detail == GENERIC_ERROR_MESSAGE else False,
    )

    response = JSONResponse(
        status_code=status_code,
        content={
            "error": error_type,
            "message": detail,
            "status_code": status_code,
            "correlation_id": correlation_id or "unknown",
        },
    )
    if correlation_id:
        response.headers["X-Request-ID"] = correlation_id
    return response


async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
    """Exception handler usable with ``app.add_exception_handler``."""
    return error_response(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Render errors raised inside routes with the standard envelope."""
    app.add_exception_handler(BridgeError, handle_exception)
    app.add_exception_handler(HTTPException, handle_exception)
    app.add_exception_handler(StarletteHTTPException, handle_exception)
    app.add_exception_handler(RequestValidationError, handle_exception)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch exceptions that escape the routes and their exception handlers."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """
        Process the request/response cycle and handle errors.

        Args:
        ----
            request: The incoming request
            call_next: The next handler in the middleware chain

        Returns:
        -------
            The response from downstream handlers or error response
        """
        try:
            return await call_next(request)
        except Exception as exc:
            return error_response(request, exc)
