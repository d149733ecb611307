"""Error types raised by handlers and content stores."""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class BridgeError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(BridgeError):
    """Malformed, empty or oversized input."""

    status_code = HTTP_400_BAD_REQUEST


class NotFoundError(BridgeError):
    """No content item matched the request."""

    status_code = HTTP_404_NOT_FOUND


class InternalError(BridgeError):
    """Backend failure. The message is generic; the cause is logged."""

    status_code = HTTP_500_INTERNAL_SERVER_ERROR
