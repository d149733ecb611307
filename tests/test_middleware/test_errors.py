"""Error handling middleware tests."""

from typing import AsyncGenerator, cast

from fastapi import FastAPI, HTTPException, Query
from httpx import ASGITransport, AsyncClient
from pytest import fixture, mark
from pytest_asyncio import fixture as asyncio_fixture
from starlette.types import ASGIApp

from content_bridge.core.errors import NotFoundError, ValidationError
from content_bridge.middleware.correlation import CorrelationMiddleware
from content_bridge.middleware.errors import (
    GENERIC_ERROR_MESSAGE,
    ErrorHandlingMiddleware,
    register_exception_handlers,
)


@fixture
def error_app() -> FastAPI:
    """Get test application with routes that fail in different ways."""
    app = FastAPI()

    @app.get("/missing")
    async def missing() -> None:
        raise NotFoundError("Nothing here")

    @app.get("/invalid")
    async def invalid() -> None:
        raise ValidationError("Bad input")

    @app.get("/http")
    async def http_error() -> None:
        raise HTTPException(status_code=403, detail="Forbidden")

    @app.get("/crash")
    async def crash() -> None:
        raise RuntimeError("secret connection string")

    @app.get("/typed")
    async def typed(count: int = Query(...)) -> dict[str, int]:
        return {"count": count}

    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(CorrelationMiddleware)
    register_exception_handlers(app)
    return app


@asyncio_fixture
async def error_client(error_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=cast(ASGIApp, error_app))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@mark.asyncio
async def test_bridge_error_envelope(error_client: AsyncClient) -> None:
    """Typed errors keep their status and message."""
    response = await error_client.get(
        "/missing", headers={"X-Request-ID": "test-missing"}
    )

    assert response.status_code == 404
    assert response.json() == {
        "error": "NotFoundError",
        "message": "Nothing here",
        "status_code": 404,
        "correlation_id": "test-missing",
    }
    assert response.headers["X-Request-ID"] == "test-missing"


@mark.asyncio
async def test_validation_error(error_client: AsyncClient) -> None:
    response = await error_client.get("/invalid")

    assert response.status_code == 400
    assert response.json()["message"] == "Bad input"


@mark.asyncio
async def test_http_exception(error_client: AsyncClient) -> None:
    response = await error_client.get("/http")

    assert response.status_code == 403
    assert response.json()["error"] == "HTTPException"
    assert response.json()["message"] == "Forbidden"


@mark.asyncio
async def test_unknown_route(error_client: AsyncClient) -> None:
    response = await error_client.get("/nowhere")

    assert response.status_code == 404
    assert response.json()["status_code"] == 404


@mark.asyncio
async def test_request_validation_error(error_client: AsyncClient) -> None:
    response = await error_client.get("/typed", params={"count": "many"})

    assert response.status_code == 422
    assert response.json()["error"] == "RequestValidationError"


@mark.asyncio
async def test_unexpected_exception_is_hidden(error_client: AsyncClient) -> None:
    """Unhandled exceptions become a generic 500."""
    response = await error_client.get("/crash", headers={"X-Request-ID": "test-500"})

    assert response.status_code == 500
    data = response.json()
    assert data["error"] == "RuntimeError"
    assert data["message"] == GENERIC_ERROR_MESSAGE
    assert data["correlation_id"] == "test-500"
    assert "secret" not in response.text
