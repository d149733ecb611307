"""Tests for health, metadata and metrics endpoints."""

import pytest
from httpx import AsyncClient
from starlette.testclient import TestClient


@pytest.mark.asyncio
async def test_health_check(test_app_async_client: AsyncClient) -> None:
    """Test health check endpoint."""
    response = await test_app_async_client.get(
        "/api/v1/health", headers={"X-Request-ID": "test-health"}
    )

    assert response.status_code == 200
    assert response.json() == {
        "status": "healthy",
        "version": "0.1.0",
        "backend": "memory",
        "correlation_id": "test-health",
    }


@pytest.mark.asyncio
async def test_api_metadata(test_app_async_client: AsyncClient) -> None:
    response = await test_app_async_client.get("/api/v1/")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Content Bridge"
    assert data["documentation_url"] == "/docs"


@pytest.mark.asyncio
async def test_metrics_endpoint(test_app_async_client: AsyncClient) -> None:
    """Request counters are exposed in Prometheus format."""
    await test_app_async_client.get("/api/v1/site-info")

    response = await test_app_async_client.get("/metrics")

    assert response.status_code == 200
    assert "content_bridge_http_requests_total" in response.text


def test_root_redirects_to_docs(test_app_client: TestClient) -> None:
    response = test_app_client.get("/", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/docs"


def test_openapi_lists_bridge_routes(test_app_client: TestClient) -> None:
    paths = test_app_client.get("/openapi.json").json()["paths"]

    for path in ("site-info", "homepage-update", "bulk-export", "bulk-import"):
        assert f"/api/v1/{path}" in paths
