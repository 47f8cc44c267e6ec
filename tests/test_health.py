"""Tests for health endpoint."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from nextbus_api.services.gtfs_rt.fetcher import FeedFetchError
from nextbus_api.services.gtfs_rt.worker import get_worker


@pytest.mark.asyncio
async def test_health_endpoint_returns_200(client: AsyncClient) -> None:
    """Test that health endpoint returns 200 with expected fields."""
    response = await client.get("/health")

    assert response.status_code == 200

    data = response.json()
    assert data["service"] == "NextBus API"
    assert data["status"] == "healthy"
    assert "version" in data
    assert "environment" in data
    assert "timestamp" in data
    assert isinstance(data["checks"]["vehicles"], dict)
    assert data["checks"]["vehicles"]["workerRunning"] is False
    assert data["checks"]["vehicles"]["refreshCount"] == 0
    assert data["checks"]["vehicles"]["vehicleCount"] == 0
    assert data["checks"]["stopCatalog"]["usedFallback"] is True
    assert data["checks"]["stopCatalog"]["entries"] > 0
    assert data["issues"] == []


@pytest.mark.asyncio
async def test_health_endpoint_includes_version(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert response.json()["version"] == "0.1.0"


@pytest.mark.asyncio
async def test_health_endpoint_has_request_id_header(client: AsyncClient) -> None:
    response = await client.get("/health")
    assert "x-request-id" in response.headers


@pytest.mark.asyncio
async def test_health_endpoint_echoes_request_id(client: AsyncClient) -> None:
    response = await client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["x-request-id"] == "req-123"


@pytest.mark.asyncio
async def test_health_degraded_after_failed_refresh(client: AsyncClient) -> None:
    worker = get_worker()
    worker._fetcher.fetch = AsyncMock(side_effect=FeedFetchError("timeout"))
    await worker.run_once()

    data = (await client.get("/health")).json()
    assert data["status"] == "degraded"
    assert any("timeout" in issue for issue in data["issues"])
