"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient

from nextbus_api.main import app
from nextbus_api.services.gtfs_rt.worker import reset_worker


@pytest.fixture(autouse=True)
def _reset_worker_singleton() -> Generator[None, None, None]:
    """Give every test a fresh refresh worker."""
    reset_worker()
    yield
    reset_worker()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
