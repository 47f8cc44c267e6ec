"""Tests for the public stop endpoints."""

from collections.abc import Generator
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from nextbus_api.main import app
from nextbus_api.routers.stops import get_board_service
from nextbus_api.services.bustracker.board import StopBoardService
from nextbus_api.services.bustracker.fetcher import BoardFetchError

from .fixtures.board_fixture import HASH_BOARD_HTML


@pytest.fixture
def board_fetcher() -> Generator[AsyncMock, None, None]:
    """Route the predictions endpoint to a board service with a mocked fetcher."""
    fetcher = AsyncMock()
    fetcher.fetch = AsyncMock(return_value=HASH_BOARD_HTML)
    app.dependency_overrides[get_board_service] = lambda: StopBoardService(fetcher=fetcher)
    yield fetcher
    app.dependency_overrides.pop(get_board_service, None)


class TestStopPredictions:
    @pytest.mark.asyncio
    async def test_predictions_sorted(self, client: AsyncClient, board_fetcher: AsyncMock) -> None:
        response = await client.get("/stops/3001/predictions")

        assert response.status_code == 200
        data = response.json()
        assert data["stop_id"] == "3001"
        assert data["label"] == "UCSB North Hall"
        assert [p["route"] for p in data["predictions"]] == ["11", "27", "24X", "28"]
        assert data["predictions"][0]["eta_label"] == "Approaching"
        assert data["predictions"][2]["eta_label"] == "5 min"
        url, stop_id = board_fetcher.fetch.await_args.args
        assert stop_id == "3001"
        assert "id=3001" in url

    @pytest.mark.asyncio
    async def test_unknown_stop_label_is_stop_id(
        self, client: AsyncClient, board_fetcher: AsyncMock  # noqa: ARG002
    ) -> None:
        data = (await client.get("/stops/8888/predictions")).json()
        assert data["label"] == "8888"

    @pytest.mark.asyncio
    async def test_route_filter(
        self, client: AsyncClient, board_fetcher: AsyncMock  # noqa: ARG002
    ) -> None:
        response = await client.get("/stops/3001/predictions", params={"routes": "24x, 28"})
        assert [p["route"] for p in response.json()["predictions"]] == ["24X", "28"]

    @pytest.mark.asyncio
    async def test_headsign_filter(
        self, client: AsyncClient, board_fetcher: AsyncMock  # noqa: ARG002
    ) -> None:
        response = await client.get("/stops/3001/predictions", params={"headsign": "ucsb"})
        assert [p["route"] for p in response.json()["predictions"]] == ["24X", "28"]

    @pytest.mark.asyncio
    async def test_toward_filter_and_limit(
        self, client: AsyncClient, board_fetcher: AsyncMock  # noqa: ARG002
    ) -> None:
        response = await client.get(
            "/stops/3001/predictions", params={"toward": "camino_real", "limit": 1}
        )
        assert [p["route"] for p in response.json()["predictions"]] == ["24X"]

    @pytest.mark.asyncio
    async def test_invalid_toward_rejected(
        self, client: AsyncClient, board_fetcher: AsyncMock  # noqa: ARG002
    ) -> None:
        response = await client.get("/stops/3001/predictions", params={"toward": "nowhere"})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_limit_bounds(
        self, client: AsyncClient, board_fetcher: AsyncMock  # noqa: ARG002
    ) -> None:
        response = await client.get("/stops/3001/predictions", params={"limit": 0})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unreachable_board_is_empty(
        self, client: AsyncClient, board_fetcher: AsyncMock
    ) -> None:
        board_fetcher.fetch.side_effect = BoardFetchError("down")

        response = await client.get("/stops/3001/predictions")

        assert response.status_code == 200
        assert response.json()["predictions"] == []


class TestStopCatalogEndpoint:
    @pytest.mark.asyncio
    async def test_catalog_all(self, client: AsyncClient) -> None:
        data = (await client.get("/stops/catalog")).json()
        assert data["used_fallback"] is True
        assert data["count"] == len(data["items"]) > 0

    @pytest.mark.asyncio
    async def test_catalog_search(self, client: AsyncClient) -> None:
        data = (await client.get("/stops/catalog", params={"q": "ucsb"})).json()
        assert [item["code"] for item in data["items"]] == ["3001", "3002"]
