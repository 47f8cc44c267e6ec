"""Tests for the vehicle-positions feed fetcher."""

import gzip
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from nextbus_api.services.gtfs_rt.fetcher import FeedFetchError, GtfsRtFetcher

from .fixtures.gtfs_rt_fixture import build_vehicle_position_feed

FEED_URL = "https://example.com/gtfsrt/vehicles"


def _mock_client(mock_client_cls, **get_kwargs) -> AsyncMock:
    instance = AsyncMock()
    instance.get = AsyncMock(**get_kwargs)
    instance.__aenter__ = AsyncMock(return_value=instance)
    instance.__aexit__ = AsyncMock(return_value=False)
    mock_client_cls.return_value = instance
    return instance


def _server_error() -> httpx.HTTPStatusError:
    return httpx.HTTPStatusError(
        "Server Error",
        request=httpx.Request("GET", FEED_URL),
        response=httpx.Response(500),
    )


class TestGtfsRtFetcher:
    """Unit tests for GtfsRtFetcher."""

    @pytest.mark.asyncio
    async def test_fetch_success(self) -> None:
        expected_data = build_vehicle_position_feed()
        fetcher = GtfsRtFetcher(timeout_sec=5, max_retries=1)

        mock_response = AsyncMock()
        mock_response.content = expected_data
        mock_response.raise_for_status = lambda: None

        with patch("nextbus_api.services.gtfs_rt.fetcher.httpx.AsyncClient") as mock_client:
            instance = _mock_client(mock_client, return_value=mock_response)
            data = await fetcher.fetch(FEED_URL, "refresh-1")

        assert data == expected_data
        instance.get.assert_awaited_once_with(FEED_URL)

    @pytest.mark.asyncio
    async def test_fetch_returns_gzip_body_untouched(self) -> None:
        compressed = gzip.compress(build_vehicle_position_feed())
        fetcher = GtfsRtFetcher(timeout_sec=5, max_retries=1)

        mock_response = AsyncMock()
        mock_response.content = compressed
        mock_response.raise_for_status = lambda: None

        with patch("nextbus_api.services.gtfs_rt.fetcher.httpx.AsyncClient") as mock_client:
            _mock_client(mock_client, return_value=mock_response)
            data = await fetcher.fetch(FEED_URL, "refresh-1")

        assert data == compressed

    @pytest.mark.asyncio
    async def test_fetch_sends_user_agent(self) -> None:
        fetcher = GtfsRtFetcher(timeout_sec=5, max_retries=1, user_agent="nextbus-test/1.0")

        mock_response = AsyncMock()
        mock_response.content = b"\x0a\x00"
        mock_response.raise_for_status = lambda: None

        with patch("nextbus_api.services.gtfs_rt.fetcher.httpx.AsyncClient") as mock_client:
            _mock_client(mock_client, return_value=mock_response)
            await fetcher.fetch(FEED_URL, "refresh-1")

        assert mock_client.call_args.kwargs["headers"] == {"User-Agent": "nextbus-test/1.0"}

    @pytest.mark.asyncio
    async def test_fetch_empty_response_raises(self) -> None:
        fetcher = GtfsRtFetcher(timeout_sec=5, max_retries=1)

        mock_response = AsyncMock()
        mock_response.content = b""
        mock_response.raise_for_status = lambda: None

        with patch("nextbus_api.services.gtfs_rt.fetcher.httpx.AsyncClient") as mock_client:
            _mock_client(mock_client, return_value=mock_response)

            with pytest.raises(FeedFetchError):
                await fetcher.fetch(FEED_URL, "refresh-1")

    @pytest.mark.asyncio
    async def test_fetch_http_error_retries(self) -> None:
        fetcher = GtfsRtFetcher(timeout_sec=5, max_retries=2, backoff_base=0.01)

        mock_response = AsyncMock()
        mock_response.status_code = 500
        mock_response.raise_for_status = AsyncMock(side_effect=_server_error())

        with patch("nextbus_api.services.gtfs_rt.fetcher.httpx.AsyncClient") as mock_client:
            instance = _mock_client(mock_client, return_value=mock_response)

            with pytest.raises(FeedFetchError, match="Failed to fetch"):
                await fetcher.fetch(FEED_URL, "refresh-1")

        assert instance.get.await_count == 2

    @pytest.mark.asyncio
    async def test_fetch_network_error_retries(self) -> None:
        fetcher = GtfsRtFetcher(timeout_sec=5, max_retries=2, backoff_base=0.01)

        with patch("nextbus_api.services.gtfs_rt.fetcher.httpx.AsyncClient") as mock_client:
            _mock_client(
                mock_client,
                side_effect=httpx.RequestError(
                    "Connection refused",
                    request=httpx.Request("GET", FEED_URL),
                ),
            )

            with pytest.raises(FeedFetchError, match="Failed to fetch"):
                await fetcher.fetch(FEED_URL, "refresh-1")

    @pytest.mark.asyncio
    async def test_fetch_retry_then_success(self) -> None:
        expected_data = build_vehicle_position_feed()
        fetcher = GtfsRtFetcher(timeout_sec=5, max_retries=3, backoff_base=0.01)

        fail_response = AsyncMock()
        fail_response.raise_for_status = AsyncMock(side_effect=_server_error())

        ok_response = AsyncMock()
        ok_response.content = expected_data
        ok_response.raise_for_status = lambda: None

        with patch("nextbus_api.services.gtfs_rt.fetcher.httpx.AsyncClient") as mock_client:
            _mock_client(mock_client, side_effect=[fail_response, ok_response])
            data = await fetcher.fetch(FEED_URL, "refresh-1")

        assert data == expected_data
