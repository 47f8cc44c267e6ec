"""Vehicle-positions feed fetcher with retry and backoff."""

from __future__ import annotations

import asyncio
import inspect

import httpx

from nextbus_api.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 15
DEFAULT_MAX_RETRIES = 2
DEFAULT_BACKOFF_BASE = 2.0


class FeedFetchError(Exception):
    """Raised when a feed fetch fails after all retries."""


class GtfsRtFetcher:
    """Fetches raw GTFS-RT bytes from a remote URL."""

    def __init__(
        self,
        timeout_sec: int = DEFAULT_TIMEOUT_SEC,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_base: float = DEFAULT_BACKOFF_BASE,
        user_agent: str = "",
    ) -> None:
        self.timeout_sec = timeout_sec
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.user_agent = user_agent

    async def fetch(self, url: str, refresh_id: str) -> bytes:
        """Download a feed body with retry + exponential backoff.

        The body is returned untouched; it may or may not be gzip-compressed
        regardless of what the response headers say.

        Raises:
            FeedFetchError: If all retries are exhausted.
        """
        last_error: Exception | None = None
        headers = {"User-Agent": self.user_agent} if self.user_agent else None

        for attempt in range(self.max_retries):
            try:
                logger.info(
                    "Fetching vehicle feed",
                    refresh_id=refresh_id,
                    attempt=attempt + 1,
                    max_retries=self.max_retries,
                )
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(self.timeout_sec),
                    follow_redirects=True,
                    headers=headers,
                ) as client:
                    response = await client.get(url)
                    raise_result = response.raise_for_status()
                    if inspect.isawaitable(raise_result):
                        await raise_result
                    data = response.content

                if not data:
                    msg = "Empty response body"
                    raise FeedFetchError(msg)

                logger.info(
                    "Vehicle feed downloaded",
                    refresh_id=refresh_id,
                    size_bytes=len(data),
                )
                return data

            except (httpx.HTTPStatusError, httpx.RequestError, FeedFetchError) as exc:
                last_error = exc
                if attempt < self.max_retries - 1:
                    delay = self.backoff_base ** (attempt + 1)
                    logger.warning(
                        "Vehicle feed fetch failed, retrying",
                        refresh_id=refresh_id,
                        attempt=attempt + 1,
                        delay_sec=delay,
                        error=str(exc),
                    )
                    await asyncio.sleep(delay)

        msg = f"Failed to fetch vehicle feed after {self.max_retries} attempts"
        logger.error(msg, refresh_id=refresh_id, error=str(last_error))
        raise FeedFetchError(msg) from last_error
