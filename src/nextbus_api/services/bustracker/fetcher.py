"""BusTracker arrival-board fetcher with retry and backoff."""

from __future__ import annotations

import asyncio

import httpx

from nextbus_api.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 15
DEFAULT_MAX_RETRIES = 2
DEFAULT_BACKOFF_BASE = 2.0


class BoardFetchError(Exception):
    """Raised when an arrival board cannot be fetched after all retries."""


class BusTrackerFetcher:
    """Fetches the arrival-board page for a stop."""

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

    async def fetch(self, url: str, stop_id: str) -> str:
        """Download the board page as text.

        Returns an empty string when the response body is empty or is not
        valid UTF-8; neither is worth retrying.

        Raises:
            BoardFetchError: On non-2xx status or connection failure after
                all retries.
        """
        last_error: Exception | None = None
        headers = {"User-Agent": self.user_agent} if self.user_agent else None

        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(self.timeout_sec),
                    follow_redirects=True,
                    headers=headers,
                ) as client:
                    response = await client.get(url)
                    response.raise_for_status()
                    data = response.content
                break
            except (httpx.HTTPStatusError, httpx.RequestError) as exc:
                last_error = exc
                if attempt < self.max_retries - 1:
                    delay = self.backoff_base ** (attempt + 1)
                    logger.warning(
                        "Board fetch failed, retrying",
                        stop_id=stop_id,
                        attempt=attempt + 1,
                        delay_sec=delay,
                        error=str(exc),
                    )
                    await asyncio.sleep(delay)
        else:
            msg = f"Failed to fetch board for stop {stop_id} after {self.max_retries} attempts"
            logger.error(msg, stop_id=stop_id, error=str(last_error))
            raise BoardFetchError(msg) from last_error

        try:
            html = data.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("Board body is not UTF-8", stop_id=stop_id, size_bytes=len(data))
            return ""

        logger.info("Board downloaded", stop_id=stop_id, size_bytes=len(data))
        return html
