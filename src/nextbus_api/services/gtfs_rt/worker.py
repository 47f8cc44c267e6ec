"""Vehicle-positions refresh worker with a configurable interval."""

from __future__ import annotations

import asyncio
import itertools
import uuid
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from nextbus_api.config import get_settings
from nextbus_api.logging import get_logger
from nextbus_api.models.realtime import VehicleLocation
from nextbus_api.services.gtfs_rt.fetcher import FeedFetchError, GtfsRtFetcher
from nextbus_api.services.gtfs_rt.vehicles import VehicleFeedDecoder

logger = get_logger(__name__)


@dataclass(frozen=True)
class VehicleSnapshot:
    """A fully decoded fleet state, published atomically."""

    generation: int
    vehicles: tuple[VehicleLocation, ...] = ()
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class VehicleRefreshWorker:
    """Refreshes the vehicle feed on a schedule and holds the latest snapshot.

    Every refresh takes a generation number when it starts. A snapshot is only
    published once its fetch and decode have both finished, and only if no
    newer generation has been published in the meantime, so a slow or
    cancelled refresh never overwrites a later result.

    Usage:
        worker = VehicleRefreshWorker()
        await worker.start()   # launches background task
        await worker.stop()    # cancels background task

        # Or run a single refresh:
        report = await worker.run_once()
    """

    def __init__(self) -> None:
        settings = get_settings()
        self._refresh_interval = settings.vehicle_refresh_interval_sec
        self._url = settings.vehicle_positions_url
        self._fetcher = GtfsRtFetcher(
            timeout_sec=settings.fetch_timeout_sec,
            max_retries=settings.fetch_max_retries,
            backoff_base=settings.fetch_backoff_base,
            user_agent=settings.user_agent,
        )
        self._decoder = VehicleFeedDecoder()

        self._task: asyncio.Task[None] | None = None
        self._running = False
        self._generations = itertools.count(1)
        self._snapshot: VehicleSnapshot | None = None
        self._refresh_count = 0
        self._last_refresh_at: datetime | None = None
        self._last_error: str | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def refresh_count(self) -> int:
        return self._refresh_count

    @property
    def snapshot(self) -> VehicleSnapshot | None:
        return self._snapshot

    async def start(self) -> None:
        """Start the background refresh loop."""
        if self._running:
            logger.warning("Worker already running, ignoring start request")
            return

        self._running = True
        self._task = asyncio.create_task(self._refresh_loop())
        logger.info("Vehicle refresh worker started", refresh_interval_sec=self._refresh_interval)

    async def stop(self) -> None:
        """Stop scheduling refreshes. The committed snapshot is kept."""
        if not self._running:
            return

        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            with suppress(asyncio.CancelledError):
                await self._task
        self._task = None
        logger.info("Vehicle refresh worker stopped")

    async def run_once(self) -> dict[str, Any]:
        """Fetch and decode the feed once, publishing the result if still current."""
        generation = next(self._generations)
        refresh_id = str(uuid.uuid4())[:8]
        self._refresh_count += 1
        started_at = datetime.now(timezone.utc)
        self._last_refresh_at = started_at

        report: dict[str, Any] = {
            "refresh_id": refresh_id,
            "generation": generation,
            "started_at": started_at.isoformat(),
            "status": "error",
            "vehicle_count": 0,
            "published": False,
            "error": None,
        }

        try:
            data = await self._fetcher.fetch(self._url, refresh_id)
        except FeedFetchError as exc:
            self._last_error = str(exc)
            report["error"] = str(exc)
            logger.error("Vehicle refresh failed", refresh_id=refresh_id, error=str(exc))
            report["ended_at"] = datetime.now(timezone.utc).isoformat()
            return report

        vehicles = self._decoder.decode(data)
        snapshot = VehicleSnapshot(generation=generation, vehicles=tuple(vehicles))
        report["status"] = "ok"
        report["vehicle_count"] = len(vehicles)
        report["published"] = self._publish(snapshot)
        self._last_error = None
        report["ended_at"] = datetime.now(timezone.utc).isoformat()

        logger.info(
            "Vehicle refresh complete",
            refresh_id=refresh_id,
            generation=generation,
            vehicle_count=len(vehicles),
            published=report["published"],
        )
        return report

    async def get_status(self) -> dict[str, Any]:
        """Get current worker status for health/admin endpoints."""
        snapshot = self._snapshot
        return {
            "running": self._running,
            "refresh_count": self._refresh_count,
            "last_refresh_at": self._last_refresh_at.isoformat() if self._last_refresh_at else None,
            "refresh_interval_sec": self._refresh_interval,
            "vehicle_count": len(snapshot.vehicles) if snapshot else 0,
            "snapshot_generation": snapshot.generation if snapshot else None,
            "last_error": self._last_error,
        }

    def _publish(self, snapshot: VehicleSnapshot) -> bool:
        current = self._snapshot
        if current is not None and current.generation > snapshot.generation:
            logger.info(
                "Discarding stale vehicle snapshot",
                generation=snapshot.generation,
                committed_generation=current.generation,
            )
            return False
        self._snapshot = snapshot
        return True

    async def _refresh_loop(self) -> None:
        """Main refresh loop that runs until stopped."""
        while self._running:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                break
            except Exception as exc:
                logger.error("Vehicle refresh failed unexpectedly", exc_info=exc)

            try:
                await asyncio.sleep(self._refresh_interval)
            except asyncio.CancelledError:
                break


# Singleton instance for the app lifecycle
_worker_instance: VehicleRefreshWorker | None = None


def get_worker() -> VehicleRefreshWorker:
    """Get or create the singleton worker instance."""
    global _worker_instance
    if _worker_instance is None:
        _worker_instance = VehicleRefreshWorker()
    return _worker_instance


def reset_worker() -> None:
    """Reset the singleton (for testing)."""
    global _worker_instance
    _worker_instance = None
