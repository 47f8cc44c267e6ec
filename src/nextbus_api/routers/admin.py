"""Vehicle refresh worker control and status endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel

from nextbus_api.logging import get_logger
from nextbus_api.services.gtfs_rt.worker import get_worker

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/vehicles", tags=["admin"])


# --- Response schemas ---


class WorkerStatusResponse(BaseModel):
    """Response for worker status."""

    running: bool
    refresh_count: int
    last_refresh_at: str | None = None
    refresh_interval_sec: int
    vehicle_count: int
    snapshot_generation: int | None = None
    last_error: str | None = None


class RefreshResponse(BaseModel):
    """Response for the refresh endpoint."""

    refresh_id: str
    generation: int
    started_at: str
    ended_at: str = ""
    status: str
    vehicle_count: int
    published: bool
    error: str | None = None


# --- Endpoints ---


@router.post("/refresh", response_model=RefreshResponse, summary="Run one vehicle refresh now")
async def refresh_once() -> dict[str, Any]:
    worker = get_worker()
    return await worker.run_once()


@router.post("/start", response_model=WorkerStatusResponse, summary="Start the refresh worker")
async def start_worker() -> dict[str, Any]:
    worker = get_worker()
    await worker.start()
    return await worker.get_status()


@router.post("/stop", response_model=WorkerStatusResponse, summary="Stop the refresh worker")
async def stop_worker() -> dict[str, Any]:
    worker = get_worker()
    await worker.stop()
    return await worker.get_status()


@router.get("/status", response_model=WorkerStatusResponse, summary="Refresh worker status")
async def worker_status() -> dict[str, Any]:
    worker = get_worker()
    return await worker.get_status()
