"""Public vehicle-location endpoint."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Query
from pydantic import BaseModel

from nextbus_api.logging import get_logger
from nextbus_api.services.gtfs_rt.vehicles import filter_vehicles
from nextbus_api.services.gtfs_rt.worker import get_worker

logger = get_logger(__name__)

router = APIRouter(tags=["vehicles"])


class VehicleItem(BaseModel):
    id: str
    route_id: str | None
    trip_id: str | None
    latitude: float
    longitude: float
    bearing: float | None
    speed_meters_per_second: float | None
    speed_mph: float | None
    timestamp: str | None


class VehiclesResponse(BaseModel):
    items: list[VehicleItem]
    count: int
    generation: int | None
    fetched_at: str | None


@router.get(
    "/vehicles",
    response_model=VehiclesResponse,
    summary="Latest decoded vehicle locations",
    description=(
        "Serve the most recently published vehicle snapshot. If the refresh "
        "worker has never attempted a refresh, one runs first. "
        "`route` and `trip` are case-insensitive substring filters."
    ),
)
async def list_vehicles(
    route: Annotated[str | None, Query(description="Route id substring")] = None,
    trip: Annotated[str | None, Query(description="Trip id substring")] = None,
) -> dict[str, Any]:
    worker = get_worker()
    if worker.snapshot is None and worker.refresh_count == 0:
        await worker.run_once()

    snapshot = worker.snapshot
    if snapshot is None:
        return {"items": [], "count": 0, "generation": None, "fetched_at": None}

    vehicles = filter_vehicles(snapshot.vehicles, route=route, trip=trip)
    return {
        "items": [v.to_dict() for v in vehicles],
        "count": len(vehicles),
        "generation": snapshot.generation,
        "fetched_at": snapshot.fetched_at.isoformat(),
    }
