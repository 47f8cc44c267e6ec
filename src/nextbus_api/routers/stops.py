"""Public stop endpoints.

Endpoints
---------
GET /stops/catalog                 – search the stop catalog by code or name
GET /stops/{stop_id}/predictions   – upcoming arrivals for a stop
"""

from __future__ import annotations

from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from nextbus_api.logging import get_logger
from nextbus_api.models.predictions import StopConfig, StopFilter
from nextbus_api.services.bustracker.board import StopBoardService
from nextbus_api.services.bustracker.directions import (
    toward_camino_real_market,
    toward_storke_el_colegio,
)
from nextbus_api.services.catalog import StopCatalog

logger = get_logger(__name__)

router = APIRouter(tags=["stops"])

DIRECTION_FILTERS = {
    "storke": toward_storke_el_colegio,
    "camino_real": toward_camino_real_market,
}


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CatalogEntry(BaseModel):
    id: str
    code: str
    name: str


class CatalogResponse(BaseModel):
    items: list[CatalogEntry]
    count: int
    used_fallback: bool


class PredictionItem(BaseModel):
    route: str
    headsign: str
    eta_minutes: int | None
    eta_label: str


class StopBoardResponse(BaseModel):
    stop_id: str
    label: str
    fetched_at: str
    predictions: list[PredictionItem]


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_catalog(request: Request) -> StopCatalog:
    return request.app.state.stop_catalog


def get_board_service() -> StopBoardService:
    return StopBoardService()


def _split_routes(routes: str | None) -> list[str]:
    if not routes:
        return []
    return [r for r in routes.split(",") if r.strip()]


# ---------------------------------------------------------------------------
# GET /stops/catalog
# ---------------------------------------------------------------------------


@router.get("/stops/catalog", response_model=CatalogResponse, summary="Search the stop catalog")
async def search_catalog(
    catalog: Annotated[StopCatalog, Depends(get_catalog)],
    q: Annotated[str, Query(description="Substring of the stop code or name")] = "",
) -> dict[str, object]:
    entries = catalog.search(q)
    return {
        "items": [{"id": e.id, "code": e.code, "name": e.name} for e in entries],
        "count": len(entries),
        "used_fallback": catalog.used_fallback,
    }


# ---------------------------------------------------------------------------
# GET /stops/{stop_id}/predictions
# ---------------------------------------------------------------------------


@router.get(
    "/stops/{stop_id}/predictions",
    response_model=StopBoardResponse,
    summary="Upcoming arrivals for a stop",
    description=(
        "Scrape the BusTracker arrival board for `stop_id`, optionally keep only "
        "the listed `routes` and headsigns containing `headsign`, and return the "
        "soonest arrivals first. An unreachable board yields an empty list."
    ),
)
async def get_stop_predictions(
    stop_id: str,
    catalog: Annotated[StopCatalog, Depends(get_catalog)],
    service: Annotated[StopBoardService, Depends(get_board_service)],
    routes: Annotated[str | None, Query(description="Comma-separated route allow-list")] = None,
    headsign: Annotated[str | None, Query(description="Headsign substring")] = None,
    toward: Annotated[
        Literal["storke", "camino_real"] | None,
        Query(description="Keep trips heading toward a known destination"),
    ] = None,
    limit: Annotated[int | None, Query(ge=1, le=50)] = None,
) -> dict[str, object]:
    entry = catalog.get(stop_id)
    config = StopConfig(
        stop_id=stop_id,
        label=entry.name if entry else "",
        stop_filter=StopFilter.from_values(_split_routes(routes), headsign),
    )
    keep = DIRECTION_FILTERS[toward] if toward is not None else None
    board = await service.get_board(config, limit=limit, keep=keep)

    return {
        "stop_id": board.stop_id,
        "label": board.label,
        "fetched_at": board.fetched_at.isoformat(),
        "predictions": [p.to_dict() for p in board.predictions],
    }
