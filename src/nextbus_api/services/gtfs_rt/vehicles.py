"""Top-level vehicle feed decode: as-is first, gzip fallback second."""

from __future__ import annotations

from typing import Iterable

from nextbus_api.logging import get_logger
from nextbus_api.models.realtime import VehicleLocation
from nextbus_api.services.gtfs_rt.compression import GzipFallbackDetector
from nextbus_api.services.gtfs_rt.decoder import FeedMessageDecoder

logger = get_logger(__name__)


class VehicleFeedDecoder:
    """Turns a raw vehicle-positions payload into VehicleLocation records.

    Never raises for malformed input; the worst case is an empty list.
    """

    @staticmethod
    def decode(data: bytes) -> list[VehicleLocation]:
        vehicles = FeedMessageDecoder.decode_vehicles(data)
        if vehicles:
            return vehicles

        inflated = GzipFallbackDetector.decompress(data)
        if inflated is not None:
            vehicles = FeedMessageDecoder.decode_vehicles(inflated)
            logger.debug(
                "Decoded gzip vehicle payload",
                size_bytes=len(data),
                inflated_bytes=len(inflated),
                vehicle_count=len(vehicles),
            )

        if not vehicles:
            logger.debug(
                "Vehicle decode yielded no vehicles",
                size_bytes=len(data),
                prefix=bytes(data[:24]).hex(" "),
            )
        return vehicles


def filter_vehicles(
    vehicles: Iterable[VehicleLocation],
    route: str | None = None,
    trip: str | None = None,
) -> list[VehicleLocation]:
    """Keep vehicles whose route/trip id contains the given substrings.

    Matching is case-insensitive; an empty or missing needle matches all.
    """
    route_needle = (route or "").strip().lower()
    trip_needle = (trip or "").strip().lower()

    result: list[VehicleLocation] = []
    for v in vehicles:
        if route_needle and route_needle not in (v.route_id or "").lower():
            continue
        if trip_needle and trip_needle not in (v.trip_id or "").lower():
            continue
        result.append(v)
    return result
