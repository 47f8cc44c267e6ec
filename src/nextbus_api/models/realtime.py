"""Vehicle position value records decoded from GTFS-RT feeds."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

MPS_TO_MPH = 2.236936


@dataclass(frozen=True)
class VehicleLocation:
    """One vehicle with a known position.

    Only built once both latitude and longitude were decoded; every other
    field is independently optional.
    """

    id: str
    latitude: float
    longitude: float
    route_id: str | None = None
    trip_id: str | None = None
    bearing: float | None = None
    speed_meters_per_second: float | None = None
    timestamp_epoch_seconds: int | None = None

    @property
    def timestamp(self) -> datetime | None:
        """Vehicle report time as a tz-aware UTC datetime."""
        if self.timestamp_epoch_seconds is None:
            return None
        try:
            return datetime.fromtimestamp(self.timestamp_epoch_seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    @property
    def speed_mph(self) -> float | None:
        if self.speed_meters_per_second is None:
            return None
        return self.speed_meters_per_second * MPS_TO_MPH

    def to_dict(self) -> dict[str, object]:
        ts = self.timestamp
        return {
            "id": self.id,
            "route_id": self.route_id,
            "trip_id": self.trip_id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "bearing": self.bearing,
            "speed_meters_per_second": self.speed_meters_per_second,
            "speed_mph": self.speed_mph,
            "timestamp": ts.isoformat() if ts else None,
        }
