"""Arrival prediction value records and per-stop board types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class Prediction:
    """A single upcoming arrival scraped from an arrival board.

    ``eta_minutes`` is None when the board text could not be parsed, 0 when the
    bus is approaching/due/arriving.
    """

    route: str
    headsign: str
    eta_minutes: int | None

    @property
    def eta_label(self) -> str:
        if self.eta_minutes is None:
            return "—"
        if self.eta_minutes <= 0:
            return "Approaching"
        if self.eta_minutes == 1:
            return "1 min"
        return f"{self.eta_minutes} min"

    def to_dict(self) -> dict[str, object]:
        return {
            "route": self.route,
            "headsign": self.headsign,
            "eta_minutes": self.eta_minutes,
            "eta_label": self.eta_label,
        }


@dataclass(frozen=True)
class StopFilter:
    """Per-stop user preferences, owned and persisted by the caller."""

    routes: frozenset[str] = frozenset()
    headsign_includes: str = ""

    @classmethod
    def from_values(cls, routes: list[str] | None = None, headsign: str | None = None) -> StopFilter:
        cleaned = frozenset(r.strip().upper() for r in routes or [] if r.strip())
        return cls(routes=cleaned, headsign_includes=(headsign or "").strip())

    def matches(self, prediction: Prediction) -> bool:
        if self.routes and prediction.route not in self.routes:
            return False
        needle = self.headsign_includes.strip().lower()
        if needle and needle not in prediction.headsign.lower():
            return False
        return True


@dataclass(frozen=True)
class StopConfig:
    """A stop the user follows, with its display label and filter."""

    stop_id: str
    label: str = ""
    stop_filter: StopFilter = StopFilter()
    enabled: bool = True

    @property
    def display_label(self) -> str:
        return self.label or self.stop_id


@dataclass(frozen=True)
class StopBoard:
    """Predictions for one stop as of ``fetched_at``."""

    stop_id: str
    label: str
    predictions: tuple[Prediction, ...] = ()
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, object]:
        return {
            "stop_id": self.stop_id,
            "label": self.label,
            "fetched_at": self.fetched_at.isoformat(),
            "predictions": [p.to_dict() for p in self.predictions],
        }
