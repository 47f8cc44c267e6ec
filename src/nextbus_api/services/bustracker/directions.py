"""Headsign heuristics for the UCSB / Goleta corridor."""

from __future__ import annotations

from nextbus_api.models.predictions import Prediction

STORKE_EL_COLEGIO_HINTS = ("ucsb", "camino real", "isla vista", "storke", "market")
CAMINO_REAL_MARKET_HINTS = ("camino real mkt", "marketplace", "market", "mkt")


def toward_storke_el_colegio(prediction: Prediction) -> bool:
    """Trips heading toward the Storke & El Colegio area."""
    headsign = prediction.headsign.lower()
    return any(hint in headsign for hint in STORKE_EL_COLEGIO_HINTS)


def toward_camino_real_market(prediction: Prediction) -> bool:
    headsign = prediction.headsign.lower()
    return any(hint in headsign for hint in CAMINO_REAL_MARKET_HINTS)
