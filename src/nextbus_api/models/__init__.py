"""Domain value records for NextBus."""

from nextbus_api.models.predictions import Prediction, StopBoard, StopConfig, StopFilter
from nextbus_api.models.realtime import VehicleLocation

__all__ = [
    "Prediction",
    "StopBoard",
    "StopConfig",
    "StopFilter",
    "VehicleLocation",
]
