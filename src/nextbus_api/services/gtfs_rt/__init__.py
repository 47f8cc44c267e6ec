"""GTFS-Realtime vehicle-positions pipeline."""

from nextbus_api.services.gtfs_rt.compression import GzipFallbackDetector
from nextbus_api.services.gtfs_rt.decoder import FeedMessageDecoder
from nextbus_api.services.gtfs_rt.fetcher import FeedFetchError, GtfsRtFetcher
from nextbus_api.services.gtfs_rt.vehicles import VehicleFeedDecoder, filter_vehicles
from nextbus_api.services.gtfs_rt.wire import WireField, WireReader, WireType
from nextbus_api.services.gtfs_rt.worker import VehicleRefreshWorker

__all__ = [
    "FeedFetchError",
    "FeedMessageDecoder",
    "GtfsRtFetcher",
    "GzipFallbackDetector",
    "VehicleFeedDecoder",
    "VehicleRefreshWorker",
    "WireField",
    "WireReader",
    "WireType",
    "filter_vehicles",
]
