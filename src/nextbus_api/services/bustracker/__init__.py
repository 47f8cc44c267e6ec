"""BusTracker arrival-board scraping pipeline."""

from nextbus_api.services.bustracker.board import StopBoardService, build_board_predictions
from nextbus_api.services.bustracker.eta import parse_eta, sort_predictions
from nextbus_api.services.bustracker.extractor import (
    ExtractionStrategy,
    PredictionExtractor,
    extract_predictions,
)
from nextbus_api.services.bustracker.fetcher import BoardFetchError, BusTrackerFetcher
from nextbus_api.services.bustracker.normalizer import TextNormalizer

__all__ = [
    "BoardFetchError",
    "BusTrackerFetcher",
    "ExtractionStrategy",
    "PredictionExtractor",
    "StopBoardService",
    "TextNormalizer",
    "build_board_predictions",
    "extract_predictions",
    "parse_eta",
    "sort_predictions",
]
