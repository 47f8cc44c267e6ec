"""Per-stop arrival boards: fetch, extract, filter, order, truncate."""

from __future__ import annotations

import asyncio
from typing import Callable, Sequence

from nextbus_api.config import get_settings
from nextbus_api.logging import get_logger
from nextbus_api.models.predictions import Prediction, StopBoard, StopConfig, StopFilter
from nextbus_api.services.bustracker.eta import sort_predictions
from nextbus_api.services.bustracker.extractor import PredictionExtractor
from nextbus_api.services.bustracker.fetcher import BoardFetchError, BusTrackerFetcher

logger = get_logger(__name__)


def build_board_predictions(
    predictions: Sequence[Prediction],
    stop_filter: StopFilter | None = None,
    limit: int | None = None,
) -> list[Prediction]:
    """Apply the stop filter, order soonest-first and keep the first ``limit``."""
    if stop_filter is not None:
        predictions = [p for p in predictions if stop_filter.matches(p)]
    ordered = sort_predictions(predictions)
    return ordered if limit is None else ordered[:limit]


class StopBoardService:
    """Builds StopBoards from the BusTracker arrival page.

    Each stop is fetched independently. A stop whose fetch fails gets an
    empty board; it never fails the others.
    """

    def __init__(
        self,
        fetcher: BusTrackerFetcher | None = None,
        extractor: PredictionExtractor | None = None,
        max_predictions: int | None = None,
    ) -> None:
        settings = get_settings()
        self._settings = settings
        self._fetcher = fetcher or BusTrackerFetcher(
            timeout_sec=settings.fetch_timeout_sec,
            max_retries=settings.fetch_max_retries,
            backoff_base=settings.fetch_backoff_base,
            user_agent=settings.user_agent,
        )
        self._extractor = extractor or PredictionExtractor()
        self._max_predictions = max_predictions or settings.max_predictions_per_stop

    async def get_predictions(self, stop_id: str) -> list[Prediction]:
        """Fetch and extract a stop's predictions in board order.

        Raises:
            BoardFetchError: If the board could not be fetched.
        """
        url = self._settings.bustracker_eta_url(stop_id)
        markup = await self._fetcher.fetch(url, stop_id)
        if not markup:
            return []
        predictions = self._extractor.extract_from_markup(markup)
        logger.info("Board parsed", stop_id=stop_id, prediction_count=len(predictions))
        return predictions

    async def get_board(
        self,
        config: StopConfig,
        limit: int | None = None,
        keep: Callable[[Prediction], bool] | None = None,
    ) -> StopBoard:
        """Board for one stop. ``keep`` is an extra predicate applied before truncation."""
        try:
            predictions = await self.get_predictions(config.stop_id)
        except BoardFetchError as exc:
            logger.warning("Stop board unavailable", stop_id=config.stop_id, error=str(exc))
            predictions = []

        if keep is not None:
            predictions = [p for p in predictions if keep(p)]
        selected = build_board_predictions(
            predictions,
            stop_filter=config.stop_filter,
            limit=limit or self._max_predictions,
        )
        return StopBoard(
            stop_id=config.stop_id,
            label=config.display_label,
            predictions=tuple(selected),
        )

    async def get_boards(self, configs: Sequence[StopConfig]) -> list[StopBoard]:
        """Boards for every enabled stop, fetched concurrently, in config order."""
        enabled = [c for c in configs if c.enabled]
        if not enabled:
            return []
        return list(await asyncio.gather(*(self.get_board(c) for c in enabled)))
