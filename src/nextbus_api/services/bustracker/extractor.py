"""Arrival-board text extraction.

BusTracker renders rows like::

    ##  #28  UCSB North Hall   5 MIN
    ##  #11  Downtown SB   APPROACHING
    ##  #24X  UCSB / Camino Real Mkt   19 MIN

but the markup differs between deployments and board states, so rows are
pulled out by an ordered list of independent patterns. The first pattern that
matches anything wins outright; results from different patterns are never
combined.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from nextbus_api.logging import get_logger
from nextbus_api.models.predictions import Prediction
from nextbus_api.services.bustracker.eta import parse_eta
from nextbus_api.services.bustracker.normalizer import TextNormalizer

logger = get_logger(__name__)

ROUTE = r"([0-9]{1,2}[A-Z]?)"
HEADSIGN = r"([^\n\r]+?)"
ETA = r"((?:APPROACHING|DUE|ARRIVING)\b|\d+\s*MIN\w*)"

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ExtractionStrategy:
    """One pattern capturing (route, headsign, eta token)."""

    name: str
    pattern: re.Pattern[str]

    def extract(self, text: str) -> list[Prediction]:
        predictions: list[Prediction] = []
        for match in self.pattern.finditer(text):
            route, headsign, token = match.group(1, 2, 3)
            predictions.append(
                Prediction(
                    route=route.upper(),
                    headsign=_WHITESPACE_RE.sub(" ", headsign).strip(),
                    eta_minutes=parse_eta(token),
                )
            )
        return predictions


HASH_PREFIXED = ExtractionStrategy(
    name="hash_prefixed",
    pattern=re.compile(rf"#\s*#?{ROUTE}\s+{HEADSIGN}\s+{ETA}", re.IGNORECASE),
)
LINE_ANCHORED = ExtractionStrategy(
    name="line_anchored",
    pattern=re.compile(rf"^\s*{ROUTE}\s+{HEADSIGN}\s+{ETA}", re.IGNORECASE | re.MULTILINE),
)

DEFAULT_STRATEGIES: tuple[ExtractionStrategy, ...] = (HASH_PREFIXED, LINE_ANCHORED)


class PredictionExtractor:
    """Runs extraction strategies in order until one yields rows."""

    def __init__(self, strategies: Sequence[ExtractionStrategy] = DEFAULT_STRATEGIES) -> None:
        self.strategies = tuple(strategies)

    def extract(self, text: str) -> list[Prediction]:
        """Extract predictions from already-normalized text."""
        for strategy in self.strategies:
            predictions = strategy.extract(text)
            if predictions:
                logger.debug(
                    "Board rows extracted",
                    strategy=strategy.name,
                    prediction_count=len(predictions),
                )
                return predictions

        logger.debug("No board rows matched", text_preview=text[:600])
        return []

    def extract_from_markup(self, markup: str) -> list[Prediction]:
        return self.extract(TextNormalizer.normalize(markup))


def extract_predictions(markup: str) -> list[Prediction]:
    """Normalize raw board markup and extract predictions with the default cascade."""
    return PredictionExtractor().extract_from_markup(markup)
