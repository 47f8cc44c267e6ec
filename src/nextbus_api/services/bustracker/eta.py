"""ETA token parsing and arrival ordering."""

from __future__ import annotations

import re
from typing import Iterable

from nextbus_api.models.predictions import Prediction

IMMINENT_WORDS = ("APPROACHING", "DUE", "ARRIVING")
UNKNOWN_ETA_SORT_KEY = 9_999

_DIGITS_RE = re.compile(r"[0-9]+")


def parse_eta(token: str) -> int | None:
    """Map a board ETA token to minutes.

    ``APPROACHING``/``DUE``/``ARRIVING`` anywhere in the token mean 0.
    Otherwise the first run of digits is the minute count. Anything else is
    unknown (None).
    """
    upper = token.upper()
    if any(word in upper for word in IMMINENT_WORDS):
        return 0
    match = _DIGITS_RE.search(token)
    if match is None:
        return None
    return int(match.group())


def eta_sort_key(prediction: Prediction) -> tuple[bool, int]:
    # Unknown sorts after every known value, however large
    if prediction.eta_minutes is None:
        return (True, UNKNOWN_ETA_SORT_KEY)
    return (False, prediction.eta_minutes)


def sort_predictions(predictions: Iterable[Prediction]) -> list[Prediction]:
    """Soonest first, unknown ETAs last; ties keep extraction order."""
    return sorted(predictions, key=eta_sort_key)
