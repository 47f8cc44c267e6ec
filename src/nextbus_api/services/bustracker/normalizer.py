"""Arrival-board markup to line-oriented plain text."""

from __future__ import annotations

import html
import re

_TAG_RE = re.compile(r"<[^>]*>")
_NBSP_ENTITY_RE = re.compile(r"&(?:nbsp|#160|#xa0);", re.IGNORECASE)


class TextNormalizer:
    """Flattens scraped HTML into text the prediction patterns can scan.

    Steps, in order: line endings to ``\\n``, ``&nbsp;`` to a space, doubled
    newlines collapsed, every ``<...>`` span replaced by a single space. Any
    remaining character entities are unescaped last so a literal ``&lt;`` in a
    headsign can never be mistaken for a tag. Line endings produced by
    unescaping are unified again.
    """

    @staticmethod
    def normalize(markup: str) -> str:
        text = markup.replace("\r\n", "\n").replace("\r", "\n")
        text = _NBSP_ENTITY_RE.sub(" ", text)
        text = text.replace("\n\n", "\n")
        text = _TAG_RE.sub(" ", text)
        text = html.unescape(text)
        # entities such as &#13; can decode to a bare carriage return
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        return text.replace("\u00a0", " ")
