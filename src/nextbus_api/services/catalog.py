"""Stop catalog: a small delimited-text lookup of stop ids, codes and names."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from pathlib import Path

from nextbus_api.logging import get_logger

logger = get_logger(__name__)

REQUIRED_COLUMNS = {"id", "code", "name"}


@dataclass(frozen=True)
class StopCatalogEntry:
    id: str
    code: str
    name: str


# Curated UCSB / Isla Vista stops used when no catalog file is configured
FALLBACK_ENTRIES: tuple[StopCatalogEntry, ...] = (
    StopCatalogEntry(id="3001", code="3001", name="UCSB North Hall"),
    StopCatalogEntry(id="3002", code="3002", name="UCSB Elings Hall"),
    StopCatalogEntry(id="1465", code="1465", name="Storke & El Colegio"),
    StopCatalogEntry(id="1466", code="1466", name="Storke & Hollister"),
    StopCatalogEntry(id="2750", code="2750", name="Camino Real Marketplace"),
    StopCatalogEntry(id="1100", code="1100", name="Downtown Transit Center"),
)


class StopCatalog:
    """Loaded once by its owner and handed to whoever needs lookups."""

    def __init__(self, entries: tuple[StopCatalogEntry, ...], used_fallback: bool = False) -> None:
        self._entries = entries
        self._by_code = {e.code: e for e in entries}
        self.used_fallback = used_fallback

    @classmethod
    def from_text(cls, text: str) -> StopCatalog:
        """Parse ``id,code,name`` rows. Rows missing an id or name are skipped."""
        reader = csv.DictReader(io.StringIO(text))
        if reader.fieldnames is None or not REQUIRED_COLUMNS <= set(reader.fieldnames):
            logger.warning("Stop catalog missing columns", columns=reader.fieldnames)
            return cls.fallback()

        entries: list[StopCatalogEntry] = []
        for row in reader:
            stop_id = (row.get("id") or "").strip()
            name = (row.get("name") or "").strip()
            if not stop_id or not name:
                continue
            code = (row.get("code") or "").strip() or stop_id
            entries.append(StopCatalogEntry(id=stop_id, code=code, name=name))

        if not entries:
            return cls.fallback()
        return cls(tuple(entries))

    @classmethod
    def load(cls, path: str | Path | None) -> StopCatalog:
        """Load from a file, falling back to the built-in list if unavailable."""
        if not path:
            return cls.fallback()
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Stop catalog unreadable, using fallback", path=str(path), error=str(exc))
            return cls.fallback()

        catalog = cls.from_text(text)
        logger.info(
            "Stop catalog loaded",
            path=str(path),
            entry_count=len(catalog),
            used_fallback=catalog.used_fallback,
        )
        return catalog

    @classmethod
    def fallback(cls) -> StopCatalog:
        return cls(FALLBACK_ENTRIES, used_fallback=True)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, code: str) -> StopCatalogEntry | None:
        return self._by_code.get(code.strip())

    def search(self, query: str) -> list[StopCatalogEntry]:
        """Entries whose code or name contains ``query`` (case-insensitive)."""
        needle = query.strip().lower()
        if not needle:
            return list(self._entries)
        return [e for e in self._entries if needle in e.code.lower() or needle in e.name.lower()]
