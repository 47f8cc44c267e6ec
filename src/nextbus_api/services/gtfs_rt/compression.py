"""Detect and inflate gzip payloads served without Content-Encoding."""

from __future__ import annotations

import zlib

from nextbus_api.logging import get_logger

logger = get_logger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
# 16 + MAX_WBITS selects the gzip header/trailer framing
_GZIP_WBITS = 16 + zlib.MAX_WBITS


class GzipFallbackDetector:
    """Recognises gzip magic bytes and decompresses the payload."""

    @staticmethod
    def is_gzip(data: bytes) -> bool:
        return len(data) >= 2 and data[:2] == GZIP_MAGIC

    @staticmethod
    def decompress(data: bytes) -> bytes | None:
        """Inflate a gzip payload.

        Returns None when the payload is not gzip or the stream is corrupt.
        A truncated stream returns whatever inflated before the cut.
        """
        if not GzipFallbackDetector.is_gzip(data):
            return None
        inflater = zlib.decompressobj(_GZIP_WBITS)
        try:
            inflated = inflater.decompress(data)
        except zlib.error as exc:
            logger.debug("Gzip payload is corrupt", size_bytes=len(data), error=str(exc))
            return None
        if not inflater.eof:
            logger.debug(
                "Gzip payload truncated",
                size_bytes=len(data),
                inflated_bytes=len(inflated),
            )
        return inflated or None
