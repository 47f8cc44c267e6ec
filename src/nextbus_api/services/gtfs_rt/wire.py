"""Minimal protobuf wire-format reader.

Only the primitives the vehicle-position decoder needs. Every read returns
None instead of raising when the buffer cannot satisfy it, so a caller can
stop decoding the current message and keep what it already has.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator

MAX_VARINT_SHIFT = 64


class WireType(IntEnum):
    VARINT = 0
    FIXED64 = 1
    LENGTH_DELIMITED = 2
    START_GROUP = 3
    END_GROUP = 4
    FIXED32 = 5


@dataclass(frozen=True)
class WireField:
    """A field as seen on the wire, before interpretation.

    ``raw`` is the payload only: the varint bytes, the fixed-width word, or
    the bytes after a length prefix.
    """

    field_number: int
    wire_type: int
    raw: bytes

    def as_varint(self) -> int | None:
        return WireReader(self.raw).read_varint()

    def as_float(self) -> float | None:
        return WireReader(self.raw).read_float()

    def as_text(self) -> str | None:
        """UTF-8 text, or None if the payload is not valid UTF-8.

        Bad text only loses this field; the cursor has already moved past it.
        """
        try:
            return self.raw.decode("utf-8")
        except UnicodeDecodeError:
            return None


class WireReader:
    """Forward-only cursor over a protobuf-encoded buffer."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._offset = 0

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    @property
    def at_end(self) -> bool:
        return self._offset >= len(self._data)

    def read_varint(self) -> int | None:
        """Read a base-128 varint, or None if truncated or wider than 64 bits."""
        result = 0
        shift = 0
        data = self._data
        while self._offset < len(data) and shift < MAX_VARINT_SHIFT:
            byte = data[self._offset]
            self._offset += 1
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result & 0xFFFFFFFFFFFFFFFF
            shift += 7
        return None

    def read_fixed32(self) -> int | None:
        if self.remaining < 4:
            return None
        (value,) = struct.unpack_from("<I", self._data, self._offset)
        self._offset += 4
        return value

    def read_fixed64(self) -> int | None:
        if self.remaining < 8:
            return None
        (value,) = struct.unpack_from("<Q", self._data, self._offset)
        self._offset += 8
        return value

    def read_float(self) -> float | None:
        """Read a fixed32 and reinterpret it as a little-endian IEEE-754 float."""
        bits = self.read_fixed32()
        if bits is None:
            return None
        return struct.unpack("<f", struct.pack("<I", bits))[0]

    def read_length_delimited(self) -> bytes | None:
        """Read a length prefix and that many bytes.

        Fails when the declared length runs past the end of the buffer.
        """
        length = self.read_varint()
        if length is None or length > self.remaining:
            return None
        start = self._offset
        self._offset += length
        return bytes(self._data[start : self._offset])

    def read_key(self) -> tuple[int, int] | None:
        """Read a tag and split it into (field_number, wire_type)."""
        key = self.read_varint()
        if key is None:
            return None
        return key >> 3, key & 0x07

    def skip_field(self, wire_type: int) -> bool:
        """Advance past a field payload.

        Returns False when the payload cannot be skipped: an unrecognized wire
        type (including groups) or a payload that runs past the buffer. The
        enclosing message must stop decoding at that point.
        """
        if wire_type == WireType.VARINT:
            return self.read_varint() is not None
        if wire_type == WireType.FIXED64:
            return self.read_fixed64() is not None
        if wire_type == WireType.LENGTH_DELIMITED:
            return self.read_length_delimited() is not None
        if wire_type == WireType.FIXED32:
            return self.read_fixed32() is not None
        return False

    def fields(self) -> Iterator[WireField]:
        """Yield every remaining field until the buffer ends or breaks.

        Stops at a truncated key, a truncated payload or an unskippable wire
        type; ``at_end`` tells the caller which happened.
        """
        while not self.at_end:
            key = self.read_key()
            if key is None:
                return
            field_number, wire_type = key
            if wire_type == WireType.LENGTH_DELIMITED:
                payload = self.read_length_delimited()
                if payload is None:
                    return
            else:
                start = self._offset
                if not self.skip_field(wire_type):
                    return
                payload = bytes(self._data[start : self._offset])
            yield WireField(field_number, wire_type, payload)
