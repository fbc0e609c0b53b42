"""Byte-level parsing helpers and the Internet checksum."""

from __future__ import annotations

import enum
import struct


class ParseResult(enum.Enum):
    """Outcome of parsing a packet or header."""

    NO_ERROR = "Success"
    BAD_CHECKSUM = "Bad checksum"
    PACKET_TOO_SHORT = "Not enough data to finish parsing"
    WRONG_IP_VERSION = "Got a version of IP other than 4"
    HEADER_TOO_SHORT = "Header length is shorter than minimum required"
    TRUNCATED_PACKET = "Packet length is shorter than header claims"
    UNSUPPORTED = "Packet uses unsupported features"


class ParseError(ValueError):
    """Raised when data cannot be parsed; ``result`` says why."""

    def __init__(self, result: ParseResult) -> None:
        super().__init__(result.value)
        self.result = result


class ByteReader:
    """Reads big-endian integers from the front of a byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def __len__(self) -> int:
        return len(self._data) - self._pos

    def _take(self, n: int) -> bytes:
        if n > len(self):
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        chunk = self._data[self._pos : self._pos + n]
        self._pos += n
        return chunk

    def u8(self) -> int:
        """Read one unsigned byte."""
        return self._take(1)[0]

    def u16(self) -> int:
        """Read a big-endian 16-bit unsigned integer."""
        return int.from_bytes(self._take(2), "big")

    def u32(self) -> int:
        """Read a big-endian 32-bit unsigned integer."""
        return int.from_bytes(self._take(4), "big")

    def remove_prefix(self, n: int) -> None:
        """Skip ``n`` bytes."""
        if n < 0:
            raise ValueError("cannot skip a negative number of bytes")
        self._take(n)

    def remaining(self) -> bytes:
        """Return the bytes not yet consumed."""
        return self._data[self._pos :]


def internet_checksum(data: bytes, initial: int = 0) -> int:
    """Return the 16-bit ones-complement Internet checksum of ``data``.

    ``initial`` is a partial sum to start from, such as a pseudo-header sum.
    """
    data = bytes(data)
    if len(data) % 2:
        data += b"\x00"
    total = initial + sum(word for (word,) in struct.iter_unpack(">H", data))
    while total > 0xFFFF:
        total = (total >> 16) + (total & 0xFFFF)
    return ~total & 0xFFFF