"""Seekable big-endian reader used by the chunk parsers."""

from __future__ import annotations

import io
import struct
from typing import BinaryIO

STRING_BLOCK_SIZE = 64


class ShortReadError(EOFError):
    """Raised when the stream ends before a complete value could be read."""


class BinaryCursor:
    """Big-endian reads over a seekable binary file object.

    The cursor never owns the stream: callers open and close it.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        start = stream.tell()
        self._length = stream.seek(0, io.SEEK_END)
        stream.seek(start)

    @classmethod
    def from_bytes(cls, data: bytes) -> "BinaryCursor":
        return cls(io.BytesIO(data))

    def position(self) -> int:
        return self._stream.tell()

    def seek(self, position: int) -> None:
        if position < 0:
            raise ValueError(f"cannot seek to negative position {position}")
        self._stream.seek(position)

    def length(self) -> int:
        return self._length

    def remaining(self) -> int:
        return max(0, self._length - self.position())

    def is_exhausted(self) -> bool:
        return self.position() >= self._length

    def read_bytes(self, count: int) -> bytes:
        """Read exactly ``count`` bytes.

        Nothing is consumed when fewer than ``count`` bytes remain, so a
        corrupt size field cannot trigger an oversized read.
        """
        if count < 0:
            raise ValueError(f"negative read size {count}")
        if count > self.remaining():
            raise ShortReadError(
                f"need {count} bytes at 0x{self.position():X}, "
                f"only {self.remaining()} left"
            )
        data = self._stream.read(count)
        if len(data) != count:
            raise ShortReadError(f"stream returned {len(data)} of {count} bytes")
        return data

    def _unpack(self, fmt: str) -> int | float:
        size = struct.calcsize(fmt)
        return struct.unpack(fmt, self.read_bytes(size))[0]

    def read_u16_be(self) -> int:
        return self._unpack(">H")

    def read_u32_be(self) -> int:
        return self._unpack(">I")

    def read_i64_be(self) -> int:
        return self._unpack(">q")

    def read_f64_be(self) -> float:
        return self._unpack(">d")

    def read_string(self) -> str:
        """Read a NUL-terminated UTF-8 string and consume its terminator."""
        start = self.position()
        parts = []
        while True:
            block = self._stream.read(STRING_BLOCK_SIZE)
            if not block:
                self._stream.seek(start)
                raise ShortReadError(f"unterminated string at 0x{start:X}")
            end = block.find(b"\x00")
            if end != -1:
                parts.append(block[:end])
                break
            parts.append(block)
        raw = b"".join(parts)
        self._stream.seek(start + len(raw) + 1)
        return raw.decode("utf-8", errors="replace")
