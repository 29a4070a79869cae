"""Tests for the big-endian binary cursor."""

from pathlib import Path
import struct
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from caf.cursor import BinaryCursor, ShortReadError  # noqa: E402


def test_big_endian_reads() -> None:
    data = struct.pack(">HIqd", 0x0102, 0xDEADBEEF, -1, 44100.0)
    cursor = BinaryCursor.from_bytes(data)
    assert cursor.read_u16_be() == 0x0102
    assert cursor.read_u32_be() == 0xDEADBEEF
    assert cursor.read_i64_be() == -1
    assert cursor.read_f64_be() == 44100.0
    assert cursor.is_exhausted()


def test_read_string_consumes_terminator() -> None:
    cursor = BinaryCursor.from_bytes("artist\x00Björk\x00".encode("utf-8"))
    assert cursor.read_string() == "artist"
    assert cursor.position() == 7
    assert cursor.read_string() == "Björk"
    assert cursor.is_exhausted()


def test_read_string_longer_than_one_block() -> None:
    text = "x" * 200
    cursor = BinaryCursor.from_bytes(text.encode() + b"\x00tail")
    assert cursor.read_string() == text
    assert cursor.read_bytes(4) == b"tail"


def test_read_string_replaces_invalid_utf8() -> None:
    cursor = BinaryCursor.from_bytes(b"ab\xffcd\x00")
    assert cursor.read_string() == "ab�cd"


def test_unterminated_string_raises_and_keeps_position() -> None:
    cursor = BinaryCursor.from_bytes(b"abc")
    with pytest.raises(ShortReadError):
        cursor.read_string()
    assert cursor.position() == 0


def test_read_bytes_past_end_consumes_nothing() -> None:
    cursor = BinaryCursor.from_bytes(b"\x00" * 8)
    cursor.seek(4)
    with pytest.raises(ShortReadError):
        cursor.read_bytes(1 << 62)
    assert cursor.position() == 4
    with pytest.raises(ShortReadError):
        cursor.read_i64_be()
    assert cursor.position() == 4


def test_negative_read_size_rejected() -> None:
    cursor = BinaryCursor.from_bytes(b"abcd")
    with pytest.raises(ValueError):
        cursor.read_bytes(-1)


def test_seek_past_end_exhausts_cursor() -> None:
    cursor = BinaryCursor.from_bytes(b"abcd")
    cursor.seek(100)
    assert cursor.is_exhausted()
    assert cursor.remaining() == 0
    with pytest.raises(ValueError):
        cursor.seek(-1)


def test_length_ignores_start_position(tmp_path: Path) -> None:
    path = tmp_path / "blob.bin"
    path.write_bytes(b"0123456789")
    with open(path, "rb") as stream:
        stream.seek(3)
        cursor = BinaryCursor(stream)
        assert cursor.position() == 3
        assert cursor.length() == 10
        assert cursor.remaining() == 7
