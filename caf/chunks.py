"""Fixed header structures of a Core Audio Format (CAF) file.

Layout (all fields big-endian):

  File header   : 'caff' u32 tag, u16 version, u16 flags      (8 bytes)
  Chunk header  : u32 type tag, i64 size                      (12 bytes)
  'desc' body   : f64 sample rate, then six u32 words         (32 bytes)

A chunk size of -1 is only legal on the 'data' chunk and means the audio
payload runs to the end of the file.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .cursor import BinaryCursor

FILE_TYPE = b"caff"
FILE_HEADER_SIZE = 8
CHUNK_HEADER_SIZE = 12
AUDIO_DESCRIPTION_SIZE = 32
UNKNOWN_SIZE = -1

CAF_EXTENSIONS = (".caf",)


def chunk_name(tag: bytes) -> int:
    """Return the big-endian integer code of a 4-character tag."""

    if len(tag) != 4:
        raise ValueError(f"chunk tags are 4 bytes, got {tag!r}")
    return int.from_bytes(tag, "big")


class ChunkKind(Enum):
    """Chunk types the metadata reader dispatches on."""
    DESCRIPTION = b"desc"
    USER_DEFINED = b"uuid"
    AUDIO_DATA = b"data"
    MIDI = b"midi"
    INFORMATION = b"info"
    # Everything else is skipped by size.
    UNKNOWN = None

    @classmethod
    def from_tag(cls, tag: bytes) -> "ChunkKind":
        return _KIND_BY_TAG.get(bytes(tag), cls.UNKNOWN)


_KIND_BY_TAG: dict[bytes, ChunkKind] = {
    kind.value: kind for kind in ChunkKind if kind.value is not None
}


@dataclass(frozen=True)
class FileHeader:
    file_type: int
    file_version: int
    file_flags: int

    @classmethod
    def from_cursor(cls, cursor: BinaryCursor) -> "FileHeader":
        return cls(
            file_type=cursor.read_u32_be(),
            file_version=cursor.read_u16_be(),
            file_flags=cursor.read_u16_be(),
        )

    @property
    def is_caf(self) -> bool:
        return self.file_type == chunk_name(FILE_TYPE)


@dataclass(frozen=True)
class ChunkHeader:
    chunk_type: int
    chunk_size: int

    @classmethod
    def from_cursor(cls, cursor: BinaryCursor) -> "ChunkHeader":
        return cls(chunk_type=cursor.read_u32_be(), chunk_size=cursor.read_i64_be())

    @property
    def raw_tag(self) -> bytes:
        return self.chunk_type.to_bytes(4, "big")

    @property
    def kind(self) -> ChunkKind:
        return ChunkKind.from_tag(self.raw_tag)

    @property
    def tag(self) -> str:
        return self.raw_tag.decode("latin-1")

    @property
    def has_unknown_size(self) -> bool:
        return self.chunk_size == UNKNOWN_SIZE


@dataclass(frozen=True)
class AudioDescription:
    """Stream format from the 'desc' chunk.  Not part of the tag metadata."""

    sample_rate: float
    format_id: int
    format_flags: int
    bytes_per_packet: int
    frames_per_packet: int
    channels_per_frame: int
    bits_per_channel: int

    @classmethod
    def from_cursor(cls, cursor: BinaryCursor) -> "AudioDescription":
        return cls(
            sample_rate=cursor.read_f64_be(),
            format_id=cursor.read_u32_be(),
            format_flags=cursor.read_u32_be(),
            bytes_per_packet=cursor.read_u32_be(),
            frames_per_packet=cursor.read_u32_be(),
            channels_per_frame=cursor.read_u32_be(),
            bits_per_channel=cursor.read_u32_be(),
        )

    @property
    def format_tag(self) -> str:
        return self.format_id.to_bytes(4, "big").decode("latin-1")
