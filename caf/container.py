"""Walk the chunks of a CAF file and collect its tag metadata.

The walk is a non-destructive probe: the cursor is returned to where it
started whether or not the stream turned out to be a CAF file.  Malformed
chunk sizes end the walk early and whatever was collected up to that point
is returned.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Tuple

from .chunks import (
    AUDIO_DESCRIPTION_SIZE,
    AudioDescription,
    ChunkHeader,
    ChunkKind,
    FileHeader,
)
from .cursor import BinaryCursor, ShortReadError
from .metadata_chunks import (
    parse_information_chunk,
    parse_midi_chunk,
    parse_user_defined_chunk,
)

logger = logging.getLogger(__name__)


def _walk_chunks(cursor: BinaryCursor, metadata: Dict[str, str]) -> None:
    while not cursor.is_exhausted():
        header_pos = cursor.position()
        header = ChunkHeader.from_cursor(cursor)
        kind = header.kind
        size = header.chunk_size
        body_start = cursor.position()
        logger.debug("chunk %r at 0x%X, size %d", header.tag, header_pos, size)

        if kind is ChunkKind.AUDIO_DATA and header.has_unknown_size:
            # Audio runs to end of file, so there is nothing after it.
            break
        if size < 0:
            logger.warning(
                "chunk %r at 0x%X has invalid size %d; stopping", header.tag, header_pos, size
            )
            break

        if kind is ChunkKind.DESCRIPTION:
            if size >= AUDIO_DESCRIPTION_SIZE:
                description = AudioDescription.from_cursor(cursor)
                logger.debug(
                    "audio description: %s, %g Hz, %d channels",
                    description.format_tag,
                    description.sample_rate,
                    description.channels_per_frame,
                )
        elif kind is ChunkKind.USER_DEFINED:
            metadata.update(parse_user_defined_chunk(cursor, size))
        elif kind is ChunkKind.AUDIO_DATA:
            pass
        elif kind is ChunkKind.MIDI:
            metadata.update(parse_midi_chunk(cursor, size))
        elif kind is ChunkKind.INFORMATION:
            metadata.update(parse_information_chunk(cursor))
        else:  # ChunkKind.UNKNOWN
            logger.debug("skipping unknown chunk %r", header.tag)

        # Sizes are not checked against the stream length; a chunk that
        # claims to run past the end simply exhausts the cursor.
        cursor.seek(body_start + size)


def read_metadata(cursor: BinaryCursor) -> Tuple[bool, Dict[str, str]]:
    """Probe ``cursor`` for a CAF file and collect its tag metadata.

    Returns
    -------
    (bool, dict)
        Whether the stream starts with a CAF file header, and the tags found.
        The dict is always empty for unrecognised streams.
    """
    original_pos = cursor.position()
    metadata: Dict[str, str] = {}

    try:
        try:
            header = FileHeader.from_cursor(cursor)
        except ShortReadError:
            return False, {}
        if not header.is_caf:
            return False, {}

        try:
            _walk_chunks(cursor, metadata)
        except ShortReadError as err:
            logger.warning("truncated CAF chunk, keeping partial metadata: %s", err)
    finally:
        cursor.seek(original_pos)

    return True, metadata


@dataclass(frozen=True)
class CafMetadata:
    path: Path
    recognised: bool
    values: Dict[str, str] = field(default_factory=dict)


def read_file_metadata(path: str | Path) -> Tuple[bool, Dict[str, str]]:
    with open(path, "rb") as stream:
        return read_metadata(BinaryCursor(stream))


def inspect_file(path: str | Path) -> CafMetadata:
    recognised, values = read_file_metadata(path)
    return CafMetadata(path=Path(path), recognised=recognised, values=values)
