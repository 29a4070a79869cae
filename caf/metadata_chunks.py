"""Parsers for the CAF chunks that carry tag metadata.

Each parser starts with the cursor at the first byte of the chunk body and
returns a fresh ``{key: value}`` dict.  The sized parsers always leave the
cursor exactly on the chunk boundary.
"""

from __future__ import annotations

import base64
import logging
from typing import Dict

from .cursor import BinaryCursor, ShortReadError
from .midi_events import MidiDecodeError, decode_midi
from .midi_metadata import MIDI_DATA_BASE64_KEY, derive_midi_metadata

logger = logging.getLogger(__name__)

# Identifies the proprietary key/value blob inside a 'uuid' chunk.
USER_DEFINED_UUID = bytes.fromhex("29819273B5BF4AEFB78D62D1EF90BB2C")


def _read_string_pairs(
    cursor: BinaryCursor,
    info: Dict[str, str],
    num_entries: int,
    end: int | None = None,
) -> None:
    """Read up to ``num_entries`` key/value pairs into ``info``.

    Stops early once the cursor reaches ``end``.  A pair cut off by the end
    of the stream is dropped; the complete pairs before it are kept.
    """
    count = 0
    while count < num_entries and (end is None or cursor.position() < end):
        try:
            key = cursor.read_string()
            value = cursor.read_string()
        except ShortReadError as err:
            logger.warning(
                "string table truncated after %d of %d pairs: %s", count, num_entries, err
            )
            return
        info[key] = value
        count += 1


def parse_information_chunk(cursor: BinaryCursor) -> Dict[str, str]:
    """'info' chunk: u32 count, then ``count`` NUL-terminated key/value pairs."""

    info: Dict[str, str] = {}
    _read_string_pairs(cursor, info, cursor.read_u32_be())
    return info


def parse_user_defined_chunk(cursor: BinaryCursor, size: int) -> Dict[str, str]:
    """'uuid' chunk: 16-byte identifier, then the same layout as 'info'.

    Pairs are only read while the cursor is still inside the chunk, so an
    inflated entry count cannot run into the next chunk.  A chunk with a
    foreign identifier contributes nothing.
    """
    info: Dict[str, str] = {}
    start = cursor.position()
    end = start + size

    try:
        uuid = cursor.read_bytes(16)
        if uuid != USER_DEFINED_UUID:
            logger.debug("skipping uuid chunk %s at 0x%X", uuid.hex(), start)
            return info

        _read_string_pairs(cursor, info, cursor.read_u32_be(), end)
    finally:
        cursor.seek(end)
    return info


def parse_midi_chunk(cursor: BinaryCursor, size: int) -> Dict[str, str]:
    """'midi' chunk: a complete Standard MIDI File.

    The raw bytes are only kept (base64) when they decode, since undecodable
    data is of no use for re-synthesis.
    """
    metadata: Dict[str, str] = {}
    start = cursor.position()

    try:
        midi_block = cursor.read_bytes(size)
        try:
            events = decode_midi(midi_block)
        except MidiDecodeError as err:
            logger.warning("ignoring undecodable midi chunk at 0x%X: %s", start, err)
            return metadata

        metadata[MIDI_DATA_BASE64_KEY] = base64.b64encode(midi_block).decode("ascii")
        metadata.update(derive_midi_metadata(events))
    finally:
        cursor.seek(start + size)
    return metadata
