"""Decode an embedded Standard MIDI File into time-ordered meta events.

All tracks are merged onto one absolute-tick timeline.  Events at the same
tick keep their track order, so the first tempo in track 0 wins over a
tempo at the same tick in track 1.

Key signatures (meta type 0x59) are decoded from their raw bytes rather
than through mido's key names, which only cover -7..7 sharps/flats with a
0/1 mode byte.  Files in the wild carry other values and should still
yield their tempo and time-signature data.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import List, Union

import mido
from mido.midifiles.meta import KeySignatureError, MetaSpec, add_meta_spec

KEY_SIGNATURE_META_TYPE = 0x59

# Malformed meta payloads (e.g. a 1-byte tempo) surface from mido's spec
# decoders as IndexError.
_DECODE_ERRORS = (OSError, EOFError, ValueError, IndexError, KeySignatureError)


class MetaSpec_raw_key_signature(MetaSpec):
    """Key signature as stored: signed sharps/flats byte and mode byte."""

    type_byte = KEY_SIGNATURE_META_TYPE
    attributes = ["sharps_or_flats", "mode"]
    defaults = [0, 0]

    def decode(self, message, data):
        if len(data) < 2:
            raise ValueError(f"key signature needs 2 data bytes, got {len(data)}")
        sharps_or_flats = data[0]
        message.sharps_or_flats = sharps_or_flats - 0x100 if sharps_or_flats > 0x7F else sharps_or_flats
        message.mode = data[1]

    def encode(self, message):
        return [message.sharps_or_flats & 0xFF, message.mode & 0xFF]

    def check(self, name, value):
        low = -0x80 if name == "sharps_or_flats" else 0
        if not isinstance(value, int) or not low <= value <= low + 0xFF:
            raise ValueError(f"{name} out of range: {value!r}")


# Only replaces the decoder for type byte 0x59; MetaMessage("key_signature",
# key=...) still builds and encodes through mido's own spec.
add_meta_spec(MetaSpec_raw_key_signature)


class MidiDecodeError(ValueError):
    """The MIDI block could not be read as a Standard MIDI File."""


@dataclass(frozen=True)
class Tempo:
    seconds_per_quarter_note: float


@dataclass(frozen=True)
class TimeSignature:
    numerator: int
    denominator: int


@dataclass(frozen=True)
class KeySignature:
    sharps_or_flats: int  # signed; -7..7 in well-formed files
    is_major: bool


@dataclass(frozen=True)
class OtherMessage:
    type: str


MidiMessage = Union[Tempo, TimeSignature, KeySignature, OtherMessage]


@dataclass(frozen=True)
class MidiEvent:
    time: int  # absolute ticks
    message: MidiMessage


def convert_message(msg: mido.Message | mido.MetaMessage) -> MidiMessage:
    if msg.type == "set_tempo":
        return Tempo(seconds_per_quarter_note=msg.tempo / 1_000_000.0)
    if msg.type == "time_signature":
        return TimeSignature(numerator=msg.numerator, denominator=msg.denominator)
    if msg.type == "raw_key_signature":
        return KeySignature(sharps_or_flats=msg.sharps_or_flats, is_major=msg.mode == 0)
    return OtherMessage(type=msg.type)


def events_from_midi_file(midi_file: mido.MidiFile) -> List[MidiEvent]:
    timed: List[tuple[int, int, int, MidiMessage]] = []
    for track_index, track in enumerate(midi_file.tracks):
        tick = 0
        for order, msg in enumerate(track):
            tick += msg.time
            timed.append((tick, track_index, order, convert_message(msg)))
    timed.sort(key=lambda item: item[:3])
    return [MidiEvent(time=tick, message=message) for tick, _, _, message in timed]


def decode_midi(data: bytes) -> List[MidiEvent]:
    """Parse raw Standard MIDI File bytes into a merged event list.

    Raises
    ------
    MidiDecodeError
        If ``data`` is not a readable MIDI file.
    """
    try:
        midi_file = mido.MidiFile(file=io.BytesIO(data))
    except _DECODE_ERRORS as err:
        raise MidiDecodeError(f"invalid MIDI data: {err}") from err
    return events_from_midi_file(midi_file)
