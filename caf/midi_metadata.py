"""Derive tempo, time-signature and key-signature tags from MIDI events.

Each reducer stores the first matching event under a singular key.  When
more than one event matches it also writes a sequence key listing every
event as ``"<value>,<tick>;"`` in timeline order.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional, Type

from .midi_events import (
    KeySignature,
    MidiEvent,
    MidiMessage,
    Tempo,
    TimeSignature,
)

MIDI_DATA_BASE64_KEY = "midiDataBase64"
TEMPO_KEY = "tempo"
TEMPO_SEQUENCE_KEY = "tempo sequence"
TIME_SIGNATURE_KEY = "time signature"
TIME_SIGNATURE_SEQUENCE_KEY = "time signature sequence"
KEY_SIGNATURE_KEY = "key signature"
KEY_SIGNATURE_SEQUENCE_KEY = "key signature sequence"

# Index i corresponds to (i - 7) sharps (negative = flats).
MAJOR_KEYS = ("Cb", "Gb", "Db", "Ab", "Eb", "Bb", "F", "C", "G", "D", "A", "E", "B", "F#", "C#")
MINOR_KEYS = ("Ab", "Eb", "Bb", "F", "C", "G", "D", "A", "E", "B", "F#", "C#", "G#", "D#", "A#")

# Returns None for events that should not be reported.
Formatter = Callable[[MidiMessage], Optional[str]]


def format_number(value: float) -> str:
    """Render 120.0 as "120" and 128.5714285 as "128.571429"."""

    if float(value).is_integer():
        return str(int(value))
    return f"{value:.6f}".rstrip("0").rstrip(".")


def summarise_events(
    events: Iterable[MidiEvent],
    message_type: Type,
    key: str,
    sequence_key: str,
    formatter: Formatter,
) -> Dict[str, str]:
    entries: List[tuple[str, int]] = []
    for event in events:
        if not isinstance(event.message, message_type):
            continue
        text = formatter(event.message)
        if text is not None:
            entries.append((text, event.time))

    metadata: Dict[str, str] = {}
    if not entries:
        return metadata
    metadata[key] = entries[0][0]
    if len(entries) > 1:
        metadata[sequence_key] = "".join(f"{text},{time};" for text, time in entries)
    return metadata


def tempo_bpm(message: Tempo) -> Optional[str]:
    if message.seconds_per_quarter_note > 0.0:
        return format_number(60.0 / message.seconds_per_quarter_note)
    return None


def time_signature_text(message: TimeSignature) -> str:
    return f"{message.numerator}/{message.denominator}"


def key_signature_name(sharps_or_flats: int, is_major: bool) -> str:
    index = min(max(sharps_or_flats + 7, 0), 14)
    if is_major:
        return MAJOR_KEYS[index]
    return MINOR_KEYS[index] + "m"


def key_signature_text(message: KeySignature) -> str:
    return key_signature_name(message.sharps_or_flats, message.is_major)


def find_tempo_metadata(events: Iterable[MidiEvent]) -> Dict[str, str]:
    return summarise_events(events, Tempo, TEMPO_KEY, TEMPO_SEQUENCE_KEY, tempo_bpm)


def find_time_signature_metadata(events: Iterable[MidiEvent]) -> Dict[str, str]:
    return summarise_events(
        events, TimeSignature, TIME_SIGNATURE_KEY, TIME_SIGNATURE_SEQUENCE_KEY, time_signature_text
    )


def find_key_signature_metadata(events: Iterable[MidiEvent]) -> Dict[str, str]:
    return summarise_events(
        events, KeySignature, KEY_SIGNATURE_KEY, KEY_SIGNATURE_SEQUENCE_KEY, key_signature_text
    )


def derive_midi_metadata(events: List[MidiEvent]) -> Dict[str, str]:
    metadata: Dict[str, str] = {}
    metadata.update(find_tempo_metadata(events))
    metadata.update(find_time_signature_metadata(events))
    metadata.update(find_key_signature_metadata(events))
    return metadata
