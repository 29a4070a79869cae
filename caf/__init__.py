"""Read tag metadata (tempo, key, time signature, free-text tags) from CAF files."""

from .chunks import (  # noqa: F401
    CAF_EXTENSIONS,
    FILE_TYPE,
    UNKNOWN_SIZE,
    AudioDescription,
    ChunkHeader,
    ChunkKind,
    FileHeader,
)
from .container import (  # noqa: F401
    CafMetadata,
    inspect_file,
    read_file_metadata,
    read_metadata,
)
from .cursor import BinaryCursor, ShortReadError  # noqa: F401
from .metadata_chunks import (  # noqa: F401
    USER_DEFINED_UUID,
    parse_information_chunk,
    parse_midi_chunk,
    parse_user_defined_chunk,
)
from .midi_events import (  # noqa: F401
    KeySignature,
    MidiDecodeError,
    MidiEvent,
    OtherMessage,
    Tempo,
    TimeSignature,
    decode_midi,
)
from .midi_metadata import (  # noqa: F401
    KEY_SIGNATURE_KEY,
    KEY_SIGNATURE_SEQUENCE_KEY,
    MIDI_DATA_BASE64_KEY,
    TEMPO_KEY,
    TEMPO_SEQUENCE_KEY,
    TIME_SIGNATURE_KEY,
    TIME_SIGNATURE_SEQUENCE_KEY,
    derive_midi_metadata,
    key_signature_name,
)
