"""
Recording Module - Persisting effect trees.

The effect list of a top-level interpreter is the durable record of a
run. It is written out as a JSON document and read back to seed the next
run's interpreter.
"""

from .codec import (
    FORMAT_VERSION,
    Recording,
    RecordingFormatError,
    dump_effects,
    load_effects,
    dump_recording,
    load_recording,
)
from .store import RecordingStore

__all__ = [
    "FORMAT_VERSION",
    "Recording",
    "RecordingFormatError",
    "dump_effects",
    "load_effects",
    "dump_recording",
    "load_recording",
    "RecordingStore",
]
