"""
Recording Codec - Effect trees and recordings as JSON documents.

An effect list is written as nested {"result": ..., "children": [...]}
objects in call order:

    [
      {"result": ["Drew Mox Awesome"], "children": [
        {"result": {"success": true, "value": "Drew Mox Awesome", "error": null},
         "children": []}
      ]}
    ]

A Recording wraps an effect list with what is needed to resume it: the
game it belongs to and the state at the time of the checkpoint. Replayed
calls are not re-run, so they cannot rebuild the state; the checkpointed
state already reflects them. The state the run started from is kept too,
for auditing. Recordings carry a format version; documents of another
version are rejected, not migrated.
"""

from __future__ import annotations
import time
from typing import Iterable

from pydantic import BaseModel, Field, JsonValue, TypeAdapter, ValidationError
from pydantic_core import from_json

from ..engine_core import EffectTree

FORMAT_VERSION = 1

_effects_adapter = TypeAdapter(list[EffectTree])


class RecordingFormatError(Exception):
    """A document is not a readable effect tree or recording."""


class Recording(BaseModel):
    """A persisted run: its effect tree and the state it left behind."""
    format_version: int = FORMAT_VERSION
    game: str
    initial_state: JsonValue = None
    state: JsonValue = None
    effects: list[EffectTree] = Field(default_factory=list)
    created_at: float = Field(default_factory=time.time)

    @property
    def call_count(self) -> int:
        """Total number of recorded calls, nested ones included."""
        return sum(node.size() for node in self.effects)


def dump_effects(effects: Iterable[EffectTree], indent: int | None = None) -> str:
    return _effects_adapter.dump_json(list(effects), indent=indent).decode("utf-8")


def load_effects(text: str | bytes) -> list[EffectTree]:
    try:
        return _effects_adapter.validate_json(text)
    except ValidationError as exc:
        raise RecordingFormatError(f"Not an effect tree document: {exc}") from exc


def dump_recording(recording: Recording, indent: int | None = 2) -> str:
    return recording.model_dump_json(indent=indent)


def load_recording(text: str | bytes) -> Recording:
    """
    Parse a recording document.

    Raises RecordingFormatError for invalid JSON, an unsupported
    format_version, or a document that is not a recording.
    """
    try:
        payload = from_json(text)
    except ValueError as exc:
        raise RecordingFormatError(f"Recording is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise RecordingFormatError("Recording must be a JSON object")
    version = payload.get("format_version")
    if version != FORMAT_VERSION:
        raise RecordingFormatError(
            f"Unsupported recording format_version {version!r} (expected {FORMAT_VERSION})"
        )

    try:
        return Recording.model_validate(payload)
    except ValidationError as exc:
        raise RecordingFormatError(f"Invalid recording: {exc}") from exc
