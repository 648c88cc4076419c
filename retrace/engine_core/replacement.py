"""
Replacement Effects - Registered alternatives that substitute for an effect.

The registry lives in the shared state: a mapping from an event key
("DRAW") to a list of tagged entries, in registration order. Each entry
names a replacement type and carries its fields:

    {"DRAW": [{"RandomDiscardReplacement": null}]}

When an effect is about to perform its default behavior it calls
handle_replacement() with its event key:
- no applicable replacement: the default behavior proceeds
- exactly one: its outcome is returned instead (full substitution)
- several: the interpreter's choice resolver picks one; without a
  resolver this is an UnresolvedChoiceError
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

from pydantic import BaseModel, ConfigDict, JsonValue, ValidationError

from .choice import PendingChoice
from .errors import InvalidChoiceError, UnknownReplacementError, UnresolvedChoiceError

if TYPE_CHECKING:
    from .interpreter import Interpreter

logger = logging.getLogger(__name__)

R = TypeVar("R", bound="type[ReplacementEffect]")

# tag -> replacement type, and back
REPLACEMENT_TYPES: dict[str, type[ReplacementEffect]] = {}
_TAGS: dict[type, str] = {}


class SupportsReplacements(Protocol):
    """Shared state that carries a replacement registry."""
    replacement_effects: dict[str, list[JsonValue]]


class ReplacementEffect(BaseModel, ABC):
    """
    A registered alternative to an effect's default behavior.

    Concrete replacements are pydantic models (their fields are what gets
    stored in the registry) decorated with @replacement_type.
    """
    model_config = ConfigDict(frozen=True)

    @property
    def tag(self) -> str:
        return _TAGS.get(type(self), type(self).__name__)

    @abstractmethod
    def check(self, state: Any) -> bool:
        """Whether this replacement applies given the current state."""

    @abstractmethod
    def apply(self, interpreter: Interpreter) -> Any:
        """Perform the replacement; the returned value stands in for the effect's."""

    def to_entry(self) -> dict[str, JsonValue]:
        """Tagged registry entry: {tag: fields}, or {tag: None} without fields."""
        fields = self.model_dump(mode="json")
        return {self.tag: fields or None}


def replacement_type(cls: R | None = None, *, tag: str | None = None) -> Any:
    """
    Register a replacement type under a stable tag (default: class name).

        @replacement_type
        class SkipDraw(ReplacementEffect): ...

        @replacement_type(tag="discard-v2")
        class Discard(ReplacementEffect): ...
    """
    def register(klass: R) -> R:
        name = tag or klass.__name__
        existing = REPLACEMENT_TYPES.get(name)
        if existing is not None and existing is not klass:
            raise ValueError(f"Replacement tag {name!r} already registered by {existing.__name__}")
        REPLACEMENT_TYPES[name] = klass
        _TAGS[klass] = name
        return klass

    if cls is None:
        return register
    return register(cls)


def decode_replacement(entry: JsonValue) -> ReplacementEffect:
    """
    Decode one tagged registry entry.

    Raises UnknownReplacementError for malformed entries, unknown tags and
    fields that do not fit the registered type.
    """
    if not isinstance(entry, dict) or len(entry) != 1:
        raise UnknownReplacementError(f"Malformed replacement entry: {entry!r}")

    (name, fields), = entry.items()
    klass = REPLACEMENT_TYPES.get(name)
    if klass is None:
        raise UnknownReplacementError(f"Unknown replacement type: {name!r}")
    try:
        return klass.model_validate(fields or {})
    except ValidationError as exc:
        raise UnknownReplacementError(f"Invalid fields for {name!r}: {exc}") from exc


def register_replacement(
    state: SupportsReplacements,
    event_key: str,
    effect: ReplacementEffect,
):
    """Append a replacement to the registry for `event_key`."""
    state.replacement_effects.setdefault(event_key, []).append(effect.to_entry())
    logger.debug("Registered %s for %s", effect.tag, event_key)


def applicable_replacements(
    state: SupportsReplacements,
    event_key: str,
) -> list[ReplacementEffect]:
    """Decodable replacements for `event_key` whose check() passes, in order."""
    candidates = []
    for entry in state.replacement_effects.get(event_key, []):
        try:
            effect = decode_replacement(entry)
        except UnknownReplacementError as exc:
            logger.debug("Skipping replacement entry for %s: %s", event_key, exc)
            continue
        if effect.check(state):
            candidates.append(effect)
    return candidates


@dataclass(frozen=True)
class ReplacementOutcome:
    """The value a replacement produced in place of the default effect."""
    value: Any
    tag: str


def handle_replacement(
    interpreter: Interpreter,
    event_key: str,
    player_id: str | None = None,
) -> ReplacementOutcome | None:
    """
    Substitute an applicable replacement for the effect behind `event_key`.

    Returns None when no replacement applies and the default behavior
    should run.
    """
    candidates = applicable_replacements(interpreter.state, event_key)
    if not candidates:
        return None

    if len(candidates) == 1:
        chosen = candidates[0]
    else:
        chosen = candidates[_choose(interpreter, event_key, candidates, player_id)]

    logger.debug("Replacing %s with %s", event_key, chosen.tag)
    return ReplacementOutcome(value=chosen.apply(interpreter), tag=chosen.tag)


def _choose(
    interpreter: Interpreter,
    event_key: str,
    candidates: list[ReplacementEffect],
    player_id: str | None,
) -> int:
    resolver = interpreter.choice_resolver
    if resolver is None:
        raise UnresolvedChoiceError(
            event_key,
            [candidate.tag for candidate in candidates],
            position=interpreter.position,
        )

    choice = PendingChoice(
        event_key=event_key,
        options=candidates,
        player_id=player_id,
        prompt=f"Choose which replacement effect applies to {event_key}",
    )
    # Player input is not deterministic, so the answer is recorded
    def ask(child: Interpreter) -> int:
        return resolver(child, choice)

    index = interpreter.apply(ask, returns=int)

    if not 0 <= index < len(candidates):
        raise InvalidChoiceError(
            f"Choice for {event_key!r} picked option {index} of {len(candidates)}",
            position=interpreter.position - 1,
        )
    return index
