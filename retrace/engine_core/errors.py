"""
Interpreter Errors - Fatal conditions raised by the effect interpreter.

The interpreter never recovers from these. Domain failures (drawing from
an empty library, an invalid target) are ordinary result values that flow
through apply() like any other outcome; only conditions that make the
recorded effect tree untrustworthy are raised here.
"""

from __future__ import annotations


class InterpreterError(Exception):
    """Base class for all interpreter-level failures."""

    def __init__(self, message: str, position: int | None = None):
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)


class EncodeError(InterpreterError):
    """A call produced a value that cannot be serialized."""


class DecodeError(InterpreterError):
    """
    A recorded result could not be decoded as the requested type.

    During replay this means the call tree no longer lines up with the
    code driving it.
    """


class UnresolvedChoiceError(InterpreterError):
    """More than one replacement applies and no choice resolver was supplied."""

    def __init__(self, event_key: str, candidates: list[str], position: int | None = None):
        self.event_key = event_key
        self.candidates = candidates
        super().__init__(
            f"{len(candidates)} replacement effects apply to {event_key!r} "
            f"({', '.join(candidates)}) and no choice resolver is configured",
            position=position,
        )


class InvalidChoiceError(InterpreterError):
    """A choice resolver returned an index outside the offered options."""


class ReentrantApplyError(InterpreterError):
    """An interpreter was used while one of its nested calls was still running."""


class UnknownReplacementError(Exception):
    """A replacement registry entry names no registered replacement type."""


class AbortedRunError(InterpreterError):
    """An interpreter was used after one of its calls failed."""
