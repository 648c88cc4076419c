"""
Effect Result - Success/failure outcome of a domain effect.

Domain failures are not interpreter errors. An effect that cannot do its
job (drawing from an empty library) returns a failure result, which is
recorded and replayed like any other value.

The value type is a parameter. Annotate an effect with the parametrized
type so a replay decodes the value as that type too:

    def pick(interpreter) -> EffectResult[tuple[int, int]]: ...

A bare EffectResult replays its value as plain JSON data.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar

V = TypeVar("V")


@dataclass(frozen=True)
class EffectResult(Generic[V]):
    """
    Result of a domain effect.

    Contains:
    - Whether the effect succeeded
    - Its value (if succeeded)
    - Error message (if failed)
    """
    success: bool
    value: V | None = None
    error: str | None = None

    @classmethod
    def ok(cls, value: V | None = None) -> EffectResult[V]:
        """Create a success result."""
        return cls(success=True, value=value)

    @classmethod
    def failure(cls, error: str) -> EffectResult[V]:
        """Create a failure result."""
        return cls(success=False, error=error)

    def unwrap(self) -> V:
        """The value of a success; raises ValueError for a failure."""
        if not self.success:
            raise ValueError(self.error or "effect failed")
        return self.value
