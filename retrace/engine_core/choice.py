"""
Choice Resolution - Hook for decisions the engine cannot make itself.

When more than one replacement effect applies to the same event, a player
has to pick one. The engine does not know how to ask; a ChoiceResolver is
injected into the top-level interpreter and consulted instead. The answer
is recorded like any other result, so replays never ask again.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Protocol

if TYPE_CHECKING:
    from .interpreter import Interpreter


@dataclass
class PendingChoice:
    """
    A choice that must be made by a player.

    Handed to the resolver; `options` are the applicable candidates in
    registration order and the resolver answers with an index into them.
    """
    event_key: str
    options: list[Any]
    player_id: str | None = None
    prompt: str = ""

    @property
    def option_count(self) -> int:
        return len(self.options)


class ChoiceResolver(Protocol):
    """Picks one of several options. Returns the index of the chosen one."""

    def __call__(self, interpreter: Interpreter, choice: PendingChoice) -> int: ...


@dataclass
class ScriptedChoiceResolver:
    """
    Resolver that answers from a fixed script of indices.

    Useful for automation and tests. Every consulted choice is kept in
    `asked` for inspection.
    """
    script: deque[int] = field(default_factory=deque)
    asked: list[PendingChoice] = field(default_factory=list)

    @classmethod
    def of(cls, indices: Iterable[int]) -> ScriptedChoiceResolver:
        return cls(script=deque(indices))

    def __call__(self, interpreter: Interpreter, choice: PendingChoice) -> int:
        self.asked.append(choice)
        if not self.script:
            raise LookupError(
                f"No scripted answer left for choice on {choice.event_key!r}"
            )
        return self.script.popleft()
