"""
Duel State - A single player's life total and card zones.

Zones are lists of card names; the top of a zone is its last element.
The replacement registry is part of the state so that it is mutated,
recorded and replayed together with everything else.
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import asdict, dataclass, field
from typing import Any

STARTING_LIFE = 20


@dataclass
class Game:
    """
    Complete duel state at a point in time.

    Mutated in place by effects through Interpreter.state_mut().
    """
    life: int = STARTING_LIFE
    library: list[str] = field(default_factory=list)
    hand: list[str] = field(default_factory=list)
    graveyard: list[str] = field(default_factory=list)

    # event key -> tagged replacement entries, in registration order
    replacement_effects: dict[str, list[Any]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> Game:
        if not isinstance(payload, dict):
            raise ValueError("game state must be an object")
        life = payload.get("life", STARTING_LIFE)
        if not isinstance(life, int):
            raise ValueError("life must be an integer")
        zones = {}
        for name in ("library", "hand", "graveyard"):
            cards = payload.get(name, [])
            if not isinstance(cards, list) or not all(isinstance(c, str) for c in cards):
                raise ValueError(f"{name} must be a list of card names")
            zones[name] = list(cards)
        replacements = payload.get("replacement_effects", {})
        if not isinstance(replacements, dict):
            raise ValueError("replacement_effects must be an object")
        return cls(
            life=life,
            replacement_effects=deepcopy(replacements),
            **zones,
        )

    def clone(self) -> Game:
        """Deep copy the state."""
        return deepcopy(self)
