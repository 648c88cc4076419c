"""
Duel Replacement Effects - Alternatives to drawing a card.

Both honor the draw interface: they return an EffectResult for exactly
one draw, so "draw 2" with a replacement active is two replacements.
"""

from __future__ import annotations

from pydantic import Field

from ...engine_core import EffectResult, Interpreter, ReplacementEffect, replacement_type
from .state import Game


@replacement_type
class RandomDiscardReplacement(ReplacementEffect):
    """
    Instead of drawing, discard a card from hand.

    There is no seeded RNG in the interpreter yet, so the "random" card is
    the top (last) card of the hand.
    """

    def check(self, state: Game) -> bool:
        return bool(state.hand)

    def apply(self, interpreter: Interpreter[Game]) -> EffectResult[str]:
        game = interpreter.state_mut()
        card = game.hand.pop()
        game.graveyard.append(card)
        return EffectResult.ok(f"Discarded {card}")


@replacement_type
class MillInsteadReplacement(ReplacementEffect):
    """Instead of drawing, put the top `count` library cards into the graveyard."""
    count: int = Field(default=1, ge=1)

    def check(self, state: Game) -> bool:
        return len(state.library) >= self.count

    def apply(self, interpreter: Interpreter[Game]) -> EffectResult[str]:
        game = interpreter.state_mut()
        milled = [game.library.pop() for _ in range(self.count)]
        game.graveyard.extend(milled)
        return EffectResult.ok(f"Milled {', '.join(milled)}")
