"""
Duel Effects - Draw, gain life, and playing a replacement effect.

Effects are regular looking functions that take an interpreter. Anything
they want memoized (a nested draw, a life gain) goes through
interpreter.apply(); inline logic is simply re-run.

CALL_COUNTS counts fresh executions of each effect. A replay satisfied
from the record never increments it.
"""

from __future__ import annotations
from collections import Counter
from typing import Callable

from ...engine_core import EffectResult, Interpreter, handle_replacement, register_replacement
from .replacements import RandomDiscardReplacement
from .state import Game

DRAW_EVENT = "DRAW"

CALL_COUNTS: Counter[str] = Counter()


def reset_call_counts():
    CALL_COUNTS.clear()


def draw_card(interpreter: Interpreter[Game]) -> EffectResult[str]:
    """Draw a single card, unless a replacement effect applies."""
    CALL_COUNTS["draw_card"] += 1

    replaced = handle_replacement(interpreter, DRAW_EVENT)
    if replaced is not None:
        return replaced.value

    game = interpreter.state_mut()
    if not game.library:
        return EffectResult.failure("Drew from empty library!")

    card = game.library.pop()
    game.hand.append(card)
    return EffectResult.ok(f"Drew {card}")


def draw_cards(count: int) -> Callable[[Interpreter[Game]], EffectResult[list[str]]]:
    """
    Draw multiple cards. Each one is its own draw_card call, so each
    gets replacement effects applied and is memoized on its own.

    Stops at the first failed draw and returns that failure.
    """
    def draw(interpreter: Interpreter[Game]) -> EffectResult[list[str]]:
        drawn = []
        for _ in range(count):
            result = interpreter.apply(draw_card)
            if not result.success:
                return result
            drawn.append(result.value)
        return EffectResult.ok(drawn)

    return draw


def gain_life(amount: int) -> Callable[[Interpreter[Game]], str]:
    """Gain life. It does what it says on the tin."""
    def gain(interpreter: Interpreter[Game]) -> str:
        CALL_COUNTS["gain_life"] += 1
        game = interpreter.state_mut()
        game.life += amount
        return f"Added {amount} life"

    return gain


def replace_draw_with_discard(interpreter: Interpreter[Game]) -> None:
    """Play a static ability: draws become discards while the hand has cards."""
    CALL_COUNTS["replace_draw_with_discard"] += 1
    register_replacement(interpreter.state_mut(), DRAW_EVENT, RandomDiscardReplacement())
