"""
Duel Turns - The scripted three-turn game.

1. Draw a card.
2. Draw a card, then play a static ability that replaces draws with
   discards.
3. Draw (which now discards) and gain 5 life.

Each turn returns the messages of what happened. The game can be run one
turn at a time or all at once; with a recorded effect tree the turns
already played are replayed instead of re-run.
"""

from __future__ import annotations
from typing import Callable

from ...engine_core import Interpreter
from .effects import draw_card, draw_cards, gain_life, replace_draw_with_discard
from .state import Game

Turn = Callable[[Interpreter[Game]], list[str]]


def turn_one(interpreter: Interpreter[Game]) -> list[str]:
    result = interpreter.apply(draw_card)
    return [result.value if result.success else result.error]


def turn_two(interpreter: Interpreter[Game]) -> list[str]:
    messages = _draw(interpreter, 1)
    interpreter.apply(replace_draw_with_discard)
    messages.append("Played a draw replacement")
    return messages


def turn_three(interpreter: Interpreter[Game]) -> list[str]:
    messages = _draw(interpreter, 1)
    messages.append(interpreter.apply(gain_life(5)))
    return messages


def _draw(interpreter: Interpreter[Game], count: int) -> list[str]:
    result = interpreter.apply(draw_cards(count))
    if not result.success:
        return [result.error]
    return list(result.value)


def standard_turns() -> list[Turn]:
    return [turn_one, turn_two, turn_three]


def whole_game(interpreter: Interpreter[Game]) -> list[list[str]]:
    """Play every standard turn, each as its own top-level call."""
    return [interpreter.apply(turn) for turn in standard_turns()]
