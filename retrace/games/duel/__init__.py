"""
Duel - The example game.

One player, a life total, a library, a hand and a graveyard. Small enough
to show every interpreter feature:
- Nested draws (draw_cards -> draw_card)
- Domain failures as values (drawing from an empty library)
- Replacement effects (discard or mill instead of drawing)
- Call counting to prove replays do not re-run effects
"""

from .state import Game, STARTING_LIFE
from .setup import create_game, DEFAULT_LIBRARY
from .replacements import RandomDiscardReplacement, MillInsteadReplacement
from .effects import (
    CALL_COUNTS,
    DRAW_EVENT,
    reset_call_counts,
    draw_card,
    draw_cards,
    gain_life,
    replace_draw_with_discard,
)
from .turns import Turn, turn_one, turn_two, turn_three, standard_turns, whole_game

__all__ = [
    "Game",
    "STARTING_LIFE",
    "create_game",
    "DEFAULT_LIBRARY",
    "RandomDiscardReplacement",
    "MillInsteadReplacement",
    "CALL_COUNTS",
    "DRAW_EVENT",
    "reset_call_counts",
    "draw_card",
    "draw_cards",
    "gain_life",
    "replace_draw_with_discard",
    "Turn",
    "turn_one",
    "turn_two",
    "turn_three",
    "standard_turns",
    "whole_game",
]
