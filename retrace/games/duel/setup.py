"""
Duel Setup - Creates the initial game state.

The default library holds two cards, the last one on top:

    library = ["Mox Tombstone", "Mox Awesome"]   # draws Mox Awesome first
"""

from __future__ import annotations
import random

from .state import STARTING_LIFE, Game

DEFAULT_LIBRARY = ["Mox Tombstone", "Mox Awesome"]


def create_game(
    library: list[str] | None = None,
    life: int = STARTING_LIFE,
    random_seed: int | None = None,
) -> Game:
    """
    Set up a new duel.

    Args:
        library: Card names, last one on top (defaults to DEFAULT_LIBRARY)
        life: Starting life total
        random_seed: If given, shuffle the library with this seed

    Returns:
        Game with empty hand and graveyard and no replacement effects
    """
    if life < 0:
        raise ValueError("life must be >= 0")

    cards = list(DEFAULT_LIBRARY if library is None else library)
    if random_seed is not None:
        random.Random(random_seed).shuffle(cards)

    return Game(life=life, library=cards)
