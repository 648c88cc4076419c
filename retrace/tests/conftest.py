"""
Pytest fixtures for Retrace tests.
"""

import pytest

from ..engine_core import Interpreter
from ..games.duel import Game, create_game, reset_call_counts
from ..recording import RecordingStore


@pytest.fixture(autouse=True)
def clean_call_counts():
    """Every test starts with zeroed effect call counts."""
    reset_call_counts()
    yield
    reset_call_counts()


@pytest.fixture
def game() -> Game:
    """Two cards in the library (Mox Awesome on top), nothing else."""
    return create_game()


@pytest.fixture
def interpreter(game: Game) -> Interpreter[Game]:
    """Fresh top-level interpreter over the default game."""
    return Interpreter(game)


@pytest.fixture
def game_with_hand() -> Game:
    """Library of two cards and one card already in hand."""
    return Game(library=["Island", "Forest"], hand=["Mountain"])


@pytest.fixture
def store(tmp_path) -> RecordingStore:
    """Recording store in a temporary directory."""
    return RecordingStore(recording_dir=tmp_path / "recordings")
