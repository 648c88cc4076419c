"""
Tests for the example duel.

Tests:
- The scripted three turns and the state they leave behind
- Replaying a recorded game without re-running any effect
- Extending a partial recording one turn at a time
- Domain failures as values
"""

import pytest

from ..engine_core import DecodeError, EffectResult, Interpreter
from ..games.duel import (
    CALL_COUNTS,
    Game,
    create_game,
    draw_card,
    draw_cards,
    gain_life,
    standard_turns,
    turn_one,
    turn_three,
    turn_two,
    whole_game,
)


EXPECTED_EFFECTS = [
    {
        "result": ["Drew Mox Awesome"],
        "children": [
            {
                "result": {"success": True, "value": "Drew Mox Awesome", "error": None},
                "children": [],
            },
        ],
    },
    {
        "result": ["Drew Mox Tombstone", "Played a draw replacement"],
        "children": [
            {
                "result": {"success": True, "value": ["Drew Mox Tombstone"], "error": None},
                "children": [
                    {
                        "result": {"success": True, "value": "Drew Mox Tombstone", "error": None},
                        "children": [],
                    },
                ],
            },
            {"result": None, "children": []},
        ],
    },
    {
        "result": ["Discarded Mox Tombstone", "Added 5 life"],
        "children": [
            {
                "result": {"success": True, "value": ["Discarded Mox Tombstone"], "error": None},
                "children": [
                    {
                        "result": {"success": True, "value": "Discarded Mox Tombstone", "error": None},
                        "children": [],
                    },
                ],
            },
            {"result": "Added 5 life", "children": []},
        ],
    },
]


def play(interpreter, turns):
    return [interpreter.apply(turn) for turn in turns]


class TestScriptedGame:
    """Tests for the three turns played fresh."""

    def test_turn_messages(self, interpreter):
        assert interpreter.apply(turn_one) == ["Drew Mox Awesome"]
        assert interpreter.apply(turn_two) == ["Drew Mox Tombstone", "Played a draw replacement"]
        assert interpreter.apply(turn_three) == ["Discarded Mox Tombstone", "Added 5 life"]

    def test_final_state(self, game, interpreter):
        whole_game(interpreter)
        assert game.to_dict() == {
            "life": 25,
            "library": [],
            "hand": ["Mox Awesome"],
            "graveyard": ["Mox Tombstone"],
            "replacement_effects": {"DRAW": [{"RandomDiscardReplacement": None}]},
        }

    def test_effect_tree(self, interpreter):
        play(interpreter, standard_turns())
        assert [node.model_dump(mode="json") for node in interpreter.effects] == EXPECTED_EFFECTS

    def test_every_effect_runs_once(self, interpreter):
        play(interpreter, standard_turns())
        assert CALL_COUNTS == {"draw_card": 3, "gain_life": 1, "replace_draw_with_discard": 1}

    def test_whole_game_as_one_call(self, game):
        """whole_game nests the turns one level deeper."""
        interpreter = Interpreter(game)
        messages = interpreter.apply(whole_game)

        assert messages[2] == ["Discarded Mox Tombstone", "Added 5 life"]
        (node,) = interpreter.effects
        assert [child.model_dump(mode="json") for child in node.children] == EXPECTED_EFFECTS


class TestReplay:
    """Tests for replaying a recorded game."""

    def test_full_replay_runs_nothing(self, game, interpreter):
        """Feeding the record back yields the same results and tree."""
        originals = play(interpreter, standard_turns())
        final = game.to_dict()
        CALL_COUNTS.clear()

        replay = Interpreter(game, effects=interpreter.effects)
        assert play(replay, standard_turns()) == originals
        assert replay.effects == interpreter.effects
        assert replay.executed == 0
        assert replay.replayed == 3
        assert sum(CALL_COUNTS.values()) == 0
        assert game.to_dict() == final

    def test_replay_against_rebuilt_state(self, interpreter, game):
        """A checkpointed state plus the record is enough to replay."""
        play(interpreter, standard_turns())
        rebuilt = Game.from_dict(game.to_dict())

        replay = Interpreter(rebuilt, effects=interpreter.effects)
        play(replay, standard_turns())

        assert rebuilt == game

    def test_whole_game_replays_as_one_node(self, game):
        interpreter = Interpreter(game)
        interpreter.apply(whole_game)
        CALL_COUNTS.clear()

        replay = Interpreter(game, effects=interpreter.effects)
        assert replay.apply(whole_game)[0] == ["Drew Mox Awesome"]
        assert sum(CALL_COUNTS.values()) == 0

    def test_reordered_turns_diverge(self, interpreter, game):
        """Replaying a turn whose result has another shape is caught."""
        interpreter.apply(turn_one)

        replay = Interpreter(game, effects=interpreter.effects)
        with pytest.raises(DecodeError):
            replay.apply(draw_card)


class TestIncrementalExtension:
    """Tests for extending a recording one turn at a time."""

    def test_each_turn_extends_the_record(self, game):
        """Every resume replays what exists and executes exactly one new turn."""
        turns = standard_turns()
        effects = []
        results = []

        for played in range(1, len(turns) + 1):
            CALL_COUNTS.clear()
            interpreter = Interpreter(game, effects=effects)
            results = play(interpreter, turns[:played])

            assert interpreter.replayed == played - 1
            assert interpreter.executed == 1
            assert interpreter.effects[:played - 1] == effects
            effects = interpreter.effects

        assert results[-1] == ["Discarded Mox Tombstone", "Added 5 life"]
        assert [node.model_dump(mode="json") for node in effects] == EXPECTED_EFFECTS
        assert CALL_COUNTS == {"draw_card": 1, "gain_life": 1}

    def test_extension_matches_single_run(self):
        """Two sessions of play produce the tree one uninterrupted run does."""
        single = Interpreter(create_game())
        play(single, standard_turns())

        game = create_game()
        first = Interpreter(game)
        play(first, standard_turns()[:2])
        second = Interpreter(game, effects=first.effects)
        play(second, standard_turns())

        assert second.effects == single.effects
        assert game == single.state


class TestDomainFailures:
    """Tests for failures that are ordinary results."""

    def test_draw_from_empty_library(self):
        interpreter = Interpreter(Game())
        assert interpreter.apply(draw_card) == EffectResult.failure("Drew from empty library!")

    def test_failure_is_recorded_and_replayed(self):
        interpreter = Interpreter(Game())
        interpreter.apply(turn_one)
        assert interpreter.effects[0].result.root == ["Drew from empty library!"]

        replay = Interpreter(Game(), effects=interpreter.effects)
        assert replay.apply(turn_one) == ["Drew from empty library!"]

    def test_draw_cards_stops_at_first_failure(self):
        game = Game(library=["Island"])
        interpreter = Interpreter(game)

        result = interpreter.apply(draw_cards(3))

        assert result == EffectResult.failure("Drew from empty library!")
        assert game.hand == ["Island"]
        assert len(interpreter.effects[0].children) == 2

    def test_draw_cards_collects_messages(self):
        interpreter = Interpreter(Game(library=["Island", "Forest"]))
        assert interpreter.apply(draw_cards(2)) == EffectResult.ok(["Drew Forest", "Drew Island"])

    def test_unwrap_failure(self):
        with pytest.raises(ValueError):
            EffectResult.failure("Drew from empty library!").unwrap()

    def test_gain_life(self):
        game = Game(life=3)
        assert Interpreter(game).apply(gain_life(2)) == "Added 2 life"
        assert game.life == 5


class TestSetup:
    """Tests for create_game and state snapshots."""

    def test_default_game(self):
        game = create_game()
        assert game.life == 20
        assert game.library == ["Mox Tombstone", "Mox Awesome"]
        assert game.hand == []

    def test_seeded_shuffle_is_deterministic(self):
        library = [f"Card {i}" for i in range(10)]
        first = create_game(library=library, random_seed=7)
        second = create_game(library=library, random_seed=7)
        assert first.library == second.library
        assert sorted(first.library) == sorted(library)

    def test_negative_life_rejected(self):
        with pytest.raises(ValueError):
            create_game(life=-1)

    def test_from_dict_round_trip(self, game_with_hand):
        assert Game.from_dict(game_with_hand.to_dict()) == game_with_hand

    @pytest.mark.parametrize("payload", [
        [],
        {"life": "twenty"},
        {"hand": "Island"},
        {"library": [1, 2]},
        {"replacement_effects": []},
    ])
    def test_from_dict_rejects_bad_state(self, payload):
        with pytest.raises(ValueError):
            Game.from_dict(payload)

    def test_clone_is_independent(self, game):
        copy = game.clone()
        copy.library.pop()
        assert game.library == ["Mox Tombstone", "Mox Awesome"]
