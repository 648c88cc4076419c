"""
Tests for sessions and the session manager.

Tests:
- Running turns through a session
- Checkpointing and resuming
- Failure handling
- Session bookkeeping
"""

import pytest

from ..engine_core import (
    AbortedRunError,
    EffectResult,
    Interpreter,
    ScriptedChoiceResolver,
    UnresolvedChoiceError,
    register_replacement,
)
from ..games.duel import (
    CALL_COUNTS,
    DRAW_EVENT,
    Game,
    MillInsteadReplacement,
    RandomDiscardReplacement,
    create_game,
    draw_card,
    standard_turns,
    turn_one,
    turn_three,
    turn_two,
)
from ..session import Session, SessionManager, SessionState, snapshot_state


@pytest.fixture
def manager(store) -> SessionManager:
    return SessionManager(store=store)


@pytest.fixture
def contested(game_with_hand) -> Game:
    register_replacement(game_with_hand, DRAW_EVENT, RandomDiscardReplacement())
    register_replacement(game_with_hand, DRAW_EVENT, MillInsteadReplacement())
    return game_with_hand


class TestSessionRun:
    """Tests for running calls through a session."""

    def test_new_session(self, manager):
        session = manager.create_session("duel", create_game())
        assert session.status == SessionState.CREATED
        assert session.initial_state["library"] == ["Mox Tombstone", "Mox Awesome"]
        assert not session.is_replaying

    def test_run_turns(self, manager):
        session = manager.create_session("duel", create_game())

        assert session.run(turn_one) == ["Drew Mox Awesome"]
        assert session.status == SessionState.ACTIVE
        assert session.executed == 1
        assert session.state.hand == ["Mox Awesome"]

    def test_run_all(self, manager):
        session = manager.create_session("duel", create_game())
        messages = session.run_all(standard_turns())
        assert messages[-1] == ["Discarded Mox Tombstone", "Added 5 life"]
        assert session.state.life == 25

    def test_explicit_return_type(self, manager):
        session = manager.create_session("duel", Game())
        assert session.run(draw_card, returns=EffectResult) == EffectResult.failure(
            "Drew from empty library!"
        )

    def test_interpreter_error_fails_session(self, manager, contested):
        session = manager.create_session("duel", contested)

        with pytest.raises(UnresolvedChoiceError):
            session.run(draw_card)

        assert session.status == SessionState.FAILED
        assert "DRAW" in session.error
        with pytest.raises(RuntimeError):
            session.run(turn_one)
        assert session.session_id not in manager.list_active_sessions()

    def test_any_exception_fails_session(self, manager, contested):
        """A failing resolver aborts the run like an interpreter error does."""
        session = manager.create_session(
            "duel", contested, choice_resolver=ScriptedChoiceResolver.of([])
        )

        with pytest.raises(LookupError):
            session.run(draw_card)

        assert session.status == SessionState.FAILED
        assert session.interpreter.aborted
        with pytest.raises(RuntimeError):
            session.run(turn_one)

    def test_failed_call_leaves_record_aligned(self, manager):
        """A domain bug mid-run cannot shift later results onto the wrong calls."""
        def broken_turn(interpreter: Interpreter[Game]) -> list[str]:
            raise KeyError("no such zone")

        session = manager.create_session("duel", create_game())
        session.run(turn_one)
        with pytest.raises(KeyError):
            session.run(broken_turn)

        with pytest.raises(RuntimeError):
            session.run(turn_two)
        with pytest.raises(AbortedRunError):
            session.interpreter.apply(turn_two)
        assert len(session.interpreter.effects) == 1
        assert session.state.library == ["Mox Tombstone"]

    def test_failed_session_cannot_checkpoint(self, manager):
        def broken_turn(interpreter: Interpreter[Game]) -> list[str]:
            interpreter.state_mut().library.pop()
            raise KeyError("no such zone")

        session = manager.create_session("duel", create_game())
        with pytest.raises(KeyError):
            session.run(broken_turn)

        with pytest.raises(RuntimeError):
            session.checkpoint()
        with pytest.raises(RuntimeError):
            manager.save_checkpoint(session.session_id, "broken")
        assert manager.load_checkpoint("broken") is None

    def test_choice_resolver(self, manager, contested):
        session = manager.create_session(
            "duel", contested, choice_resolver=ScriptedChoiceResolver.of([1])
        )
        assert session.run(draw_card) == EffectResult.ok("Milled Forest")


class TestCheckpoint:
    """Tests for checkpointing and resuming sessions."""

    def test_checkpoint_contents(self, manager):
        session = manager.create_session("duel", create_game())
        session.run(turn_one)

        recording = session.checkpoint()

        assert recording.game == "duel"
        assert recording.initial_state["hand"] == []
        assert recording.state["hand"] == ["Mox Awesome"]
        assert recording.effects == session.interpreter.effects

    def test_resume_replays_then_executes(self, manager):
        session = manager.create_session("duel", create_game())
        session.run(turn_one)
        session.run(turn_two)
        recording = session.checkpoint()
        CALL_COUNTS.clear()

        resumed = manager.resume_session(recording, Game.from_dict(recording.state))
        assert resumed.is_replaying
        assert resumed.run(turn_one) == ["Drew Mox Awesome"]
        assert resumed.run(turn_two) == ["Drew Mox Tombstone", "Played a draw replacement"]
        assert not resumed.is_replaying
        assert sum(CALL_COUNTS.values()) == 0

        assert resumed.run(turn_three) == ["Discarded Mox Tombstone", "Added 5 life"]
        assert resumed.replayed == 2
        assert resumed.executed == 1
        assert resumed.state.life == 25

    def test_resume_keeps_initial_state(self, manager):
        session = manager.create_session("duel", create_game())
        session.run(turn_one)
        recording = session.checkpoint()

        resumed = Session.resume(recording, Game.from_dict(recording.state))
        resumed.run(turn_one)
        resumed.run(turn_two)

        checkpoint = resumed.checkpoint()
        assert checkpoint.initial_state == recording.initial_state
        assert checkpoint.effects[0] == recording.effects[0]
        assert len(checkpoint.effects) == 2

    def test_save_and_load(self, manager):
        session = manager.create_session("duel", create_game())
        session.run(turn_one)

        saved = manager.save_checkpoint(session.session_id, "turn-one")
        assert manager.load_checkpoint("turn-one") == saved
        assert manager.load_checkpoint("missing") is None

    def test_save_unknown_session(self, manager):
        with pytest.raises(KeyError):
            manager.save_checkpoint("no-such-session", "x")

    def test_no_store(self):
        manager = SessionManager()
        session = manager.create_session("duel", create_game())
        with pytest.raises(ValueError):
            manager.save_checkpoint(session.session_id, "x")
        with pytest.raises(ValueError):
            manager.load_checkpoint("x")

    def test_snapshot_state(self, game_with_hand):
        assert snapshot_state(game_with_hand) == game_with_hand.to_dict()


class TestSessionManager:
    """Tests for session bookkeeping."""

    def test_get_session(self, manager):
        session = manager.create_session("duel", create_game())
        assert manager.get_session(session.session_id) is session
        assert manager.get_session("missing") is None

    def test_end_session(self, manager):
        session = manager.create_session("duel", create_game())

        assert manager.end_session(session.session_id) is True
        assert manager.end_session(session.session_id) is False
        assert session.status == SessionState.ENDED
        assert manager.get_session(session.session_id) is None
        with pytest.raises(RuntimeError):
            session.run(turn_one)

    def test_list_active_sessions(self, manager):
        first = manager.create_session("duel", create_game())
        second = manager.create_session("duel", create_game())
        second.run(turn_one)

        assert set(manager.list_active_sessions()) == {first.session_id, second.session_id}
        assert first.session_id != second.session_id
