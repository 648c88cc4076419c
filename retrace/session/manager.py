"""
Session Manager - Runs, checkpoints and resumes call trees.

A session represents one run over one shared state:
- Created from a fresh state, or resumed from a recording
- Runs top-level calls (turns) one at a time through its interpreter
- Can be checkpointed at any point between calls

Resuming feeds the recorded effect tree to a new interpreter over the
state rebuilt from the checkpoint. Calls already recorded replay without
touching that state (it already reflects them); the first call past the
end of the record executes for real.

    session = manager.create_session("duel", create_game())
    session.run(turn_one)
    recording = session.checkpoint()

    resumed = manager.resume_session(recording, Game.from_dict(recording.state))
    resumed.run(turn_one)    # replayed
    resumed.run(turn_two)    # executed
"""

from __future__ import annotations
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, TypeVar

from pydantic import JsonValue

from ..engine_core import ChoiceResolver, Interpreter
from ..engine_core.effect_value import type_adapter
from ..recording import Recording, RecordingStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionState(Enum):
    """State of a session."""
    CREATED = "created"  # No call run yet
    ACTIVE = "active"  # At least one call completed
    FAILED = "failed"  # A call raised; the run is aborted
    ENDED = "ended"  # Removed from its manager


def snapshot_state(state: Any) -> JsonValue:
    """JSON snapshot of a state object (dataclass, pydantic model, ...)."""
    return type_adapter(Any).dump_python(state, mode="json")


@dataclass
class Session:
    """
    One run over one shared state.

    Contains:
    - The live state, mutated by the calls
    - The top-level interpreter and its effect record
    - A snapshot of the state the run started from
    """
    session_id: str
    game: str
    state: Any
    interpreter: Interpreter
    initial_state: JsonValue = None
    created_at: float = field(default_factory=time.time)
    status: SessionState = SessionState.CREATED
    error: str | None = None

    @classmethod
    def start(
        cls,
        game: str,
        state: Any,
        effects: list[Any] | None = None,
        choice_resolver: ChoiceResolver | None = None,
        initial_state: JsonValue = None,
    ) -> Session:
        """Create a session; `effects` seeds the interpreter for replay."""
        if initial_state is None:
            initial_state = snapshot_state(state)
        return cls(
            session_id=str(uuid.uuid4()),
            game=game,
            state=state,
            interpreter=Interpreter(state, effects=effects, choice_resolver=choice_resolver),
            initial_state=initial_state,
        )

    @classmethod
    def resume(
        cls,
        recording: Recording,
        state: Any,
        choice_resolver: ChoiceResolver | None = None,
    ) -> Session:
        """
        Continue a recorded run.

        `state` must be the state rebuilt from `recording.state`. Recorded
        calls are replayed without being run, so they do not mutate it.
        """
        return cls.start(
            recording.game,
            state,
            effects=recording.effects,
            choice_resolver=choice_resolver,
            initial_state=recording.initial_state,
        )

    @property
    def executed(self) -> int:
        return self.interpreter.executed

    @property
    def replayed(self) -> int:
        return self.interpreter.replayed

    @property
    def is_replaying(self) -> bool:
        """Whether recorded calls remain to be replayed."""
        return self.interpreter.pending_replay > 0

    def run(self, call: Callable[[Interpreter], T], returns: Any = None) -> T:
        """
        Run (or replay) one top-level call.

        Any exception marks the session FAILED and is re-raised. Nothing is
        rolled back: mutations made before the failure stay.
        """
        if self.status in {SessionState.FAILED, SessionState.ENDED}:
            raise RuntimeError(f"Session {self.session_id} is {self.status.value}")

        try:
            outcome = self.interpreter.apply(call, returns=returns)
        except Exception as exc:
            self.status = SessionState.FAILED
            self.error = str(exc)
            logger.warning("Session %s failed: %s", self.session_id, exc)
            raise

        self.status = SessionState.ACTIVE
        return outcome

    def run_all(self, calls: list[Callable[[Interpreter], Any]]) -> list[Any]:
        return [self.run(call) for call in calls]

    def checkpoint(self) -> Recording:
        """
        Everything needed to resume this run later.

        A failed run cannot be checkpointed: its state holds the partial
        mutations of a call that left no record.
        """
        if self.status == SessionState.FAILED:
            raise RuntimeError(f"Session {self.session_id} failed: {self.error}")
        return Recording(
            game=self.game,
            initial_state=self.initial_state,
            state=snapshot_state(self.state),
            effects=list(self.interpreter.effects),
        )


class SessionManager:
    """
    Manages sessions.

    Responsibilities:
    - Create and resume sessions
    - Track active sessions
    - Save and load checkpoints through a RecordingStore (optional)

    Sessions themselves are in-memory only.
    """

    def __init__(self, store: RecordingStore | None = None):
        self.store = store
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        game: str,
        state: Any,
        choice_resolver: ChoiceResolver | None = None,
    ) -> Session:
        session = Session.start(game, state, choice_resolver=choice_resolver)
        self._sessions[session.session_id] = session
        return session

    def resume_session(
        self,
        recording: Recording,
        state: Any,
        choice_resolver: ChoiceResolver | None = None,
    ) -> Session:
        session = Session.resume(recording, state, choice_resolver=choice_resolver)
        self._sessions[session.session_id] = session
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str) -> bool:
        """Remove a session from memory."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.status = SessionState.ENDED
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions that can still run calls."""
        return [
            sid for sid, session in self._sessions.items()
            if session.status in {SessionState.CREATED, SessionState.ACTIVE}
        ]

    def save_checkpoint(self, session_id: str, name: str) -> Recording:
        """Checkpoint a session into the store under `name`."""
        if self.store is None:
            raise ValueError("No recording store configured")
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session not found: {session_id}")
        recording = session.checkpoint()
        self.store.save(name, recording)
        return recording

    def load_checkpoint(self, name: str) -> Recording | None:
        if self.store is None:
            raise ValueError("No recording store configured")
        return self.store.get(name)
