"""
Interpreter - Memoized, replayable execution of nested effect calls.

The interpreter acts a lot like an iterator over a tree. Every call to
apply() either consumes the next recorded node (replay) or runs the
effect with a fresh child interpreter and records what it returned.

    interpreter = Interpreter(game)
    interpreter.apply(turn_one)
    interpreter.apply(turn_two)

    # Later, over the state those calls left behind:
    replay = Interpreter(game, effects=interpreter.effects)
    replay.apply(turn_one)    # not run, result comes from the record
    replay.apply(turn_two)    # not run either
    replay.apply(turn_three)  # runs for real and is recorded

Calls are identified by their position among their siblings, so the
sequence (and nesting) of apply() calls made by a piece of logic must be
the same on every run over the same state, just like the call order rules
for React hooks. Each apply() gets its own child interpreter with its own
zero-based cursor; positions are local to the parent call.

A replayed call is not invoked at all, so its recorded children are
never looked at. They only matter to a future run that executes the call
again from scratch.
"""

from __future__ import annotations
import functools
import logging
import typing
from typing import Any, Callable, Generic, Iterable, TypeVar

from .choice import ChoiceResolver
from .effect_tree import EffectTree
from .effect_value import EffectValue, type_name
from .errors import AbortedRunError, DecodeError, EncodeError, ReentrantApplyError

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")


def result_type(f: Callable[..., Any]) -> Any:
    """
    Work out the type a call returns from its annotations.

    Falls back to Any when the callable has no return annotation or it
    cannot be resolved (e.g. a class defined inside a function).
    """
    target = f
    while isinstance(target, functools.partial):
        target = target.func
    try:
        hints = typing.get_type_hints(target)
    except (NameError, TypeError) as exc:
        logger.debug("Cannot resolve return annotation of %r: %s", f, exc)
        return Any
    return hints.get("return", Any)


class Interpreter(Generic[S]):
    """
    Runs or replays one level of a call tree against shared state.

    Attributes:
        effects: Recorded nodes at this level. Seeded from a previous run,
            then extended with every call executed fresh.
        position: Cursor into `effects`; advanced by one per apply().
        choice_resolver: Consulted when several replacement effects apply.
            Inherited by every nested interpreter.
        executed: Calls at this level that actually ran.
        replayed: Calls at this level answered from the record.
    """

    def __init__(
        self,
        state: S,
        effects: Iterable[EffectTree] | None = None,
        position: int = 0,
        choice_resolver: ChoiceResolver | None = None,
        depth: int = 0,
    ):
        self._state = state
        self.effects: list[EffectTree] = list(effects or ())
        self.position = position
        self.choice_resolver = choice_resolver
        self.depth = depth

        self.executed = 0
        self.replayed = 0

        # Set while one of our nested calls runs / once our own call is over
        self._suspended = False
        self._finished = False
        # Set once a call failed; the record no longer lines up with positions
        self._aborted = False

    @property
    def state(self) -> S:
        """The shared state, for reading."""
        return self._state

    def state_mut(self) -> S:
        """
        The shared state, for mutation.

        Only the innermost running interpreter may hand out the state for
        writing; ancestors are suspended until their nested call returns.
        """
        self._check_usable("state_mut")
        return self._state

    @property
    def pending_replay(self) -> int:
        """Recorded nodes at this level not consumed yet."""
        return max(len(self.effects) - self.position, 0)

    @property
    def aborted(self) -> bool:
        """Whether a call at this level failed, ending the run."""
        return self._aborted

    def apply(self, f: Callable[[Interpreter[S]], T], returns: Any = None) -> T:
        """
        Run `f` as a nested call, or replay its recorded result.

        Args:
            f: The effect. Receives a child interpreter scoped to this call.
            returns: Type to decode a recorded result as. Defaults to the
                return annotation of `f` (Any if there is none).

        Raises:
            DecodeError: The recorded result does not decode as `returns`.
            EncodeError: `f` returned a value that cannot be serialized.
            ReentrantApplyError: This interpreter is not the innermost one.
            AbortedRunError: An earlier call at this level failed. Any
                exception escaping a call ends the run: the call left no
                record, so later positions would no longer line up.
        """
        self._check_usable("apply")
        if returns is None:
            returns = result_type(f)

        position = self.position
        if position < len(self.effects):
            node = self.effects[position]
            try:
                value = node.result.decode(returns)
            except DecodeError as exc:
                self._aborted = True
                raise DecodeError(
                    f"Replay diverged at depth {self.depth}: {exc}", position=position
                ) from exc
            self.position += 1
            self.replayed += 1
            logger.debug(
                "Replayed call %d at depth %d as %s", position, self.depth, type_name(returns)
            )
            return value

        # Reserve the slot before running, nested calls cannot take it
        self.position += 1
        child: Interpreter[S] = Interpreter(
            self._state,
            choice_resolver=self.choice_resolver,
            depth=self.depth + 1,
        )

        self._suspended = True
        try:
            outcome = f(child)
        except Exception:
            self._aborted = True
            raise
        finally:
            self._suspended = False
            child._finished = True

        try:
            result = EffectValue.encode(outcome)
        except EncodeError as exc:
            self._aborted = True
            raise EncodeError(str(exc), position=position) from exc

        self.effects.append(EffectTree(result=result, children=tuple(child.effects)))
        self.executed += 1
        logger.debug(
            "Executed call %d at depth %d (%d nested)", position, self.depth, len(child.effects)
        )
        return outcome

    def snapshot(self) -> dict[str, Any]:
        """The durable record of this interpreter as JSON-compatible data."""
        return {
            "effects": [node.model_dump(mode="json") for node in self.effects],
            "position": self.position,
        }

    def _check_usable(self, operation: str):
        if self._aborted:
            raise AbortedRunError(
                f"{operation}() on an interpreter whose run was aborted by a failed call",
                position=self.position,
            )
        if self._finished:
            raise ReentrantApplyError(
                f"{operation}() on an interpreter whose call already completed",
                position=self.position,
            )
        if self._suspended:
            raise ReentrantApplyError(
                f"{operation}() on an interpreter while one of its nested calls is running",
                position=self.position,
            )

    def __repr__(self) -> str:
        return (
            f"Interpreter(depth={self.depth}, position={self.position}, "
            f"effects={len(self.effects)})"
        )
