"""
Engine Core - Memoized, replayable execution of effect trees.

The engine is the runtime that:
1. Runs nested effect calls against one shared, mutable state
2. Records every call's result in an effect tree
3. Replays a recorded tree instead of re-running side effects
4. Substitutes registered replacement effects for default behavior
"""

from .errors import (
    InterpreterError,
    EncodeError,
    DecodeError,
    UnresolvedChoiceError,
    InvalidChoiceError,
    ReentrantApplyError,
    AbortedRunError,
    UnknownReplacementError,
)
from .effect_value import EffectValue
from .effect_tree import EffectTree, walk_effects
from .result import EffectResult
from .interpreter import Interpreter, result_type
from .choice import ChoiceResolver, PendingChoice, ScriptedChoiceResolver
from .replacement import (
    ReplacementEffect,
    ReplacementOutcome,
    SupportsReplacements,
    replacement_type,
    decode_replacement,
    register_replacement,
    applicable_replacements,
    handle_replacement,
)

__all__ = [
    "InterpreterError",
    "EncodeError",
    "DecodeError",
    "UnresolvedChoiceError",
    "InvalidChoiceError",
    "ReentrantApplyError",
    "AbortedRunError",
    "UnknownReplacementError",
    "EffectValue",
    "EffectTree",
    "walk_effects",
    "EffectResult",
    "Interpreter",
    "result_type",
    "ChoiceResolver",
    "PendingChoice",
    "ScriptedChoiceResolver",
    "ReplacementEffect",
    "ReplacementOutcome",
    "SupportsReplacements",
    "replacement_type",
    "decode_replacement",
    "register_replacement",
    "applicable_replacements",
    "handle_replacement",
]
