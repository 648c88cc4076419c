"""
Retrace - Deterministic, replayable effect interpreter.

Runs a tree of nested effect calls against shared mutable state and
memoizes every call's result by position, so the same call tree can be
re-executed later from its record:
- Incremental execution (run a turn, stop, continue later)
- Save/resume from a recorded effect tree
- Auditability of everything a run returned
- Replacement effects that substitute for default behavior
"""

__version__ = "0.1.0"
