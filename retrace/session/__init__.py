"""
Session Module - Incremental runs over a shared state.

A session runs top-level calls one at a time, can be checkpointed into a
recording between calls, and resumed from that recording later.
"""

from .manager import SessionManager, Session, SessionState, snapshot_state

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "snapshot_state",
]
