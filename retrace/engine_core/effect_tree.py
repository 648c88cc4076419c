"""
Effect Tree - Record of completed calls and the calls they made.

A node holds the serialized result of one call and, in call order, the
nodes of every nested call it routed through the interpreter. Position in
a list is the identity of a call; there are no call ids.

Only outputs are recorded. Logic that runs inline without going through
Interpreter.apply() leaves no trace.
"""

from __future__ import annotations
from typing import Iterable, Iterator

from pydantic import BaseModel, ConfigDict

from .effect_value import EffectValue


Path = tuple[int, ...]


class EffectTree(BaseModel):
    """One completed call: its result and its nested calls, in order."""
    model_config = ConfigDict(frozen=True)

    result: EffectValue
    children: tuple[EffectTree, ...] = ()

    def walk(self, path: Path = ()) -> Iterator[tuple[Path, EffectTree]]:
        """Depth-first, pre-order traversal yielding (path, node)."""
        yield path, self
        for index, child in enumerate(self.children):
            yield from child.walk(path + (index,))

    def size(self) -> int:
        """Number of calls recorded in this subtree, this node included."""
        return 1 + sum(child.size() for child in self.children)


def walk_effects(effects: Iterable[EffectTree]) -> Iterator[tuple[Path, EffectTree]]:
    """Walk a top-level effect list; paths start at the list index."""
    for index, node in enumerate(effects):
        yield from node.walk((index,))
