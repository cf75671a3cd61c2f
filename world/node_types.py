"""Run-wide table of node type names."""
from __future__ import annotations

from typing import Dict, List, Tuple

from world.errors import TooManyTypesError

MAX_NODE_TYPES = 0x10000


class NodeTypeRegistry:
    """Interns node type names to small integer ids.

    Ids are handed out in first-seen order starting at 0 and are shared by
    every block decoded during one run, so an id means the same name whichever
    snapshot produced it.
    """

    __slots__ = ("_ids", "_names")

    def __init__(self) -> None:
        self._ids: Dict[str, int] = {}
        self._names: List[str] = []

    def intern(self, name: str) -> int:
        node_id = self._ids.get(name)
        if node_id is None:
            if len(self._names) >= MAX_NODE_TYPES:
                raise TooManyTypesError(f"too many node types (limit {MAX_NODE_TYPES})")
            node_id = len(self._names)
            self._ids[name] = node_id
            self._names.append(name)
        return node_id

    def name(self, node_id: int) -> str:
        return self._names[node_id]

    def names(self) -> Tuple[str, ...]:
        return tuple(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._ids

    def __len__(self) -> int:
        return len(self._names)
