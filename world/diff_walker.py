"""Flood-fill comparison of two map snapshots."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, NamedTuple, Optional, Set, Tuple

from world.block_codec import DecodedBlock, decode_block
from world.blocks import FACE_DIRECTIONS, BlockPos, node_pos
from world.errors import BlockDecodeError, BlockStoreError, BlockVanishedError
from world.map_store import BlockStore
from world.node_types import NodeTypeRegistry


class DiffRecord(NamedTuple):
    x: int
    y: int
    z: int
    old: str
    new: str

    def format(self) -> str:
        return f"{self.x} {self.y} {self.z} {self.old} {self.new}"


@dataclass
class WalkStats:
    visited: int = 0
    compared: int = 0
    diffs: int = 0


class DiffWalker:
    """Compares the blocks reachable from an origin through the old map.

    Starting at the origin, every block present in the old store is compared
    node by node with the same block of the new store, then its six
    neighbours are explored. A block missing from the old store ends the
    search in that direction. The traversal is depth first with an explicit
    stack and visits blocks in the same order a recursive search trying
    +x, -x, +y, -y, +z, -z would.
    """

    def __init__(
        self,
        old_store: BlockStore,
        new_store: BlockStore,
        registry: Optional[NodeTypeRegistry] = None,
    ) -> None:
        self.old_store = old_store
        self.new_store = new_store
        self.registry = registry if registry is not None else NodeTypeRegistry()
        self._visited: Set[BlockPos] = set()
        self.stats = WalkStats()

    @property
    def visited(self) -> Set[BlockPos]:
        return self._visited

    # ------------------------------------------------------------------
    def walk(self, origin: BlockPos) -> Iterator[DiffRecord]:
        """Yield every changed node reachable from ``origin``."""
        stack: List[BlockPos] = [origin]
        while stack:
            pos = stack.pop()
            if pos in self._visited:
                continue
            self._visited.add(pos)
            self.stats.visited += 1

            blocks = self._load_pair(pos)
            if blocks is None:
                continue
            self.stats.compared += 1
            yield from self._compare(pos, *blocks)

            # Reversed so the first direction is popped first.
            for dx, dy, dz in reversed(FACE_DIRECTIONS):
                stack.append(pos.offset(dx, dy, dz))

    def run(self, origin: BlockPos, emit: Callable[[DiffRecord], None]) -> WalkStats:
        """Walk from ``origin`` and hand each record to ``emit``."""
        for record in self.walk(origin):
            emit(record)
        return self.stats

    # ------------------------------------------------------------------
    def _load_pair(self, pos: BlockPos) -> Optional[Tuple[DecodedBlock, DecodedBlock]]:
        old_blob = self._fetch(self.old_store, pos, "old")
        if old_blob is None:
            return None
        new_blob = self._fetch(self.new_store, pos, "new")
        if new_blob is None:
            raise BlockVanishedError("block disappeared", pos=pos, snapshot="new")
        return self._decode(old_blob, pos, "old"), self._decode(new_blob, pos, "new")

    def _fetch(self, store: BlockStore, pos: BlockPos, snapshot: str) -> Optional[bytes]:
        try:
            return store.get(pos)
        except BlockStoreError as exc:
            exc.pos = pos
            exc.snapshot = snapshot
            raise

    def _decode(self, blob: bytes, pos: BlockPos, snapshot: str) -> DecodedBlock:
        try:
            return decode_block(blob, self.registry)
        except BlockDecodeError as exc:
            exc.pos = pos
            exc.snapshot = snapshot
            raise

    def _compare(self, pos: BlockPos, old: DecodedBlock, new: DecodedBlock) -> Iterator[DiffRecord]:
        name = self.registry.name
        for index, (old_id, new_id) in enumerate(zip(old, new)):
            if old_id != new_id:
                self.stats.diffs += 1
                x, y, z = node_pos(pos, index)
                yield DiffRecord(x, y, z, name(old_id), name(new_id))
