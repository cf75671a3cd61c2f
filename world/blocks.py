"""Block positions and the node index layout inside a block."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

BLOCK_SIZE = 16
NODES_PER_BLOCK = BLOCK_SIZE * BLOCK_SIZE * BLOCK_SIZE

Face = Tuple[int, int, int]

# Exploration order: x, y, z and "+" before "-" within each axis.
FACE_DIRECTIONS: Tuple[Face, ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
)


def _wrap16(value: int) -> int:
    return (value + 0x8000) % 0x10000 - 0x8000


@dataclass(frozen=True)
class BlockPos:
    """Position of a 16x16x16 block, in block units."""

    x: int
    y: int
    z: int

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y
        yield self.z

    def offset(self, dx: int, dy: int, dz: int) -> "BlockPos":
        # Components are int16 on disk; stepping past the edge wraps.
        return BlockPos(_wrap16(self.x + dx), _wrap16(self.y + dy), _wrap16(self.z + dz))


def neighbors(pos: BlockPos) -> Iterator[BlockPos]:
    """Yield the six face-adjacent block positions of ``pos`` in exploration order."""
    for dx, dy, dz in FACE_DIRECTIONS:
        yield pos.offset(dx, dy, dz)


def block_key(pos: BlockPos) -> int:
    """Return the integer database key of ``pos``.

    The linear form only stays unique while every component is within
    ``[-2048, 2047]``; stores are keyed by exactly this value.
    """
    return pos.x + pos.y * 4096 + pos.z * 4096 * 4096


def node_pos(pos: BlockPos, index: int) -> Tuple[int, int, int]:
    """Absolute node coordinates of voxel ``index`` inside block ``pos``."""
    local = (index & 0xF, (index >> 4) & 0xF, (index >> 8) & 0xF)
    return tuple(_wrap16((axis << 4) | off) for axis, off in zip(pos, local))  # type: ignore[return-value]
