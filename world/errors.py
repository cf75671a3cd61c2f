"""Error types raised while comparing two map snapshots."""
from __future__ import annotations

from typing import Any, Optional


class MapDiffError(Exception):
    """Base class for every fatal condition of a diff run."""

    def __init__(self, message: str, *, pos: Optional[Any] = None, snapshot: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.pos = pos
        self.snapshot = snapshot

    def __str__(self) -> str:
        where = []
        if self.pos is not None:
            where.append(f"block {tuple(self.pos)}")
        if self.snapshot:
            where.append(f"({self.snapshot})")
        if where:
            return f"{' '.join(where)}: {self.message}"
        return self.message


class TooManyTypesError(MapDiffError):
    pass


class BlockStoreError(MapDiffError):
    pass


class BlockVanishedError(MapDiffError):
    pass


# Decode failures -------------------------------------------------------
class BlockDecodeError(MapDiffError):
    pass


class UnsupportedVersionError(BlockDecodeError):
    pass


class UnexpectedEndOfDataError(BlockDecodeError):
    pass


class ZlibStreamError(BlockDecodeError):
    pass


class UnsupportedContentError(BlockDecodeError):
    pass


class UnmappedNodeIdError(BlockDecodeError):
    pass
