"""Read-only access to the serialized blocks of a map."""
from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol, Union

from world.blocks import BlockPos, block_key
from world.errors import BlockStoreError


class BlockStore(Protocol):
    def get(self, pos: BlockPos) -> Optional[bytes]:
        """Return the serialized block at ``pos``, or ``None`` if absent."""
        ...


class SqliteBlockStore:
    """Map database with a ``blocks(pos INTEGER PRIMARY KEY, data BLOB)`` table."""

    def __init__(self, path: Union[str, Path], table: str = "blocks") -> None:
        self.path = Path(path)
        self.table = table
        self._query = f'SELECT data FROM "{table}" WHERE pos = ?'
        try:
            self._conn = sqlite3.connect(f"{self.path.resolve().as_uri()}?mode=ro", uri=True)
        except sqlite3.Error as exc:
            raise BlockStoreError(f"can't open {self.path}: {exc}") from exc

    def get(self, pos: BlockPos) -> Optional[bytes]:
        try:
            row = self._conn.execute(self._query, (block_key(pos),)).fetchone()
        except sqlite3.Error as exc:
            raise BlockStoreError(f"{self.path}: {exc}", pos=pos) from exc
        if row is None:
            return None
        data = row[0]
        if data is None:
            return b""
        if isinstance(data, str):
            # TEXT cells hold the same bytes a BLOB would.
            return data.encode("utf-8", "surrogateescape")
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise BlockStoreError(f"{self.path}: data is {type(data).__name__}, not a blob", pos=pos)
        return bytes(data)

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> "SqliteBlockStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class MemoryBlockStore:
    """Dict-backed store keyed the same way as the database."""

    def __init__(self, blocks: Optional[Mapping[BlockPos, bytes]] = None) -> None:
        self._blocks: Dict[int, bytes] = {}
        self.lookups = 0
        for pos, blob in (blocks or {}).items():
            self.put(pos, blob)

    def put(self, pos: BlockPos, blob: bytes) -> None:
        self._blocks[block_key(pos)] = bytes(blob)

    def get(self, pos: BlockPos) -> Optional[bytes]:
        self.lookups += 1
        return self._blocks.get(block_key(pos))

    def __len__(self) -> int:
        return len(self._blocks)
