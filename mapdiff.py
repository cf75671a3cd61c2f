"""Report every node whose type changed between two map snapshots.

Usage: mapdiff OLD NEW

Each changed node is printed on stdout as ``x y z old_type new_type``.
"""
from __future__ import annotations

import argparse
import sys
import time
from typing import List, Optional, Sequence

from common.diff_output import TextDiffSink
from engine.config import get as config_get
from world.blocks import BlockPos
from world.diff_walker import DiffWalker
from world.errors import MapDiffError
from world.map_store import SqliteBlockStore


def _origin() -> BlockPos:
    raw = config_get("diff.origin", [0, 0, 0])
    try:
        x, y, z = (int(v) for v in raw)
    except (TypeError, ValueError) as exc:
        raise MapDiffError(f"config diff.origin must be three integers, got {raw!r}") from exc
    if not all(-0x8000 <= v <= 0x7FFF for v in (x, y, z)):
        raise MapDiffError(f"config diff.origin {raw!r} is outside the int16 block range")
    return BlockPos(x, y, z)


def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="mapdiff", description="List nodes changed between two map databases")
    ap.add_argument("old", help="map.sqlite of the old snapshot")
    ap.add_argument("new", help="map.sqlite of the new snapshot")
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    out = sys.stdout
    if hasattr(out, "reconfigure"):
        # Node names that are not valid UTF-8 round-trip byte for byte.
        out.reconfigure(errors="surrogateescape")
    sink = TextDiffSink(out)
    table = config_get("store.table", "blocks")

    stores: List[SqliteBlockStore] = []
    t_start = time.perf_counter()
    try:
        origin = _origin()
        stores.append(SqliteBlockStore(args.old, table=table))
        stores.append(SqliteBlockStore(args.new, table=table))
        walker = DiffWalker(stores[0], stores[1])
        stats = walker.run(origin, sink)
    except MapDiffError as exc:
        sink.flush()
        print(f"[mapdiff] {exc}", file=sys.stderr)
        return 1
    finally:
        for store in stores:
            store.close()
    sink.flush()

    if config_get("log.stats", False):
        elapsed = time.perf_counter() - t_start
        print(
            f"[perf] blocks visited={stats.visited} compared={stats.compared} "
            f"diffs={stats.diffs} types={len(walker.registry)} time={elapsed:.3f}s",
            file=sys.stderr,
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
