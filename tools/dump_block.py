"""Print the node types stored in one block of a map database."""
from __future__ import annotations

import argparse
import sys
from collections import Counter
from typing import Optional, Sequence

from engine.config import get as config_get
from world.block_codec import parse_block
from world.blocks import BlockPos, block_key
from world.errors import MapDiffError
from world.map_store import SqliteBlockStore


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Dump node type counts of a single block")
    parser.add_argument("map", help="path to map.sqlite")
    parser.add_argument("x", type=int)
    parser.add_argument("y", type=int)
    parser.add_argument("z", type=int)
    args = parser.parse_args(argv)

    pos = BlockPos(args.x, args.y, args.z)
    try:
        with SqliteBlockStore(args.map, table=config_get("store.table", "blocks")) as store:
            blob = store.get(pos)
            if blob is None:
                print(f"[dump] no block at {tuple(pos)} (key {block_key(pos)})", file=sys.stderr)
                return 1
            raw = parse_block(blob)
    except MapDiffError as exc:
        print(f"[dump] {exc}", file=sys.stderr)
        return 1

    names = dict(raw.mappings)
    counts = Counter(raw.param0)
    print("Block:", tuple(pos), "key", block_key(pos))
    print("Version:", raw.version)
    print("Mappings:", raw.mapping_count)
    for local_id, count in counts.most_common():
        print(f"{count:6d} {names.get(local_id, f'<unmapped {local_id}>')}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
