import pytest

from block_fixtures import make_block, uniform_block
from common.diff_output import CollectingSink
from world.blocks import NODES_PER_BLOCK, BlockPos
from world.diff_walker import DiffRecord, DiffWalker
from world.errors import BlockVanishedError, UnsupportedVersionError
from world.map_store import MemoryBlockStore

ORIGIN = BlockPos(0, 0, 0)


def _with_changes(changes, base="air"):
    """Block of ``base`` with ``{index: name}`` overrides."""
    names = [base] + sorted(set(changes.values()) - {base})
    local = {name: i for i, name in enumerate(names)}
    param0 = [0] * NODES_PER_BLOCK
    for index, name in changes.items():
        param0[index] = local[name]
    return make_block(param0, {i: name for name, i in local.items()})


def test_single_change_end_to_end():
    old = MemoryBlockStore({ORIGIN: uniform_block("air")})
    new = MemoryBlockStore({ORIGIN: _with_changes({0: "stone"})})
    sink = CollectingSink()
    stats = DiffWalker(old, new).run(ORIGIN, sink)
    assert sink.lines() == ["0 0 0 air stone"]
    assert stats.diffs == 1
    assert stats.compared == 1


def test_single_block_visits_seven_positions():
    old = MemoryBlockStore({ORIGIN: uniform_block("air")})
    new = MemoryBlockStore({ORIGIN: uniform_block("air"), BlockPos(1, 0, 0): uniform_block("stone")})
    walker = DiffWalker(old, new)
    assert list(walker.walk(ORIGIN)) == []
    assert walker.visited == {ORIGIN} | {ORIGIN.offset(*d) for d in [(1, 0, 0), (-1, 0, 0), (0, 1, 0), (0, -1, 0), (0, 0, 1), (0, 0, -1)]}
    assert len(walker.visited) == 7
    # Only the origin is looked up in the new store.
    assert new.lookups == 1


def test_origin_absent_from_old():
    walker = DiffWalker(MemoryBlockStore(), MemoryBlockStore())
    assert list(walker.walk(ORIGIN)) == []
    assert walker.visited == {ORIGIN}


def test_records_in_voxel_index_order():
    changes = {0x1A3: "stone", 5: "dirt", 4095: "stone"}
    old = MemoryBlockStore({BlockPos(1, -1, 0): uniform_block("air")})
    new = MemoryBlockStore({BlockPos(1, -1, 0): _with_changes(changes)})
    records = list(DiffWalker(old, new).walk(BlockPos(1, -1, 0)))
    assert records == [
        DiffRecord(21, -16, 0, "air", "dirt"),
        DiffRecord(19, -6, 1, "air", "stone"),
        DiffRecord(31, -1, 15, "air", "stone"),
    ]


def test_blocks_follow_depth_first_order():
    # An L shaped region: origin, +x, +x+y, and -x.
    positions = [ORIGIN, BlockPos(1, 0, 0), BlockPos(1, 1, 0), BlockPos(-1, 0, 0)]
    old = MemoryBlockStore({p: uniform_block("air") for p in positions})
    new = MemoryBlockStore({p: _with_changes({0: "stone"}) for p in positions})
    records = list(DiffWalker(old, new).walk(ORIGIN))
    assert [(r.x, r.y, r.z) for r in records] == [(0, 0, 0), (16, 0, 0), (16, 16, 0), (-16, 0, 0)]


def test_traversal_stays_in_connected_component():
    island = BlockPos(5, 0, 0)
    old = MemoryBlockStore({ORIGIN: uniform_block("air"), island: uniform_block("air")})
    new = MemoryBlockStore({ORIGIN: uniform_block("air"), island: uniform_block("stone")})
    walker = DiffWalker(old, new)
    assert list(walker.walk(ORIGIN)) == []
    assert island not in walker.visited


def test_cycles_are_visited_once():
    cube = [BlockPos(x, y, z) for x in (0, 1) for y in (0, 1) for z in (0, 1)]
    old = MemoryBlockStore({p: uniform_block("air") for p in cube})
    new = MemoryBlockStore({p: _with_changes({7: "stone"}) for p in cube})
    walker = DiffWalker(old, new)
    records = list(walker.walk(ORIGIN))
    assert len(records) == 8
    assert len({(r.x, r.y, r.z) for r in records}) == 8
    assert walker.stats.compared == 8
    # 8 blocks plus the 24 empty positions around them.
    assert len(walker.visited) == 32


def test_large_region_does_not_recurse():
    row = [BlockPos(x, 0, 0) for x in range(1200)]
    blob = uniform_block("air")
    store = MemoryBlockStore({p: blob for p in row})
    walker = DiffWalker(store, store)
    assert list(walker.walk(ORIGIN)) == []
    assert walker.stats.compared == 1200


def test_vanished_block_is_fatal():
    gone = BlockPos(1, 0, 0)
    old = MemoryBlockStore({ORIGIN: uniform_block("air"), gone: uniform_block("air"), BlockPos(2, 0, 0): uniform_block("air")})
    new = MemoryBlockStore({ORIGIN: _with_changes({0: "stone"}), BlockPos(2, 0, 0): _with_changes({0: "stone"})})
    sink = CollectingSink()
    with pytest.raises(BlockVanishedError) as info:
        DiffWalker(old, new).run(ORIGIN, sink)
    assert info.value.pos == gone
    assert "(1, 0, 0)" in str(info.value)
    # Only the origin, compared before the failure, produced output.
    assert sink.lines() == ["0 0 0 air stone"]


def test_decode_error_carries_position():
    bad = make_block([0] * NODES_PER_BLOCK, {0: "air"}, version=27)
    old = MemoryBlockStore({ORIGIN: uniform_block("air")})
    new = MemoryBlockStore({ORIGIN: bad})
    with pytest.raises(UnsupportedVersionError) as info:
        list(DiffWalker(old, new).walk(ORIGIN))
    assert info.value.pos == ORIGIN
    assert info.value.snapshot == "new"
    assert str(info.value).startswith("block (0, 0, 0) (new): ")


def test_registry_shared_across_snapshots():
    old = MemoryBlockStore({ORIGIN: make_block([1] * NODES_PER_BLOCK, {0: "stone", 1: "air"})})
    new = MemoryBlockStore({ORIGIN: make_block([0] * NODES_PER_BLOCK, {0: "air"})})
    walker = DiffWalker(old, new)
    assert list(walker.walk(ORIGIN)) == []
    assert walker.registry.names() == ("stone", "air")
