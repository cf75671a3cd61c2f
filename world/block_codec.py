"""Decoder for serialized map blocks (format version 28).

Layout of a blob::

    u8      version (28)
    5 bytes header fields, skipped
    zlib    bulk node data: 4096 x u16 BE param0, then fields we ignore
    zlib    node metadata, drained and dropped
    u8      static object version (0)
    u16 BE  static object count (must be 0)
    4 bytes timestamp, skipped
    u8      name-id mapping version (0)
    u16 BE  mapping count N
    N x     u16 BE local id, u16 BE name length, name bytes

Decoding is split in two: :func:`parse_block` reads the blob into block-local
ids plus the mapping table without touching any shared state, and
:func:`remap_block` turns that into run-wide ids through a
:class:`~world.node_types.NodeTypeRegistry`.
"""
from __future__ import annotations

import struct
import zlib
from dataclasses import dataclass
from typing import List, Tuple

from world.blocks import NODES_PER_BLOCK
from world.errors import (
    UnexpectedEndOfDataError,
    UnmappedNodeIdError,
    UnsupportedContentError,
    UnsupportedVersionError,
    ZlibStreamError,
)
from world.node_types import NodeTypeRegistry

SUPPORTED_VERSION = 28
HEADER_SIZE = 6
TRAILER_SIZE = 10

_PARAM0 = struct.Struct(f">{NODES_PER_BLOCK}H")
_U16 = struct.Struct(">H")
_MAPPING_ENTRY = struct.Struct(">HH")

DecodedBlock = List[int]


@dataclass(frozen=True)
class RawBlock:
    """A block as stored: block-local ids plus the local id -> name table."""

    version: int
    param0: Tuple[int, ...]
    mappings: Tuple[Tuple[int, str], ...]

    @property
    def mapping_count(self) -> int:
        return len(self.mappings)


def _inflate(data: bytes, offset: int, what: str) -> Tuple[bytes, int]:
    """Inflate one zlib stream starting at ``offset``.

    Returns the full decompressed payload and the offset just past the
    compressed stream, so streams stored back to back can be read in turn.
    """
    inflater = zlib.decompressobj()
    try:
        payload = inflater.decompress(data[offset:])
        payload += inflater.flush()
    except zlib.error as exc:
        raise ZlibStreamError(f"{what}: {exc}") from exc
    if not inflater.eof:
        raise ZlibStreamError(f"{what}: compressed stream is truncated")
    return payload, len(data) - len(inflater.unused_data)


def _take(data: bytes, offset: int, size: int, what: str) -> Tuple[bytes, int]:
    end = offset + size
    if end > len(data):
        raise UnexpectedEndOfDataError(f"{what}: need {size} bytes, {max(0, len(data) - offset)} left")
    return data[offset:end], end


def parse_block(blob: bytes) -> RawBlock:
    """Parse a serialized block without resolving its node names."""
    if not blob:
        raise UnexpectedEndOfDataError("empty block")
    version = blob[0]
    if version != SUPPORTED_VERSION:
        raise UnsupportedVersionError(f"unsupported version: {version}")
    if len(blob) < HEADER_SIZE:
        raise UnexpectedEndOfDataError("block header is truncated")
    offset = HEADER_SIZE

    # Bulk node data; param1/param2 follow param0 and are skipped.
    bulk, offset = _inflate(blob, offset, "bulk node data")
    if len(bulk) < _PARAM0.size:
        raise UnexpectedEndOfDataError(f"can't read nodes: {len(bulk)} of {_PARAM0.size} bytes")
    param0 = _PARAM0.unpack_from(bulk)

    # Node metadata.
    _, offset = _inflate(blob, offset, "nodemeta")

    trailer, offset = _take(blob, offset, TRAILER_SIZE, "static objects / name-id mapping header")
    if trailer[0] != 0:
        raise UnsupportedVersionError(f"unsupported static objs version: {trailer[0]}")
    (static_count,) = _U16.unpack_from(trailer, 1)
    if static_count != 0:
        raise UnsupportedContentError(f"non-zero static obj count: {static_count}")
    if trailer[7] != 0:
        raise UnsupportedVersionError(f"unsupported name-id mapping version: {trailer[7]}")
    (count,) = _U16.unpack_from(trailer, 8)

    mappings = []
    for _ in range(count):
        entry, offset = _take(blob, offset, _MAPPING_ENTRY.size, "name-id mapping entry")
        local_id, name_len = _MAPPING_ENTRY.unpack(entry)
        name, offset = _take(blob, offset, name_len, "name-id mapping name")
        mappings.append((local_id, name.decode("utf-8", "surrogateescape")))

    return RawBlock(version=version, param0=param0, mappings=tuple(mappings))


def remap_block(raw: RawBlock, registry: NodeTypeRegistry) -> DecodedBlock:
    """Translate block-local ids of ``raw`` into registry ids."""
    count = raw.mapping_count
    # Slots no entry assigns keep id 0.
    lookup = [0] * count
    for local_id, name in raw.mappings:
        if local_id >= count:
            raise UnmappedNodeIdError(f"name-id mapping entry {local_id} ({name!r}) outside table of {count}")
        lookup[local_id] = registry.intern(name)

    highest = max(raw.param0)
    if highest >= count:
        raise UnmappedNodeIdError(f"node id {highest} not covered by name-id mapping of {count}")
    return [lookup[local_id] for local_id in raw.param0]


def decode_block(blob: bytes, registry: NodeTypeRegistry) -> DecodedBlock:
    """Decode ``blob`` into 4096 registry ids in voxel index order."""
    return remap_block(parse_block(blob), registry)
