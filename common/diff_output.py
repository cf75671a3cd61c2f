"""Sinks for diff records."""
from __future__ import annotations

from typing import List, TextIO

from world.diff_walker import DiffRecord


class TextDiffSink:
    """Writes one ``x y z old new`` line per record."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def __call__(self, record: DiffRecord) -> None:
        self.stream.write(record.format() + "\n")

    def flush(self) -> None:
        self.stream.flush()


class CollectingSink:
    """Keeps records in memory, for embedding and tests."""

    def __init__(self) -> None:
        self.records: List[DiffRecord] = []

    def __call__(self, record: DiffRecord) -> None:
        self.records.append(record)

    def lines(self) -> List[str]:
        return [record.format() for record in self.records]
