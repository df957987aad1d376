"""Sink interface shared by every plane worker."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from typing import Protocol

from flightgen.models.telemetry import Batch


class Sink(Protocol):
    """Destination for completed batches.

    Implementations must tolerate concurrent ``send`` calls from many planes
    and write each batch in a single attempt, raising ``SinkError`` on failure.
    """

    async def send(self, table_name: str, batch: Batch) -> None:
        """Deliver ``batch`` to ``table_name``."""


class RecordingSink:
    """Keep every batch in memory instead of sending it anywhere.

    Memory grows with every row sent; use ``CountingSink`` for long runs.
    """

    def __init__(self) -> None:
        self.batches: list[tuple[str, Batch]] = []
        self._lock = asyncio.Lock()

    async def send(self, table_name: str, batch: Batch) -> None:
        async with self._lock:
            self.batches.append((table_name, batch))

    @property
    def row_count(self) -> int:
        return sum(len(batch) for _, batch in self.batches)

    def rows_by_plane(self) -> dict[str, int]:
        counts: dict[str, int] = defaultdict(int)
        for _, batch in self.batches:
            counts[batch.plane_id] += len(batch)
        return dict(counts)


class CountingSink:
    """Tally rows and batches per plane and drop the batches themselves."""

    def __init__(self) -> None:
        self.rows: dict[str, int] = defaultdict(int)
        self.batches: dict[str, int] = defaultdict(int)

    async def send(self, table_name: str, batch: Batch) -> None:
        self.rows[batch.plane_id] += len(batch)
        self.batches[batch.plane_id] += 1

    @property
    def row_count(self) -> int:
        return sum(self.rows.values())

    def rows_by_plane(self) -> dict[str, int]:
        return dict(self.rows)


__all__ = ["CountingSink", "RecordingSink", "Sink"]
