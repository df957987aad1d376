"""Per-plane accumulation of rows into fixed-size batches."""

from __future__ import annotations

from flightgen.errors import ConfigurationError
from flightgen.models.telemetry import Batch, Row


class BatchBuffer:
    """Collect rows for one plane and release them ``batch_size`` at a time."""

    def __init__(self, plane_id: str, batch_size: int) -> None:
        if batch_size <= 0:
            raise ConfigurationError(f"Batch size must be positive, got {batch_size}")
        self.plane_id = plane_id
        self.batch_size = batch_size
        self._rows: list[Row] = []
        self._batches_released = 0

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def batches_released(self) -> int:
        return self._batches_released

    def append(self, row: Row) -> Batch | None:
        """Buffer ``row``; return the completed batch once the buffer is full."""

        if row.plane_id != self.plane_id:
            raise ValueError(
                f"Row for plane {row.plane_id} appended to buffer for {self.plane_id}"
            )
        self._rows.append(row)
        if len(self._rows) >= self.batch_size:
            return self._release()
        return None

    def finalize(self) -> Batch | None:
        """Release whatever is buffered, or ``None`` when the buffer is empty."""

        if not self._rows:
            return None
        return self._release()

    def discard(self) -> int:
        """Drop buffered rows without releasing them; returns how many were dropped."""

        dropped = len(self._rows)
        self._rows = []
        return dropped

    def _release(self) -> Batch:
        self._batches_released += 1
        batch = Batch(
            plane_id=self.plane_id,
            number=self._batches_released,
            rows=tuple(self._rows),
        )
        self._rows = []
        return batch


__all__ = ["BatchBuffer"]
