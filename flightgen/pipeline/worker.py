"""Lifecycle of a single simulated plane."""

from __future__ import annotations

import asyncio
import logging

from flightgen.models.run import PlaneReport, RunConfiguration, WorkerState
from flightgen.models.telemetry import Batch
from flightgen.pipeline.batching import BatchBuffer
from flightgen.pipeline.generator import RowGenerator
from flightgen.pipeline.rate_limiter import RateLimiter
from flightgen.sinks.base import Sink

logger = logging.getLogger("flightgen.pipeline.worker")


class PlaneWorker:
    """Generate, pace, batch and flush exactly ``row_budget`` rows for one plane.

    The worker never retries a failed flush; the error is recorded on its
    report and re-raised so the coordinator can fail the run.
    """

    def __init__(
        self,
        *,
        plane_id: str,
        row_budget: int,
        config: RunConfiguration,
        sink: Sink,
        limiter: RateLimiter | None = None,
        generator: RowGenerator | None = None,
    ) -> None:
        self.plane_id = plane_id
        self.config = config
        self.sink = sink
        self.limiter = limiter or RateLimiter(config.rate_per_plane)
        self.generator = generator or RowGenerator(plane_id)
        self.buffer = BatchBuffer(plane_id, config.batch_size)
        self.report = PlaneReport(plane_id=plane_id, row_budget=row_budget)

    @property
    def state(self) -> WorkerState:
        return self.report.state

    def _transition(self, state: WorkerState) -> None:
        logger.debug("Plane %s: %s -> %s", self.plane_id, self.report.state.value, state.value)
        self.report.state = state

    async def run(self) -> PlaneReport:
        """Drive the plane until its budget is flushed, it fails, or it is cancelled."""

        try:
            self._transition(WorkerState.GENERATING)
            state = self.generator.initial_state()

            while self.report.rows_generated < self.report.row_budget:
                await self.limiter.wait()
                row, state = self.generator.next(state)
                self.report.rows_generated += 1
                self._log_progress()

                batch = self.buffer.append(row)
                if batch is not None:
                    await self._flush(batch)
                    self._transition(WorkerState.GENERATING)

            terminal = self.buffer.finalize()
            if terminal is not None:
                await self._flush(terminal)
        except asyncio.CancelledError:
            dropped = self.buffer.discard()
            self._transition(WorkerState.CANCELLED)
            if not self.config.quiet:
                logger.info(
                    "Plane %s cancelled after %s rows flushed (%s buffered rows abandoned)",
                    self.plane_id,
                    self.report.rows_flushed,
                    dropped,
                )
            raise
        except Exception as exc:
            self.report.error = str(exc) or exc.__class__.__name__
            self._transition(WorkerState.FAILED)
            logger.error(
                "Plane %s failed after %s rows flushed: %s",
                self.plane_id,
                self.report.rows_flushed,
                exc,
            )
            raise

        self._transition(WorkerState.COMPLETED)
        if not self.config.quiet:
            logger.info("Plane %s generated %s rows", self.plane_id, self.report.rows_flushed)
        return self.report

    async def _flush(self, batch: Batch) -> None:
        self._transition(WorkerState.FLUSHING)
        await self.sink.send(self.config.table_name, batch)
        self.report.rows_flushed += len(batch)
        self.report.batches_flushed += 1
        logger.debug(
            "Plane %s flushed batch %s with %s rows", self.plane_id, batch.number, len(batch)
        )

    def _log_progress(self) -> None:
        every = self.config.progress_every
        if self.config.quiet or not every:
            return
        if self.report.rows_generated % every == 0:
            logger.info(
                "Plane %s generated %s of %s rows so far",
                self.plane_id,
                self.report.rows_generated,
                self.report.row_budget,
            )


__all__ = ["PlaneWorker"]
