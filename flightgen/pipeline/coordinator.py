"""Fleet-wide orchestration: budgets, identifiers, and the worker join."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
import logging
import time

from flightgen.domain.plane_ids import allocate_identifiers
from flightgen.errors import ConfigurationError
from flightgen.models.run import RunConfiguration, RunReport, RunStatus, WorkerState
from flightgen.pipeline.worker import PlaneWorker
from flightgen.sinks.base import Sink

logger = logging.getLogger("flightgen.pipeline.coordinator")


@dataclass(frozen=True)
class PlaneAssignment:
    """Identifier and row budget handed to one worker."""

    ordinal: int
    plane_id: str
    row_budget: int


def split_row_budget(total_rows: int, plane_count: int) -> list[int]:
    """Spread ``total_rows`` over ``plane_count`` planes, remainder first."""

    if plane_count <= 0:
        raise ConfigurationError(f"Plane count must be positive, got {plane_count}")
    if total_rows < 0:
        raise ConfigurationError(f"Total rows must not be negative, got {total_rows}")

    base, remainder = divmod(total_rows, plane_count)
    return [base + 1 if ordinal < remainder else base for ordinal in range(plane_count)]


def plan_fleet(config: RunConfiguration) -> list[PlaneAssignment]:
    """Assign every plane its identifier and budget before anything runs."""

    identifiers = allocate_identifiers(config.starting_plane_id, config.plane_count)
    budgets = split_row_budget(config.total_rows, config.plane_count)
    return [
        PlaneAssignment(ordinal=ordinal, plane_id=plane_id, row_budget=budget)
        for ordinal, (plane_id, budget) in enumerate(zip(identifiers, budgets))
    ]


async def run_fleet(
    config: RunConfiguration,
    sink: Sink,
    *,
    cancel_event: asyncio.Event | None = None,
) -> RunReport:
    """Run one worker per plane and report how the run ended.

    Configuration problems raise before any worker starts. A failing plane
    stops the whole run; the other planes are cancelled and their flushed row
    counts are kept on the report.
    """

    assignments = plan_fleet(config)
    workers = [
        PlaneWorker(
            plane_id=assignment.plane_id,
            row_budget=assignment.row_budget,
            config=config,
            sink=sink,
        )
        for assignment in assignments
    ]

    if not config.quiet:
        logger.info(
            "Starting %s planes (%s..%s) for %s rows at %s rows/s per plane",
            len(workers),
            assignments[0].plane_id,
            assignments[-1].plane_id,
            config.total_rows,
            config.rate_per_plane,
        )

    started = time.perf_counter()
    tasks = [
        asyncio.create_task(worker.run(), name=f"plane-{worker.plane_id}")
        for worker in workers
    ]
    cancel_waiter = asyncio.create_task((cancel_event or asyncio.Event()).wait())

    cancel_requested = False
    pending: set[asyncio.Task] = set(tasks)
    try:
        while pending:
            done, _ = await asyncio.wait(
                pending | {cancel_waiter}, return_when=asyncio.FIRST_COMPLETED
            )
            pending -= done
            finished_planes = done - {cancel_waiter}
            if any(
                not task.cancelled() and task.exception() is not None
                for task in finished_planes
            ):
                break
            if cancel_waiter in done and pending:
                cancel_requested = True
                logger.warning("Cancellation requested; stopping %s planes", len(pending))
                break
    finally:
        cancel_waiter.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await cancel_waiter
        for task in pending:
            task.cancel()
        # Collect every outcome so no task exception goes unretrieved.
        await asyncio.gather(*tasks, return_exceptions=True)

    # A task cancelled before its first step never ran the worker's own handler.
    for worker in workers:
        if not worker.state.terminal:
            worker.report.state = WorkerState.CANCELLED

    elapsed = time.perf_counter() - started
    states = [worker.state for worker in workers]
    if WorkerState.FAILED in states:
        status = RunStatus.FAILED
    elif all(state is WorkerState.COMPLETED for state in states):
        status = RunStatus.COMPLETED
    elif cancel_requested:
        status = RunStatus.CANCELLED
    else:
        status = RunStatus.FAILED

    report = RunReport(
        status=status,
        total_rows_requested=config.total_rows,
        total_rows_emitted=sum(worker.report.rows_flushed for worker in workers),
        elapsed_seconds=elapsed,
        planes=[worker.report for worker in workers],
    )

    if status is RunStatus.FAILED:
        for plane in report.failed_planes:
            logger.error("Plane %s failed: %s", plane.plane_id, plane.error)
        logger.error(
            "Run failed after %s of %s rows flushed",
            report.total_rows_emitted,
            config.total_rows,
        )
    elif not config.quiet:
        logger.info(
            "Data generation %s. Total rows generated: %s in %.2fs",
            status.value.lower(),
            report.total_rows_emitted,
            elapsed,
        )
    return report


__all__ = ["PlaneAssignment", "plan_fleet", "run_fleet", "split_row_budget"]
