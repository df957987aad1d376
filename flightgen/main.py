"""Command-line entry point for the flight data generator.

Usage examples:
    flightgen --connection-string "http::addr=localhost:9000;" --total-rows 100000 \
        --rate-per-plane 50 --plane-count 20 --table-name flights
    flightgen --dry-run --total-rows 9 --rate-per-plane 1000 --plane-count 3 \
        --table-name flights --batch-size 5 --json
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys

from flightgen.config import settings
from flightgen.errors import ConfigurationError
from flightgen.models.run import RunConfiguration, RunReport, RunStatus, WorkerState
from flightgen.pipeline.coordinator import run_fleet
from flightgen.sinks.base import CountingSink
from flightgen.sinks.questdb import QuestDBSink, parse_connection_string

logger = logging.getLogger("flightgen")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2
EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flightgen",
        description="Generate synthetic flight telemetry and stream it into QuestDB",
    )
    parser.add_argument(
        "--connection-string",
        default=settings.connection_string,
        help="QuestDB configuration string, e.g. 'http::addr=localhost:9000;'",
    )
    parser.add_argument("--total-rows", type=int, required=True, help="Rows to emit in total")
    parser.add_argument(
        "--rate-per-plane", type=float, required=True, help="Rows per second for each plane"
    )
    parser.add_argument("--plane-count", type=int, required=True, help="Number of planes")
    parser.add_argument(
        "--table-name", default=settings.table_name, help="Destination table name"
    )
    parser.add_argument(
        "--starting-plane-id",
        default=settings.starting_plane_id,
        help="Identifier of the first plane (default: %(default)s)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=settings.batch_size,
        help="Rows per flushed batch (default: %(default)s)",
    )
    parser.add_argument(
        "--progress-every",
        type=int,
        default=settings.progress_every,
        help="Log progress every N rows per plane, 0 to disable (default: %(default)s)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        default=settings.quiet,
        help="Suppress progress output",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Count batches instead of sending them to QuestDB",
    )
    parser.add_argument("--json", action="store_true", help="Print the run report as JSON")
    return parser


def build_config(args: argparse.Namespace) -> RunConfiguration:
    if not args.dry_run:
        if not args.connection_string:
            raise ConfigurationError("--connection-string is required unless --dry-run is set")
        parse_connection_string(args.connection_string)
    return RunConfiguration.from_options(
        connection_string=args.connection_string,
        total_rows=args.total_rows,
        rate_per_plane=args.rate_per_plane,
        plane_count=args.plane_count,
        table_name=args.table_name,
        starting_plane_id=args.starting_plane_id,
        batch_size=args.batch_size,
        progress_every=args.progress_every,
        quiet=args.quiet,
    )


def _install_signal_handlers(cancel_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):  # pragma: no cover - Windows
            loop.add_signal_handler(signum, cancel_event.set)


async def execute(config: RunConfiguration, *, dry_run: bool = False) -> RunReport:
    """Open the sink, run the fleet, and close the sink again."""

    cancel_event = asyncio.Event()
    _install_signal_handlers(cancel_event)

    if dry_run:
        return await run_fleet(config, CountingSink(), cancel_event=cancel_event)

    async with QuestDBSink.from_conf(config.connection_string) as sink:
        return await run_fleet(config, sink, cancel_event=cancel_event)


def print_report(report: RunReport, *, as_json: bool = False) -> None:
    if as_json:
        print(report.model_dump_json(indent=2))
        return

    print(
        f"Data generation {report.status.value.lower()}. "
        f"Total rows generated: {report.total_rows_emitted} of {report.total_rows_requested} "
        f"in {report.elapsed_seconds:.2f}s ({report.rows_per_second:.1f} rows/s)"
    )
    failed = report.failed_planes
    for plane in failed:
        print(f"  plane {plane.plane_id} failed: {plane.error}")
    if failed:
        for plane in report.planes:
            if plane.state is not WorkerState.FAILED:
                print(f"  plane {plane.plane_id} flushed {plane.rows_flushed} rows")


def exit_code_for(report: RunReport) -> int:
    return {
        RunStatus.COMPLETED: EXIT_OK,
        RunStatus.FAILED: EXIT_FAILED,
        RunStatus.CANCELLED: EXIT_CANCELLED,
    }[report.status]


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    try:
        config = build_config(args)
        report = asyncio.run(execute(config, dry_run=args.dry_run))
    except ConfigurationError as exc:
        sys.stderr.write(f"Configuration error: {exc}\n")
        return EXIT_CONFIG

    if args.json or not (config.quiet and report.status is RunStatus.COMPLETED):
        print_report(report, as_json=args.json)
    return exit_code_for(report)


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
