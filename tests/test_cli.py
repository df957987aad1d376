import json

import pytest

from flightgen import main as cli
from flightgen.errors import SinkError
from flightgen.sinks.base import CountingSink


def _args(*extra):
    return [
        "--total-rows",
        "9",
        "--rate-per-plane",
        "1000",
        "--plane-count",
        "3",
        "--table-name",
        "flights",
        "--batch-size",
        "5",
        *extra,
    ]


def test_cli_dry_run_reports_json(capsys):
    exit_code = cli.main(_args("--dry-run", "--json", "--quiet"))

    assert exit_code == cli.EXIT_OK
    report = json.loads(capsys.readouterr().out)
    assert report["status"] == "COMPLETED"
    assert report["total_rows_emitted"] == 9
    assert [plane["plane_id"] for plane in report["planes"]] == ["AA00", "AA01", "AA02"]


def test_cli_prints_summary(capsys):
    exit_code = cli.main(_args("--dry-run"))

    assert exit_code == cli.EXIT_OK
    assert "Total rows generated: 9 of 9" in capsys.readouterr().out


def test_cli_quiet_success_prints_nothing(capsys):
    exit_code = cli.main(_args("--dry-run", "--quiet"))

    assert exit_code == cli.EXIT_OK
    assert capsys.readouterr().out == ""


def test_cli_requires_connection_string_without_dry_run(capsys, monkeypatch):
    monkeypatch.setattr(cli.settings, "connection_string", None)

    exit_code = cli.main(_args())

    assert exit_code == cli.EXIT_CONFIG
    assert "--connection-string" in capsys.readouterr().err


@pytest.mark.parametrize(
    "extra",
    [
        ("--dry-run", "--starting-plane-id", "ZZ99"),
        ("--dry-run", "--batch-size", "0"),
        ("--connection-string", "tcp::addr=localhost:9009;"),
    ],
)
def test_cli_reports_configuration_errors(capsys, extra):
    exit_code = cli.main(_args(*extra))

    assert exit_code == cli.EXIT_CONFIG
    assert "Configuration error" in capsys.readouterr().err


class FailingPlaneSink(CountingSink):
    async def send(self, table_name, batch):
        if batch.plane_id == "AA01":
            raise SinkError("connection reset by peer")
        await super().send(table_name, batch)


def test_cli_dry_run_counts_rows_without_keeping_batches(monkeypatch):
    created = []

    class TrackingSink(CountingSink):
        def __init__(self):
            super().__init__()
            created.append(self)

    monkeypatch.setattr(cli, "CountingSink", TrackingSink)

    exit_code = cli.main(_args("--dry-run", "--quiet"))

    assert exit_code == cli.EXIT_OK
    assert len(created) == 1
    sink = created[0]
    assert sink.row_count == 9
    assert sink.rows_by_plane() == {"AA00": 3, "AA01": 3, "AA02": 3}
    assert dict(sink.batches) == {"AA00": 1, "AA01": 1, "AA02": 1}


def test_cli_reports_failed_plane_and_exits_with_failure(capsys, monkeypatch):
    monkeypatch.setattr(cli, "CountingSink", FailingPlaneSink)

    exit_code = cli.main(_args("--dry-run", "--quiet"))

    assert exit_code == cli.EXIT_FAILED
    out = capsys.readouterr().out
    assert "Data generation failed" in out
    assert "plane AA01 failed: connection reset by peer" in out
    assert "plane AA00 flushed" in out
    assert "plane AA02 flushed" in out


def test_cli_exits_with_cancelled_code(capsys, monkeypatch):
    real_run_fleet = cli.run_fleet

    async def cancelled_run(config, sink, *, cancel_event):
        cancel_event.set()
        return await real_run_fleet(config, sink, cancel_event=cancel_event)

    monkeypatch.setattr(cli, "run_fleet", cancelled_run)

    exit_code = cli.main(
        [
            "--dry-run",
            "--total-rows",
            "9000",
            "--rate-per-plane",
            "10",
            "--plane-count",
            "3",
            "--table-name",
            "flights",
        ]
    )

    assert exit_code == cli.EXIT_CANCELLED
    assert "Data generation cancelled" in capsys.readouterr().out
