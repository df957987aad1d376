import pytest

from flightgen.errors import ConfigurationError
from flightgen.models.telemetry import Row
from flightgen.pipeline.batching import BatchBuffer


def _row(sequence: int, plane_id: str = "AA00") -> Row:
    return Row(
        plane_id=plane_id,
        sequence=sequence,
        timestamp_ns=sequence,
        latitude=0.0,
        longitude=0.0,
        altitude_ft=35000.0,
        ground_speed_kt=250.0,
        heading_deg=90.0,
        pitch_deg=0.0,
        roll_deg=0.0,
        yaw_deg=0.0,
        angle_of_attack_deg=2.0,
        outside_air_temp_c=-40.0,
    )


def test_full_buffer_releases_one_batch_in_order():
    buffer = BatchBuffer("AA00", 3)
    rows = [_row(n) for n in range(1, 4)]

    assert buffer.append(rows[0]) is None
    assert buffer.append(rows[1]) is None
    batch = buffer.append(rows[2])

    assert batch is not None
    assert batch.rows == tuple(rows)
    assert batch.number == 1
    assert len(buffer) == 0


def test_finalize_on_empty_buffer_returns_none():
    buffer = BatchBuffer("AA00", 3)
    assert buffer.finalize() is None


def test_finalize_returns_partial_batch():
    buffer = BatchBuffer("AA00", 5)
    for n in range(1, 8):
        buffer.append(_row(n))

    batch = buffer.finalize()

    assert batch is not None
    assert [row.sequence for row in batch.rows] == [6, 7]
    assert batch.number == 2
    assert buffer.finalize() is None


def test_every_row_lands_in_exactly_one_batch():
    buffer = BatchBuffer("AA00", 4)
    batches = []
    for n in range(1, 11):
        batch = buffer.append(_row(n))
        if batch:
            batches.append(batch)
    tail = buffer.finalize()
    if tail:
        batches.append(tail)

    sequences = [row.sequence for batch in batches for row in batch.rows]
    assert sequences == list(range(1, 11))
    assert [len(batch) for batch in batches] == [4, 4, 2]


def test_discard_drops_buffered_rows():
    buffer = BatchBuffer("AA00", 4)
    buffer.append(_row(1))
    buffer.append(_row(2))

    assert buffer.discard() == 2
    assert buffer.finalize() is None


def test_buffer_rejects_rows_from_another_plane():
    buffer = BatchBuffer("AA00", 4)
    with pytest.raises(ValueError):
        buffer.append(_row(1, plane_id="AA01"))


def test_buffer_rejects_non_positive_batch_size():
    with pytest.raises(ConfigurationError):
        BatchBuffer("AA00", 0)
