import itertools
import math

import pytest

from flightgen.pipeline.generator import (
    RowGenerator,
    fold_latitude,
    wrap_heading,
    wrap_longitude,
)


def _rows(generator, count):
    state = generator.initial_state()
    rows = []
    for _ in range(count):
        row, state = generator.next(state)
        rows.append(row)
    return rows, state


def test_generator_is_reproducible_for_the_same_plane():
    clock = itertools.count(1_000)
    first, _ = _rows(RowGenerator("AA00", clock=lambda: next(clock)), 20)
    clock = itertools.count(1_000)
    second, _ = _rows(RowGenerator("AA00", clock=lambda: next(clock)), 20)

    assert first == second


def test_generator_differs_between_planes():
    first, _ = _rows(RowGenerator("AA00", clock=lambda: 1), 1)
    second, _ = _rows(RowGenerator("AA01", clock=lambda: 1), 1)

    assert first[0].latitude != second[0].latitude


def test_generator_advances_sequence_and_keeps_timestamps_increasing():
    # A clock that stands still and then jumps backwards.
    readings = iter([500, 500, 400, 900, 100])
    generator = RowGenerator("AB12", clock=lambda: next(readings))
    rows, state = _rows(generator, 5)

    assert [row.sequence for row in rows] == [1, 2, 3, 4, 5]
    timestamps = [row.timestamp_ns for row in rows]
    assert timestamps == sorted(timestamps)
    assert len(set(timestamps)) == len(timestamps)
    assert state.sequence == 5
    assert state.last_timestamp_ns == timestamps[-1]


def test_generator_walks_rather_than_resamples():
    rows, _ = _rows(RowGenerator("CD34"), 200)

    for previous, current in zip(rows, rows[1:]):
        assert abs(current.altitude_ft - previous.altitude_ft) <= 10.0 + 1e-9
        assert abs(current.ground_speed_kt - previous.ground_speed_kt) <= 1.0 + 1e-9
        assert abs(current.angle_of_attack_deg - previous.angle_of_attack_deg) <= 0.5 + 1e-9


def test_generator_keeps_values_in_sane_ranges():
    rows, _ = _rows(RowGenerator("ZZ99"), 500)

    for row in rows:
        assert row.altitude_ft >= 0
        assert row.ground_speed_kt >= 0
        assert 0 <= row.heading_deg < 360
        assert -90 <= row.latitude <= 90
        assert -180 <= row.longitude < 180
        assert -10 <= row.pitch_deg <= 10
        assert -10 <= row.yaw_deg <= 10
        assert -60 <= row.outside_air_temp_c <= 20


def test_generator_rejects_foreign_state():
    generator = RowGenerator("AA00")
    other = RowGenerator("AA01").initial_state()

    with pytest.raises(ValueError):
        generator.next(other)


@pytest.mark.parametrize(
    "value, expected",
    [(0.0, 0.0), (179.5, 179.5), (180.0, -180.0), (181.0, -179.0), (-181.0, 179.0)],
)
def test_wrap_longitude(value, expected):
    assert wrap_longitude(value) == pytest.approx(expected)


@pytest.mark.parametrize(
    "value, expected",
    [(45.0, 45.0), (90.0, 90.0), (-90.0, -90.0), (91.0, 89.0), (-91.0, -89.0)],
)
def test_fold_latitude(value, expected):
    assert fold_latitude(value) == pytest.approx(expected)


@pytest.mark.parametrize(
    "value, expected",
    [(0.0, 0.0), (359.5, 359.5), (360.0, 0.0), (-1.0, 359.0), (-1e-20, 0.0)],
)
def test_wrap_heading(value, expected):
    result = wrap_heading(value)

    assert result == pytest.approx(expected)
    assert 0.0 <= result < 360.0


def test_wrap_longitude_never_returns_upper_bound():
    for value in (math.nextafter(-180.0, -math.inf), -1e-20 - 180.0, 180.0, -540.0):
        assert -180.0 <= wrap_longitude(value) < 180.0
