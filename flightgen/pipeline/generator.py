"""Synthetic telemetry generation for a single plane.

Each plane owns a ``random.Random`` seeded from its identifier, so a run
started at the same identifier reproduces the same flight paths. Values drift
by a bounded random walk rather than being resampled, keeping consecutive rows
coherent.
"""

from __future__ import annotations

from dataclasses import replace
import random
import time
from typing import Callable

from flightgen.models.telemetry import Kinematics, PlaneState, Row

# Cruise envelopes: (initial low, initial high, clamp low, clamp high, max step)
ALTITUDE_FT = (30000.0, 40000.0, 0.0, 45000.0, 10.0)
GROUND_SPEED_KT = (200.0, 300.0, 0.0, 600.0, 1.0)
PITCH_DEG = (-10.0, 10.0, -10.0, 10.0, 1.0)
ROLL_DEG = (-10.0, 10.0, -10.0, 10.0, 1.0)
YAW_DEG = (-10.0, 10.0, -10.0, 10.0, 1.0)
ANGLE_OF_ATTACK_DEG = (0.0, 15.0, 0.0, 15.0, 0.5)
OUTSIDE_AIR_TEMP_C = (-60.0, 20.0, -60.0, 20.0, 1.0)

HEADING_STEP_DEG = 1.0
POSITION_STEP_DEG = 0.01


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _walk(rng: random.Random, value: float, envelope: tuple[float, ...]) -> float:
    _, _, low, high, step = envelope
    return _clamp(value + rng.uniform(-step, step), low, high)


def _initial(rng: random.Random, envelope: tuple[float, ...]) -> float:
    return rng.uniform(envelope[0], envelope[1])


def wrap_heading(value: float) -> float:
    """Wrap a heading into [0, 360)."""

    value %= 360.0
    # A tiny negative operand rounds up to the modulus itself.
    if value >= 360.0:
        value = 0.0
    return value


def wrap_longitude(value: float) -> float:
    """Wrap a longitude into [-180, 180)."""

    return wrap_heading(value + 180.0) - 180.0


def fold_latitude(value: float) -> float:
    """Reflect a latitude that crossed a pole back into [-90, 90]."""

    value = (value + 90.0) % 360.0 - 90.0
    if value > 90.0:
        value = 180.0 - value
    return value


def initial_kinematics(rng: random.Random) -> Kinematics:
    return Kinematics(
        latitude=rng.uniform(-60.0, 60.0),
        longitude=rng.uniform(-180.0, 180.0),
        altitude_ft=_initial(rng, ALTITUDE_FT),
        ground_speed_kt=_initial(rng, GROUND_SPEED_KT),
        heading_deg=rng.uniform(0.0, 360.0),
        pitch_deg=_initial(rng, PITCH_DEG),
        roll_deg=_initial(rng, ROLL_DEG),
        yaw_deg=_initial(rng, YAW_DEG),
        angle_of_attack_deg=_initial(rng, ANGLE_OF_ATTACK_DEG),
        outside_air_temp_c=_initial(rng, OUTSIDE_AIR_TEMP_C),
    )


def perturb(rng: random.Random, previous: Kinematics) -> Kinematics:
    """Nudge every channel of ``previous`` and clamp it to its sane range."""

    return Kinematics(
        latitude=fold_latitude(
            previous.latitude + rng.uniform(-POSITION_STEP_DEG, POSITION_STEP_DEG)
        ),
        longitude=wrap_longitude(
            previous.longitude + rng.uniform(-POSITION_STEP_DEG, POSITION_STEP_DEG)
        ),
        altitude_ft=_walk(rng, previous.altitude_ft, ALTITUDE_FT),
        ground_speed_kt=_walk(rng, previous.ground_speed_kt, GROUND_SPEED_KT),
        heading_deg=wrap_heading(
            previous.heading_deg + rng.uniform(-HEADING_STEP_DEG, HEADING_STEP_DEG)
        ),
        pitch_deg=_walk(rng, previous.pitch_deg, PITCH_DEG),
        roll_deg=_walk(rng, previous.roll_deg, ROLL_DEG),
        yaw_deg=_walk(rng, previous.yaw_deg, YAW_DEG),
        angle_of_attack_deg=_walk(rng, previous.angle_of_attack_deg, ANGLE_OF_ATTACK_DEG),
        outside_air_temp_c=_walk(rng, previous.outside_air_temp_c, OUTSIDE_AIR_TEMP_C),
    )


class RowGenerator:
    """Produce successive rows for one plane."""

    def __init__(
        self,
        plane_id: str,
        *,
        seed: int | str | None = None,
        clock: Callable[[], int] = time.time_ns,
    ) -> None:
        self.plane_id = plane_id
        self.rng = random.Random(plane_id if seed is None else seed)
        self.clock = clock

    def initial_state(self) -> PlaneState:
        return PlaneState(plane_id=self.plane_id)

    def next(self, state: PlaneState) -> tuple[Row, PlaneState]:
        """Return the next row and the state to generate the one after it."""

        if state.plane_id != self.plane_id:
            raise ValueError(
                f"Generator for {self.plane_id} cannot advance state of {state.plane_id}"
            )

        if state.kinematics is None:
            kinematics = initial_kinematics(self.rng)
        else:
            kinematics = perturb(self.rng, state.kinematics)

        # Wall clock can step backwards; rows for one plane must not.
        timestamp_ns = max(self.clock(), state.last_timestamp_ns + 1)
        sequence = state.sequence + 1

        row = Row(
            plane_id=self.plane_id,
            sequence=sequence,
            timestamp_ns=timestamp_ns,
            latitude=kinematics.latitude,
            longitude=kinematics.longitude,
            altitude_ft=kinematics.altitude_ft,
            ground_speed_kt=kinematics.ground_speed_kt,
            heading_deg=kinematics.heading_deg,
            pitch_deg=kinematics.pitch_deg,
            roll_deg=kinematics.roll_deg,
            yaw_deg=kinematics.yaw_deg,
            angle_of_attack_deg=kinematics.angle_of_attack_deg,
            outside_air_temp_c=kinematics.outside_air_temp_c,
        )
        new_state = replace(
            state,
            sequence=sequence,
            last_timestamp_ns=timestamp_ns,
            kinematics=kinematics,
        )
        return row, new_state


__all__ = [
    "RowGenerator",
    "fold_latitude",
    "initial_kinematics",
    "perturb",
    "wrap_heading",
    "wrap_longitude",
]
