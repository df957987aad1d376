"""Telemetry samples and the per-plane state they are generated from."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Kinematics:
    """Flight channels carried from one sample to the next."""

    latitude: float
    longitude: float
    altitude_ft: float
    ground_speed_kt: float
    heading_deg: float
    pitch_deg: float
    roll_deg: float
    yaw_deg: float
    angle_of_attack_deg: float
    outside_air_temp_c: float


@dataclass(frozen=True)
class PlaneState:
    """Everything the generator needs to produce a plane's next row."""

    plane_id: str
    sequence: int = 0
    last_timestamp_ns: int = 0
    kinematics: Kinematics | None = None


@dataclass(frozen=True)
class Row:
    """One telemetry sample for one plane."""

    plane_id: str
    sequence: int
    timestamp_ns: int
    latitude: float
    longitude: float
    altitude_ft: float
    ground_speed_kt: float
    heading_deg: float
    pitch_deg: float
    roll_deg: float
    yaw_deg: float
    angle_of_attack_deg: float
    outside_air_temp_c: float

    def fields(self) -> dict[str, float]:
        """Numeric channels keyed by their column name in the sink table."""

        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "altitude": self.altitude_ft,
            "ground_speed": self.ground_speed_kt,
            "heading": self.heading_deg,
            "pitch": self.pitch_deg,
            "roll": self.roll_deg,
            "yaw": self.yaw_deg,
            "aoa": self.angle_of_attack_deg,
            "oat": self.outside_air_temp_c,
        }


@dataclass(frozen=True)
class Batch:
    """Rows for a single plane, flushed to the sink in one write."""

    plane_id: str
    number: int
    rows: tuple[Row, ...]

    def __len__(self) -> int:
        return len(self.rows)


__all__ = ["Batch", "Kinematics", "PlaneState", "Row"]
