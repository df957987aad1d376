"""Data models for the flight data generator."""

from .run import PlaneReport, RunConfiguration, RunReport, RunStatus, WorkerState
from .telemetry import Batch, Kinematics, PlaneState, Row

__all__ = [
    "Batch",
    "Kinematics",
    "PlaneReport",
    "PlaneState",
    "Row",
    "RunConfiguration",
    "RunReport",
    "RunStatus",
    "WorkerState",
]
