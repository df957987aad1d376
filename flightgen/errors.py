"""Exception hierarchy for the flight data generator."""

from __future__ import annotations


class FlightGenError(Exception):
    """Base class for all generator errors."""


class ConfigurationError(FlightGenError, ValueError):
    """Raised when run parameters are invalid; nothing has been emitted yet."""


class RangeExceeded(ConfigurationError):
    """Raised when an identifier would run past the end of the plane ID space."""


class SinkError(FlightGenError):
    """Raised when a batch could not be delivered to the ingestion sink."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RunFailed(FlightGenError):
    """Raised by ``RunReport.raise_for_status`` when one or more planes failed."""

    def __init__(self, message: str, report=None) -> None:
        super().__init__(message)
        self.report = report


__all__ = [
    "ConfigurationError",
    "FlightGenError",
    "RangeExceeded",
    "RunFailed",
    "SinkError",
]
