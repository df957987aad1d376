"""Synthetic flight telemetry generator for time-series ingestion."""

__version__ = "0.1.0"
