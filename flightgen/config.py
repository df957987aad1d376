"""Configuration settings for the flight data generator."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger("flightgen.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


def _get_int(env_var: str, default: int) -> int:
    value = os.getenv(env_var)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r; using %s", env_var, value, default)
        return default


def _get_float(env_var: str, default: float) -> float:
    value = os.getenv(env_var)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r; using %s", env_var, value, default)
        return default


@dataclass
class Settings:
    """Process defaults loaded from environment variables.

    Command-line options take precedence; these only fill in what the caller
    leaves out.
    """

    flightgen_env: str = os.getenv("FLIGHTGEN_ENV", "local")
    log_level: str = os.getenv("FLIGHTGEN_LOG_LEVEL", "INFO")

    # Pipeline defaults
    batch_size: int = _get_int("FLIGHTGEN_BATCH_SIZE", 1000)
    progress_every: int = _get_int("FLIGHTGEN_PROGRESS_EVERY", 1000)
    starting_plane_id: str = os.getenv("FLIGHTGEN_STARTING_PLANE_ID", "AA00")
    quiet: bool = _get_bool("FLIGHTGEN_QUIET")

    # QuestDB sink
    connection_string: str | None = os.getenv("FLIGHTGEN_CONNECTION_STRING")
    table_name: str | None = os.getenv("FLIGHTGEN_TABLE_NAME")
    sink_timeout: float = _get_float("FLIGHTGEN_SINK_TIMEOUT", 10.0)


settings = Settings()

__all__ = ["settings", "Settings"]
