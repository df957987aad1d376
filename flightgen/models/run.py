"""Run configuration and completion reporting models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from flightgen.domain.plane_ids import is_valid_identifier
from flightgen.errors import ConfigurationError, RunFailed


class RunConfiguration(BaseModel):
    """Immutable parameters for one generator run, shared by every plane."""

    connection_string: str = Field(
        default="", description="Sink connection string (unused by in-memory sinks)"
    )
    total_rows: int = Field(..., gt=0, description="Rows to emit across the fleet")
    rate_per_plane: float = Field(
        ..., gt=0, allow_inf_nan=False, description="Target rows per second per plane"
    )
    plane_count: int = Field(..., gt=0, description="Number of simulated planes")
    table_name: str = Field(..., min_length=1, description="Destination table")
    starting_plane_id: str = Field(
        default="AA00", description="Identifier assigned to the first plane"
    )
    batch_size: int = Field(default=1000, gt=0, description="Rows per flushed batch")
    quiet: bool = Field(default=False, description="Suppress progress output")
    progress_every: int = Field(
        default=1000, ge=0, description="Log progress every N rows per plane (0 disables)"
    )

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("table_name")
    @classmethod
    def _table_name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("table name must not be blank")
        return value

    @field_validator("starting_plane_id")
    @classmethod
    def _valid_plane_id(cls, value: str) -> str:
        if not is_valid_identifier(value):
            raise ValueError(
                "must be two letters A-Z followed by two digits (e.g. AA00)"
            )
        return value

    @classmethod
    def from_options(cls, **options: Any) -> "RunConfiguration":
        """Build a configuration, reporting every invalid option at once.

        Options passed as ``None`` fall back to the model defaults.
        """

        cleaned = {key: value for key, value in options.items() if value is not None}
        try:
            return cls(**cleaned)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc']) or 'config'}: {error['msg']}"
                for error in exc.errors()
            )
            raise ConfigurationError(f"Invalid run configuration: {problems}") from exc


class WorkerState(str, Enum):
    """Lifecycle states of a plane worker."""

    INITIALIZING = "INITIALIZING"
    GENERATING = "GENERATING"
    FLUSHING = "FLUSHING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def terminal(self) -> bool:
        return self in {WorkerState.COMPLETED, WorkerState.FAILED, WorkerState.CANCELLED}


class RunStatus(str, Enum):
    """Overall outcome of a fleet run."""

    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


class PlaneReport(BaseModel):
    """Progress of a single plane, updated only by its own worker."""

    plane_id: str = Field(..., description="Plane identifier")
    row_budget: int = Field(..., ge=0, description="Rows this plane must emit")
    rows_generated: int = Field(default=0, description="Rows synthesized so far")
    rows_flushed: int = Field(default=0, description="Rows accepted by the sink")
    batches_flushed: int = Field(default=0, description="Batches accepted by the sink")
    state: WorkerState = Field(default=WorkerState.INITIALIZING)
    error: Optional[str] = Field(default=None, description="Failure message, if any")


class RunReport(BaseModel):
    """Result of a fleet run handed back to the caller."""

    status: RunStatus
    total_rows_requested: int
    total_rows_emitted: int = Field(..., description="Rows accepted by the sink")
    elapsed_seconds: float
    planes: list[PlaneReport] = Field(default_factory=list)

    @property
    def failed_planes(self) -> list[PlaneReport]:
        return [plane for plane in self.planes if plane.state is WorkerState.FAILED]

    @property
    def rows_per_second(self) -> float:
        if self.elapsed_seconds <= 0:
            return 0.0
        return self.total_rows_emitted / self.elapsed_seconds

    def raise_for_status(self) -> None:
        """Raise ``RunFailed`` if any plane failed."""

        if self.status is not RunStatus.FAILED:
            return
        details = ", ".join(
            f"{plane.plane_id}: {plane.error}" for plane in self.failed_planes
        )
        raise RunFailed(
            f"Run failed after {self.total_rows_emitted} rows flushed ({details})",
            report=self,
        )


__all__ = ["PlaneReport", "RunConfiguration", "RunReport", "RunStatus", "WorkerState"]
