"""Rate-controlled generation and batching pipeline."""

from .batching import BatchBuffer
from .coordinator import PlaneAssignment, plan_fleet, run_fleet, split_row_budget
from .generator import RowGenerator
from .rate_limiter import RateLimiter
from .worker import PlaneWorker

__all__ = [
    "BatchBuffer",
    "PlaneAssignment",
    "PlaneWorker",
    "RateLimiter",
    "RowGenerator",
    "plan_fleet",
    "run_fleet",
    "split_row_budget",
]
