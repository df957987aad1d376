"""Fixed-interval pacing for a single plane's rows."""

from __future__ import annotations

import asyncio
import math
import time
from typing import Awaitable, Callable

from flightgen.errors import ConfigurationError


class RateLimiter:
    """Hand out one permit every ``1 / rate`` seconds.

    The limiter keeps an absolute next-due instant and advances it by the
    interval on each permit, so scheduling jitter does not accumulate. A caller
    that shows up after the due instant gets its permit immediately and the
    schedule restarts from that moment; missed permits are not replayed.
    """

    def __init__(
        self,
        rate_per_second: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if not math.isfinite(rate_per_second) or rate_per_second <= 0:
            raise ConfigurationError(
                f"Rate per plane must be a positive number, got {rate_per_second}"
            )
        self.rate_per_second = rate_per_second
        self.interval = 1.0 / rate_per_second
        self._clock = clock
        self._sleep = sleep
        self._next_due: float | None = None

    @property
    def next_due(self) -> float | None:
        return self._next_due

    async def wait(self) -> None:
        """Suspend until the next emission instant."""

        now = self._clock()
        if self._next_due is None or now >= self._next_due:
            self._next_due = now
        else:
            await self._sleep(self._next_due - now)
        self._next_due += self.interval


__all__ = ["RateLimiter"]
