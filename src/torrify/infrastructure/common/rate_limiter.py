"""Minimum-interval rate limiter for one adapter's outgoing requests."""

from __future__ import annotations

import asyncio
import time

import structlog

from torrify.domain.ports.clock import Clock, Sleeper

log = structlog.get_logger(__name__)


class MinIntervalRateLimiter:
    """Spaces consecutive requests by at least *interval* seconds.

    The check-and-update of the last-request timestamp happens under one
    lock, so concurrent callers (mirror attempts, enrichment fetches) queue
    behind each other instead of all observing the same stale timestamp.

    Args:
        interval: Minimum seconds between two requests. 0 = unlimited.
        clock: Monotonic clock (injectable for tests).
        sleep: Awaitable sleep (injectable for tests).
    """

    def __init__(
        self,
        interval: float,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
        name: str = "",
    ) -> None:
        self._interval = max(0.0, interval)
        self._clock = clock
        self._sleep = sleep
        self._name = name
        self._last_request: float | None = None
        self._lock = asyncio.Lock()

    @property
    def interval(self) -> float:
        return self._interval

    async def acquire(self) -> None:
        """Wait until the interval since the previous request has elapsed."""
        if self._interval <= 0:
            return  # unlimited

        async with self._lock:
            if self._last_request is not None:
                wait = self._interval - (self._clock() - self._last_request)
                if wait > 0:
                    log.debug(
                        "rate_limit_wait", adapter=self._name, wait_s=round(wait, 3)
                    )
                    await self._sleep(wait)
            self._last_request = self._clock()
