"""Tests for MinIntervalRateLimiter."""

from __future__ import annotations

import asyncio

import pytest

from factories import FakeClock, RecordingSleep
from torrify.infrastructure.common.rate_limiter import MinIntervalRateLimiter


class TestMinIntervalRateLimiter:
    async def test_first_request_does_not_wait(
        self, clock: FakeClock, sleep: RecordingSleep
    ) -> None:
        limiter = MinIntervalRateLimiter(1.0, clock=clock, sleep=sleep)
        await limiter.acquire()
        assert sleep.calls == []

    async def test_second_request_waits_remaining_interval(
        self, clock: FakeClock, sleep: RecordingSleep
    ) -> None:
        limiter = MinIntervalRateLimiter(1.0, clock=clock, sleep=sleep)
        await limiter.acquire()
        clock.advance(0.25)
        await limiter.acquire()
        assert sleep.calls == [pytest.approx(0.75)]

    async def test_no_wait_after_interval_elapsed(
        self, clock: FakeClock, sleep: RecordingSleep
    ) -> None:
        limiter = MinIntervalRateLimiter(1.0, clock=clock, sleep=sleep)
        await limiter.acquire()
        clock.advance(2.0)
        await limiter.acquire()
        assert sleep.calls == []

    async def test_zero_interval_is_unlimited(
        self, clock: FakeClock, sleep: RecordingSleep
    ) -> None:
        limiter = MinIntervalRateLimiter(0, clock=clock, sleep=sleep)
        for _ in range(5):
            await limiter.acquire()
        assert sleep.calls == []

    async def test_concurrent_callers_are_spaced(
        self, clock: FakeClock, sleep: RecordingSleep
    ) -> None:
        limiter = MinIntervalRateLimiter(0.5, clock=clock, sleep=sleep)
        await asyncio.gather(*(limiter.acquire() for _ in range(4)))
        # Each caller after the first observes the previous timestamp.
        assert sleep.calls == [pytest.approx(0.5)] * 3
        assert clock.now == pytest.approx(1000.0 + 1.5)

    def test_negative_interval_clamped(self) -> None:
        assert MinIntervalRateLimiter(-1).interval == 0.0
