"""Shared test fixtures for the Torrify test suite."""

from __future__ import annotations

import pytest

from factories import FakeClock, RecordingSleep, make_result


@pytest.fixture()
def clock() -> FakeClock:
    """Monotonic clock that only moves when a test advances it."""
    return FakeClock()


@pytest.fixture()
def sleep(clock: FakeClock) -> RecordingSleep:
    """Sleep that advances ``clock`` instead of waiting."""
    return RecordingSleep(clock)


@pytest.fixture()
def result_factory():
    return make_result
