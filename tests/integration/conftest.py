"""Shared fixtures for integration tests.

These tests use real infrastructure components (SourceAdapter, HttpxFetcher,
AdapterRegistry, SearchOrchestrator, InMemoryResponseCache) with mocked
HTTP via respx.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest

from torrify.infrastructure.cache import InMemoryResponseCache


@pytest.fixture()
async def http_client() -> AsyncIterator[httpx.AsyncClient]:
    """Real httpx.AsyncClient for use with respx mocking."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
async def response_cache() -> AsyncIterator[InMemoryResponseCache]:
    async with InMemoryResponseCache(max_entries=50, ttl_seconds=60) as cache:
        yield cache


@pytest.fixture(autouse=True)
def _clean_torrify_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep TORRIFY_* and serverless markers from the host out of config tests."""
    import os

    for name in list(os.environ):
        if name.startswith("TORRIFY_") or name in ("VERCEL", "AWS_LAMBDA_FUNCTION_NAME"):
            monkeypatch.delenv(name, raising=False)
