"""In-process response cache: bounded LRU with absolute expiry."""

from __future__ import annotations

import asyncio
import time
from collections import OrderedDict
from dataclasses import dataclass, replace
from typing import Any, Sequence

import structlog

from torrify.domain.entities.search import SearchResponse
from torrify.domain.ports.clock import Clock

log = structlog.get_logger(__name__)


def cache_key(query: str, sources: Sequence[str]) -> str:
    """Key for (query, source set): case/whitespace-insensitive, order-free."""
    return f"{query.strip().lower()}|{','.join(sorted(sources))}"


@dataclass(frozen=True)
class CacheEntry:
    payload: SearchResponse
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class InMemoryResponseCache:
    """Async LRU cache for SearchResponse payloads.

    - Capacity-bounded: inserting into a full cache evicts the least
      recently used entry.
    - Absolute expiry: ``expires_at`` is fixed at insert time; a hit
      refreshes LRU recency but never the lifetime.
    - Stored payloads carry ``cached=False``; hits return a copy with
      ``cached=True``.
    - One coarse ``asyncio.Lock`` guards every read-modify-write.

    Args:
        max_entries: Capacity (LRU bound).
        ttl_seconds: Default lifetime for ``set()`` without explicit TTL.
        clock: Monotonic clock (injectable for tests).
    """

    def __init__(
        self,
        max_entries: int = 1000,
        ttl_seconds: float = 900.0,
        *,
        clock: Clock = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.max_entries = max_entries
        self.default_ttl = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0

        log.info(
            "response_cache_init",
            max_entries=max_entries,
            default_ttl=ttl_seconds,
        )

    # --- Context Manager ---
    async def __aenter__(self) -> InMemoryResponseCache:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.clear()

    # --- ResponseCachePort implementation ---
    async def get(self, query: str, sources: Sequence[str]) -> SearchResponse | None:
        key = cache_key(query, sources)
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                log.debug("cache_get", key=key, hit=False)
                return None

            if entry.is_expired(self._clock()):
                del self._entries[key]
                self._misses += 1
                log.debug("cache_get", key=key, hit=False, expired=True)
                return None

            self._entries.move_to_end(key)
            self._hits += 1
            log.debug("cache_get", key=key, hit=True)
            return replace(entry.payload, cached=True)

    async def set(
        self,
        query: str,
        sources: Sequence[str],
        response: SearchResponse,
        *,
        ttl: float | None = None,
    ) -> None:
        key = cache_key(query, sources)
        lifetime = ttl if ttl is not None else self.default_ttl
        async with self._lock:
            now = self._clock()
            self._entries[key] = CacheEntry(
                payload=replace(response, cached=False),
                created_at=now,
                expires_at=now + lifetime,
            )
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                log.debug("cache_evict", key=evicted)
            log.debug("cache_set", key=key, ttl=lifetime, size=len(self._entries))

    async def delete(self, query: str, sources: Sequence[str]) -> bool:
        key = cache_key(query, sources)
        async with self._lock:
            deleted = self._entries.pop(key, None) is not None
            log.debug("cache_delete", key=key, deleted=deleted)
            return deleted

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            log.info("cache_cleared")

    async def cleanup(self) -> int:
        """Purge expired entries."""
        async with self._lock:
            now = self._clock()
            expired = [k for k, e in self._entries.items() if e.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            log.info("cache_cleanup", removed=len(expired))
        return len(expired)

    async def keys(self) -> list[str]:
        """Keys from least to most recently used."""
        async with self._lock:
            return list(self._entries.keys())

    async def stats(self) -> dict[str, Any]:
        async with self._lock:
            lookups = self._hits + self._misses
            return {
                "size": len(self._entries),
                "max_entries": self.max_entries,
                "ttl_seconds": self.default_ttl,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / lookups, 4) if lookups else 0.0,
            }
