"""Cache Port - Interface for the search response cache."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from torrify.domain.entities.search import SearchResponse


class ResponseCachePort(Protocol):
    """Port for an async response cache keyed by (query, source set).

    Implementations:
      - InMemoryResponseCache (bounded LRU, absolute expiry)

    Each adapter MUST support async context-manager semantics:
        async with cache:
            await cache.set(query, sources, response)
    """

    async def get(self, query: str, sources: Sequence[str]) -> SearchResponse | None:
        """Return a copy with cached=True, or None when absent / expired."""
        ...

    async def set(
        self,
        query: str,
        sources: Sequence[str],
        response: SearchResponse,
        *,
        ttl: float | None = None,
    ) -> None:
        """Store response (cached=False) with optional TTL (seconds)."""
        ...

    async def delete(self, query: str, sources: Sequence[str]) -> bool:
        """Delete entry. True = deleted, False = did not exist."""
        ...

    async def clear(self) -> None:
        """Drop ALL entries (e.g. for admin endpoint)."""
        ...

    async def cleanup(self) -> int:
        """Purge expired entries, return how many were removed."""
        ...

    async def stats(self) -> dict[str, Any]: ...

    async def aclose(self) -> None: ...

    async def __aenter__(self) -> ResponseCachePort: ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None: ...
