"""Domain models and protocols for source adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from torrify.domain.entities.search import AdapterResult, CanonicalResult


@dataclass
class ScrapedRow:
    """
    Loosely typed row as an adapter pulled it out of HTML or JSON.

    Every field is still in the source's own spelling (sizes like "1.4 GiB",
    dates like "Y-day 14:02"); the normalizer is the only place that turns
    these into a CanonicalResult.
    """

    title: str | None
    magnet: str | None = None
    seeds: Any = None
    leechers: Any = None
    size: Any = None
    uploaded: Any = None
    link: str | None = None
    category: str | None = None
    verified: bool = False
    needs_enrichment: bool = False


@dataclass(frozen=True)
class AdapterSettings:
    """Static per-adapter configuration, fixed at startup."""

    key: str
    display_name: str
    base_url: str
    enabled: bool = True
    mirrors: tuple[str, ...] = ()
    category_affinity: tuple[str, ...] = ()
    timeout_ms: int = 15_000
    rate_limit_ms: int = 1_000
    browser_capable: bool = False
    # Reject a mirror whose rows never mention the query (parked or hijacked domains).
    check_relevance: bool = True

    @property
    def urls(self) -> list[str]:
        """Primary base URL followed by mirrors, without duplicates."""
        seen: list[str] = []
        for url in (self.base_url, *self.mirrors):
            url = url.rstrip("/")
            if url and url not in seen:
                seen.append(url)
        return seen


@dataclass(frozen=True)
class AdapterInfo:
    key: str
    name: str
    enabled: bool
    categories: list[str] = field(default_factory=list)
    base_url: str = ""
    mirrors: list[str] = field(default_factory=list)
    timeout_ms: int = 0
    rate_limit_ms: int = 0
    fetcher: str = "http"


@runtime_checkable
class AdapterProtocol(Protocol):
    """
    Uniform contract every source adapter satisfies.

    `search` never raises for source-side problems: timeouts, exhausted
    mirrors and parse failures come back as AdapterResult(success=False).
    """

    settings: AdapterSettings

    @property
    def key(self) -> str: ...

    @property
    def name(self) -> str: ...

    async def search(self, query: str, limit: int) -> AdapterResult: ...


@runtime_checkable
class EnrichingAdapterProtocol(AdapterProtocol, Protocol):
    """Adapter whose listing rows need a detail-page fetch for the magnet."""

    async def enrich(self, result: CanonicalResult) -> CanonicalResult: ...
