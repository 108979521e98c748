from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, get_args

Category = Literal[
    "movies", "tv", "anime", "music", "games", "software", "books", "other"
]
SortKey = Literal["seeds", "leechers", "size_bytes", "uploaded_at", "health"]
SortOrder = Literal["asc", "desc"]

CATEGORIES: tuple[str, ...] = get_args(Category)
SORT_KEYS: tuple[str, ...] = get_args(SortKey)
SORT_ORDERS: tuple[str, ...] = get_args(SortOrder)

_INFO_HASH_RE = re.compile(r"urn:btih:([0-9a-fA-F]{40})")


@dataclass(frozen=True)
class CanonicalResult:
    """One torrent listing in the shape shared by every source."""

    title: str
    magnet_link: str  # "" when the source offered no valid magnet
    seeds: int
    leechers: int
    size_bytes: int
    uploaded_at: datetime  # tz-aware, UTC
    source: str  # adapter display name
    external_link: str = ""
    category: Category | None = None
    verified: bool = False

    # Row lacks a magnet link that a detail-page fetch can supply.
    needs_enrichment: bool = False

    @property
    def info_hash(self) -> str:
        """Lowercase BitTorrent info-hash from the magnet link, or ""."""
        match = _INFO_HASH_RE.search(self.magnet_link)
        return match.group(1).lower() if match else ""


@dataclass(frozen=True)
class AdapterResult:
    """Outcome of one adapter call for one query."""

    source_name: str
    results: list[CanonicalResult] = field(default_factory=list)
    success: bool = True
    error_message: str | None = None
    elapsed_ms: int = 0

    @property
    def result_count(self) -> int:
        return len(self.results)


@dataclass(frozen=True)
class SearchParams:
    query: str
    sources: list[str] = field(default_factory=list)  # explicit adapter names
    category: str | None = None  # None / "" / "all" = every enabled adapter
    sort_by: str = "seeds"
    sort_order: str = "desc"
    limit: int | None = None


@dataclass(frozen=True)
class SearchResponse:
    results: list[CanonicalResult]
    total_count: int  # deduplicated rows before truncation
    per_source_stats: list[AdapterResult]
    query: str
    cached: bool = False
    execution_time_ms: int = 0


class TorrifyError(Exception):
    """Base error for search domain/usecases."""


class InputError(TorrifyError):
    """Caller supplied an unusable query or parameter."""


class NoAdaptersAvailable(InputError):
    """Adapter selection matched nothing that is enabled."""


class PipelineError(TorrifyError):
    """Unexpected internal fault while assembling a response."""


class AdapterError(TorrifyError):
    """Base for failures raised inside an adapter before they become data."""


class AdapterTimeout(AdapterError):
    pass


class AdapterTransportError(AdapterError):
    """Network failure, HTTP error status or block page on every mirror."""


class AdapterParseError(AdapterError):
    """Response could not be parsed; rows read before the failure are kept."""

    def __init__(self, message: str, partial: list | None = None) -> None:
        super().__init__(message)
        self.partial = partial or []
