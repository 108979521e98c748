"""Aggregated torrent search: cache, fan-out, enrichment, dedupe, ranking."""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Callable

import structlog

from torrify.domain.adapters.base import AdapterProtocol
from torrify.domain.entities import (
    CATEGORIES,
    InputError,
    NoAdaptersAvailable,
    PipelineError,
    SearchParams,
    SearchResponse,
    TorrifyError,
)
from torrify.domain.ports import (
    AdapterRegistryPort,
    Clock,
    ResponseCachePort,
    SearchOrchestratorPort,
)
from torrify.domain.query import clean_query, validate_query
from torrify.domain.ranking import dedupe, rank, resolve_sort_key, resolve_sort_order

log = structlog.get_logger(__name__)


class TorrentSearchUseCase:
    """Answers one search request from cache or by querying the adapters.

    Flow:
        1. Validate query, limit, sort and category
        2. Select adapters (explicit names, else category affinity)
        3. Cache lookup keyed by (query, selected adapter names)
        4. Miss: fan out, enrich, dedupe, store the full result set
        5. Rank and truncate the (cached or fresh) set for this request

    A run in which every adapter failed is a valid, empty response; only
    input problems and unexpected internal faults raise.
    """

    def __init__(
        self,
        registry: AdapterRegistryPort,
        orchestrator: SearchOrchestratorPort,
        cache: ResponseCachePort | None = None,
        *,
        default_limit: int = 50,
        max_limit: int = 100,
        per_adapter_limit: int = 100,
        max_concurrent: int = 4,
        request_deadline: float | None = 45.0,
        enrich: bool = True,
        clock: Clock = time.monotonic,
        on_complete: Callable[[SearchResponse], None] | None = None,
    ) -> None:
        self._registry = registry
        self._orchestrator = orchestrator
        self._cache = cache
        self._default_limit = default_limit
        self._max_limit = max_limit
        self._per_adapter_limit = per_adapter_limit
        self._max_concurrent = max_concurrent
        self._request_deadline = request_deadline
        self._enrich = enrich
        self._clock = clock
        self._on_complete = on_complete

    async def execute(self, params: SearchParams) -> SearchResponse:
        """Run one search.

        Raises:
            InputError: Bad query/parameters or no adapter selected.
            PipelineError: Unexpected internal fault.
        """
        started = time.perf_counter()

        query = clean_query(validate_query(params.query))
        if not query:
            raise InputError("Query contains no searchable characters")
        limit = self._resolve_limit(params.limit)
        sort_by = resolve_sort_key(params.sort_by)
        sort_order = resolve_sort_order(params.sort_order)
        adapters = self._select_adapters(params)
        source_names = [a.name for a in adapters]

        try:
            full = await self._cache_read(query, source_names)
            if full is None:
                full = await self._search(query, adapters)
                await self._cache_write(query, source_names, full)

            response = replace(
                full,
                results=rank(full.results, sort_by, sort_order, limit),
                execution_time_ms=int((time.perf_counter() - started) * 1000),
            )
        except TorrifyError:
            raise
        except Exception as exc:
            log.exception("search_pipeline_error", query=query)
            raise PipelineError(f"search failed: {exc}") from exc

        log.info(
            "search_done",
            query=query,
            adapters=source_names,
            total=response.total_count,
            returned=len(response.results),
            cached=response.cached,
            execution_time_ms=response.execution_time_ms,
        )
        if self._on_complete is not None:
            self._on_complete(response)
        return response

    # ------------------------------------------------------------------
    # Validation / selection
    # ------------------------------------------------------------------

    def _resolve_limit(self, limit: int | None) -> int:
        if limit is None:
            return self._default_limit
        if not 1 <= limit <= self._max_limit:
            raise InputError(f"limit must be between 1 and {self._max_limit}")
        return limit

    def _select_adapters(self, params: SearchParams) -> list[AdapterProtocol]:
        names = [n for n in params.sources if n and n.strip()]
        if names:
            adapters = self._registry.by_names(names)
            if not adapters:
                raise NoAdaptersAvailable(
                    f"No enabled adapter matches sources={','.join(names)!r}"
                )
            return adapters

        category = (params.category or "").strip().lower()
        if category and category != "all" and category not in CATEGORIES:
            raise InputError(f"Unsupported category: {params.category!r}")

        adapters = self._registry.by_category(category or None)
        if not adapters:
            raise NoAdaptersAvailable(
                f"No enabled adapter serves category {category or 'all'!r}"
            )
        return adapters

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def _search(
        self, query: str, adapters: list[AdapterProtocol]
    ) -> SearchResponse:
        """Fan out and merge. Returns the full, deduplicated, unranked set."""
        deadline = (
            self._clock() + self._request_deadline
            if self._request_deadline is not None
            else None
        )
        adapter_results = await self._orchestrator.run(
            query,
            adapters,
            self._per_adapter_limit,
            self._max_concurrent,
            deadline=deadline,
        )
        if self._enrich:
            adapter_results = await self._orchestrator.enrich(
                adapter_results, adapters, deadline=deadline
            )

        # Partial rows from failed adapters are kept.
        merged = [row for result in adapter_results for row in result.results]
        unique = dedupe(merged)

        failed = [r.source_name for r in adapter_results if not r.success]
        if failed:
            log.info(
                "search_partial_failure",
                query=query,
                failed=failed,
                succeeded=len(adapter_results) - len(failed),
            )

        return SearchResponse(
            results=unique,
            total_count=len(unique),
            per_source_stats=list(adapter_results),
            query=query,
            cached=False,
        )

    async def _cache_read(
        self, query: str, sources: list[str]
    ) -> SearchResponse | None:
        """Try to read a cached response. Returns None on miss or error."""
        if self._cache is None:
            return None
        try:
            cached = await self._cache.get(query, sources)
        except Exception:
            log.warning("search_cache_read_error", query=query, exc_info=True)
            return None
        if cached is not None:
            log.info(
                "search_cache_hit",
                query=query,
                sources=sources,
                result_count=cached.total_count,
            )
        return cached

    async def _cache_write(
        self, query: str, sources: list[str], response: SearchResponse
    ) -> None:
        """Store the full response. Errors are logged, never raised."""
        if self._cache is None:
            return
        try:
            await self._cache.set(query, sources, response)
        except Exception:
            log.warning("search_cache_store_error", query=query, exc_info=True)
