"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from torrify.application.use_cases import ListAdaptersUseCase, TorrentSearchUseCase
from torrify.infrastructure.adapters import build_registry
from torrify.infrastructure.adapters.constants import DEFAULT_USER_AGENT
from torrify.infrastructure.cache import InMemoryResponseCache
from torrify.infrastructure.metrics import MetricsCollector
from torrify.infrastructure.search import SearchOrchestrator
from torrify.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. Metrics (recorded by orchestrator and use case)
        2. Response cache
        3. HTTP client (shared by every plain-HTTP adapter)
        4. Adapter registry (may own a headless browser)
        5. Orchestrator
        6. Use cases
    """
    state = cast(AppState, app.state)
    config = state.config
    search = config.search

    # 1) Metrics collector
    state.metrics = MetricsCollector()

    # 2) Response cache
    cache = InMemoryResponseCache(
        max_entries=config.cache_max_entries,
        ttl_seconds=config.cache_ttl_seconds,
    )
    await cache.__aenter__()
    state.cache = cache

    # 3) HTTP client
    state.http_client = httpx.AsyncClient(
        timeout=config.http_timeout_seconds,
        follow_redirects=config.http_follow_redirects,
        headers={"User-Agent": config.http_user_agent or DEFAULT_USER_AGENT},
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 4) Adapter registry
    state.adapters = build_registry(config, state.http_client)
    log.info(
        "adapters_initialized",
        total=len(state.adapters),
        enabled=[a.key for a in state.adapters.all_enabled()],
        browser_enabled=config.browser_enabled,
    )

    # 5) Orchestrator
    state.orchestrator = SearchOrchestrator(
        call_timeout=search.effective_timeout_seconds,
        max_concurrent=search.max_concurrent,
        batch_cooldown=search.batch_cooldown_seconds,
        enrich_timeout=search.enrich_timeout_seconds,
        enrich_max_concurrent=search.enrich_max_concurrent,
        metrics=state.metrics,
    )

    # 6) Use cases
    metrics = state.metrics
    state.search_uc = TorrentSearchUseCase(
        registry=state.adapters,
        orchestrator=state.orchestrator,
        cache=state.cache,
        default_limit=search.default_limit,
        max_limit=search.max_limit,
        per_adapter_limit=search.per_adapter_limit,
        max_concurrent=search.max_concurrent,
        request_deadline=search.request_deadline_seconds,
        enrich=search.enrich,
        on_complete=lambda response: metrics.record_search(cached=response.cached),
    )
    state.list_adapters_uc = ListAdaptersUseCase(registry=state.adapters)

    log.info(
        "app_startup_complete",
        serverless=search.serverless,
        call_timeout=search.effective_timeout_seconds,
    )

    try:
        yield
    finally:
        await state.adapters.cleanup()
        log.info("adapters_cleaned_up")

        await state.http_client.aclose()
        log.info("http_client_closed")

        await state.cache.aclose()
        log.info("cache_closed")

        log.info("app_shutdown_complete")
