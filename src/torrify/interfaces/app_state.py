"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
from starlette.datastructures import State

from torrify.infrastructure.config import AppConfig

if TYPE_CHECKING:
    from torrify.application.use_cases import (
        ListAdaptersUseCase,
        TorrentSearchUseCase,
    )
    from torrify.infrastructure.adapters import AdapterRegistry
    from torrify.infrastructure.cache import InMemoryResponseCache
    from torrify.infrastructure.metrics import MetricsCollector
    from torrify.infrastructure.search import SearchOrchestrator


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    cache: InMemoryResponseCache
    http_client: httpx.AsyncClient
    adapters: AdapterRegistry
    orchestrator: SearchOrchestrator

    # Metrics (zero-impact in-memory counters)
    metrics: MetricsCollector

    # Application Services
    search_uc: TorrentSearchUseCase
    list_adapters_uc: ListAdaptersUseCase
