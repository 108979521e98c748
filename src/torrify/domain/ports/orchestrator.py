"""Port for fanning one query out to many adapters."""

from __future__ import annotations

from typing import Protocol, Sequence

from torrify.domain.adapters.base import AdapterProtocol
from torrify.domain.entities.search import AdapterResult


class SearchOrchestratorPort(Protocol):
    async def run(
        self,
        query: str,
        adapters: Sequence[AdapterProtocol],
        per_call_limit: int,
        max_concurrent: int | None = None,
        *,
        deadline: float | None = None,
    ) -> list[AdapterResult]:
        """One AdapterResult per adapter, in input order."""
        ...

    async def enrich(
        self,
        adapter_results: Sequence[AdapterResult],
        adapters: Sequence[AdapterProtocol],
        *,
        deadline: float | None = None,
    ) -> list[AdapterResult]:
        """Backfill magnets; rows left when ``deadline`` passes keep none."""
        ...
