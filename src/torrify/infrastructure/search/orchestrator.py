"""Batched fan-out over adapters with per-call timeout and failure isolation."""

from __future__ import annotations

import asyncio
import time
from dataclasses import replace
from typing import Sequence

import structlog

from torrify.domain.adapters.base import AdapterProtocol, EnrichingAdapterProtocol
from torrify.domain.entities.search import AdapterResult, CanonicalResult
from torrify.domain.ports.clock import Clock, Sleeper
from torrify.infrastructure.metrics import MetricsCollector

log = structlog.get_logger(__name__)

TIMEOUT_MESSAGE = "timeout"
NOT_ATTEMPTED_MESSAGE = "not attempted"


class SearchOrchestrator:
    """Runs adapters in sequential batches of ``max_concurrent``.

    Guarantees exactly one AdapterResult per adapter, in input order, no
    matter how individual adapters behave. A call that exceeds the per-call
    timeout is cancelled (``asyncio.wait_for``) and reported as
    ``"timeout"``; adapters skipped because the global deadline passed are
    reported as ``"not attempted"``.

    Args:
        call_timeout: Per-adapter budget in seconds.
        max_concurrent: Default batch size.
        batch_cooldown: Pause between batches in seconds.
        enrich_timeout: Per-row budget for detail-page enrichment.
        enrich_max_concurrent: Parallel detail-page fetches.
        clock: Monotonic clock for deadlines (injectable for tests).
        sleep: Awaitable sleep for cooldowns (injectable for tests).
    """

    def __init__(
        self,
        *,
        call_timeout: float = 15.0,
        max_concurrent: int = 4,
        batch_cooldown: float = 1.0,
        enrich_timeout: float = 10.0,
        enrich_max_concurrent: int = 5,
        metrics: MetricsCollector | None = None,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._call_timeout = call_timeout
        self._max_concurrent = max(1, max_concurrent)
        self._batch_cooldown = max(0.0, batch_cooldown)
        self._enrich_timeout = enrich_timeout
        self._enrich_max_concurrent = max(1, enrich_max_concurrent)
        self._metrics = metrics
        self._clock = clock
        self._sleep = sleep

    # ------------------------------------------------------------------
    # Primary fan-out
    # ------------------------------------------------------------------

    async def run(
        self,
        query: str,
        adapters: Sequence[AdapterProtocol],
        per_call_limit: int,
        max_concurrent: int | None = None,
        *,
        deadline: float | None = None,
    ) -> list[AdapterResult]:
        """Search every adapter and return one result per adapter.

        Args:
            deadline: Absolute time on ``clock`` after which no further
                batch is launched.
        """
        batch_size = max(1, max_concurrent or self._max_concurrent)
        batches = [
            list(adapters[i : i + batch_size])
            for i in range(0, len(adapters), batch_size)
        ]

        results: list[AdapterResult] = []
        for index, batch in enumerate(batches):
            if index > 0:
                await self._cooldown(deadline)

            remaining = self._remaining(deadline)
            if remaining is not None and remaining <= 0:
                skipped = [a for b in batches[index:] for a in b]
                log.warning(
                    "search_deadline_exceeded",
                    query=query,
                    skipped=[a.key for a in skipped],
                )
                results.extend(
                    AdapterResult(
                        source_name=a.name,
                        success=False,
                        error_message=NOT_ATTEMPTED_MESSAGE,
                    )
                    for a in skipped
                )
                break

            timeout = self._call_timeout
            if remaining is not None:
                timeout = min(timeout, remaining)

            log.debug(
                "search_batch_start",
                query=query,
                batch=index,
                adapters=[a.key for a in batch],
            )
            # gather() returns results in submission order
            results.extend(
                await asyncio.gather(
                    *(self._call(a, query, per_call_limit, timeout) for a in batch)
                )
            )

        return results

    async def _call(
        self,
        adapter: AdapterProtocol,
        query: str,
        limit: int,
        timeout: float,
    ) -> AdapterResult:
        started = time.perf_counter()
        timed_out = False
        try:
            result = await asyncio.wait_for(adapter.search(query, limit), timeout=timeout)
        except TimeoutError:
            timed_out = True
            log.warning("adapter_timeout", adapter=adapter.key, timeout=timeout)
            result = AdapterResult(
                source_name=adapter.name,
                success=False,
                error_message=TIMEOUT_MESSAGE,
                elapsed_ms=int((time.perf_counter() - started) * 1000),
            )
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            log.exception("adapter_crashed", adapter=adapter.key)
            result = AdapterResult(
                source_name=adapter.name,
                success=False,
                error_message=f"unexpected error: {exc}",
                elapsed_ms=int((time.perf_counter() - started) * 1000),
            )

        if self._metrics is not None:
            self._metrics.record_adapter_search(
                adapter.key,
                result.elapsed_ms,
                result.result_count,
                success=result.success,
                timed_out=timed_out,
            )
        return result

    def _remaining(self, deadline: float | None) -> float | None:
        if deadline is None:
            return None
        return deadline - self._clock()

    async def _cooldown(self, deadline: float | None) -> None:
        pause = self._batch_cooldown
        remaining = self._remaining(deadline)
        if remaining is not None:
            pause = min(pause, remaining)
        if pause > 0:
            await self._sleep(pause)

    # ------------------------------------------------------------------
    # Second stage: detail-page enrichment
    # ------------------------------------------------------------------

    async def enrich(
        self,
        adapter_results: Sequence[AdapterResult],
        adapters: Sequence[AdapterProtocol],
        *,
        deadline: float | None = None,
    ) -> list[AdapterResult]:
        """Fill in missing magnets for rows flagged ``needs_enrichment``.

        Rows whose detail fetch fails or times out are kept with an empty
        magnet link, as are rows still waiting when ``deadline`` (absolute
        time on ``clock``) passes. Adapter results keep their order and
        statistics.
        """
        by_name = {a.name: a for a in adapters}
        semaphore = asyncio.Semaphore(self._enrich_max_concurrent)

        async def _enrich_one(
            adapter: EnrichingAdapterProtocol, row: CanonicalResult
        ) -> CanonicalResult:
            async with semaphore:
                timeout = self._enrich_timeout
                remaining = self._remaining(deadline)
                if remaining is not None:
                    if remaining <= 0:
                        log.debug(
                            "adapter_enrich_skipped",
                            adapter=adapter.key,
                            url=row.external_link,
                        )
                        return replace(row, needs_enrichment=False)
                    timeout = min(timeout, remaining)
                try:
                    return await asyncio.wait_for(adapter.enrich(row), timeout=timeout)
                except TimeoutError:
                    log.warning(
                        "adapter_enrich_timeout",
                        adapter=adapter.key,
                        url=row.external_link,
                    )
                except asyncio.CancelledError:
                    raise
                except Exception:  # noqa: BLE001
                    log.warning(
                        "adapter_enrich_crashed",
                        adapter=adapter.key,
                        url=row.external_link,
                        exc_info=True,
                    )
                return replace(row, needs_enrichment=False)

        async def _enrich_result(result: AdapterResult) -> AdapterResult:
            adapter = by_name.get(result.source_name)
            if not isinstance(adapter, EnrichingAdapterProtocol) or not any(
                r.needs_enrichment for r in result.results
            ):
                return result

            rows = await asyncio.gather(
                *(
                    _enrich_one(adapter, row) if row.needs_enrichment else _same(row)
                    for row in result.results
                )
            )
            log.debug(
                "adapter_enriched",
                adapter=adapter.key,
                rows=len(rows),
                with_magnet=sum(1 for r in rows if r.magnet_link),
            )
            return replace(result, results=list(rows))

        return list(await asyncio.gather(*(_enrich_result(r) for r in adapter_results)))


async def _same(row: CanonicalResult) -> CanonicalResult:
    return row
