"""Tests for the batched search orchestrator."""

from __future__ import annotations

import asyncio
from dataclasses import replace

from factories import HASH_A, HASH_B, FakeAdapter, FakeClock, RecordingSleep, make_result
from torrify.domain.entities import AdapterResult, CanonicalResult
from torrify.infrastructure.metrics import MetricsCollector
from torrify.infrastructure.search.orchestrator import (
    NOT_ATTEMPTED_MESSAGE,
    TIMEOUT_MESSAGE,
    SearchOrchestrator,
)


class _EnrichingAdapter(FakeAdapter):
    """FakeAdapter that fills magnets from a lookup table."""

    def __init__(self, name: str, magnets: dict[str, str], **kwargs) -> None:
        super().__init__(name, **kwargs)
        self._magnets = magnets
        self.enriched: list[str] = []

    async def enrich(self, result: CanonicalResult) -> CanonicalResult:
        self.enriched.append(result.title)
        magnet = self._magnets.get(result.title)
        if magnet == "slow":
            await asyncio.sleep(1)
        if magnet == "boom":
            raise RuntimeError("detail page exploded")
        return replace(result, magnet_link=magnet or "", needs_enrichment=False)


def _orchestrator(**kwargs) -> SearchOrchestrator:
    defaults = {"call_timeout": 1.0, "max_concurrent": 4, "batch_cooldown": 0.0}
    defaults.update(kwargs)
    return SearchOrchestrator(**defaults)


class TestRun:
    async def test_one_result_per_adapter_in_order(self) -> None:
        adapters = [
            FakeAdapter("Slow", [make_result("s", HASH_A)], delay=0.05),
            FakeAdapter("Fast", [make_result("f", HASH_B)]),
        ]
        results = await _orchestrator().run("ubuntu", adapters, 10)
        assert [r.source_name for r in results] == ["Slow", "Fast"]
        assert all(r.success for r in results)

    async def test_passes_query_and_limit(self) -> None:
        adapter = FakeAdapter("YTS")
        await _orchestrator().run("ubuntu", [adapter], 25)
        assert adapter.calls == [("ubuntu", 25)]

    async def test_timeout_becomes_failed_result(self) -> None:
        adapters = [
            FakeAdapter("Hang", delay=5),
            FakeAdapter("Ok", [make_result()]),
        ]
        results = await _orchestrator(call_timeout=0.05).run("ubuntu", adapters, 10)

        assert results[0].success is False
        assert results[0].error_message == TIMEOUT_MESSAGE
        assert results[0].results == []
        assert results[1].success is True

    async def test_exception_becomes_failed_result(self) -> None:
        adapters = [FakeAdapter("Crash", error=RuntimeError("kaput"))]
        results = await _orchestrator().run("ubuntu", adapters, 10)
        assert results[0].success is False
        assert "kaput" in (results[0].error_message or "")

    async def test_empty_adapter_list(self) -> None:
        assert await _orchestrator().run("ubuntu", [], 10) == []

    async def test_batches_respect_max_concurrent(self) -> None:
        running = 0
        peak = 0

        class _Probe(FakeAdapter):
            async def search(self, query: str, limit: int) -> AdapterResult:
                nonlocal running, peak
                running += 1
                peak = max(peak, running)
                await asyncio.sleep(0.01)
                running -= 1
                return AdapterResult(source_name=self.name)

        adapters = [_Probe(f"A{i}") for i in range(5)]
        results = await _orchestrator(max_concurrent=2).run("ubuntu", adapters, 10)
        assert peak == 2
        assert [r.source_name for r in results] == [f"A{i}" for i in range(5)]

    async def test_cooldown_between_batches(
        self, clock: FakeClock, sleep: RecordingSleep
    ) -> None:
        orch = _orchestrator(
            max_concurrent=1, batch_cooldown=0.5, clock=clock, sleep=sleep
        )
        await orch.run("ubuntu", [FakeAdapter(f"A{i}") for i in range(3)], 10)
        assert sleep.calls == [0.5, 0.5]

    async def test_deadline_marks_remaining_not_attempted(
        self, clock: FakeClock, sleep: RecordingSleep
    ) -> None:
        orch = _orchestrator(
            max_concurrent=1, batch_cooldown=2.0, clock=clock, sleep=sleep
        )
        adapters = [FakeAdapter(f"A{i}") for i in range(3)]
        results = await orch.run("ubuntu", adapters, 10, deadline=clock() + 1.0)

        assert [r.source_name for r in results] == ["A0", "A1", "A2"]
        assert results[0].success is True
        assert [r.error_message for r in results[1:]] == [NOT_ATTEMPTED_MESSAGE] * 2
        assert adapters[1].calls == []
        # Cooldown never sleeps past the deadline.
        assert sleep.calls == [1.0]

    async def test_records_metrics(self) -> None:
        metrics = MetricsCollector()
        adapters = [
            FakeAdapter("Ok", [make_result()], key="ok"),
            FakeAdapter("Hang", key="hang", delay=5),
        ]
        await _orchestrator(call_timeout=0.05, metrics=metrics).run(
            "ubuntu", adapters, 10
        )
        snap = metrics.snapshot()["adapters"]
        assert snap["ok"]["successes"] == 1
        assert snap["hang"]["timeouts"] == 1


class TestEnrich:
    async def test_fills_missing_magnets(self) -> None:
        adapter = _EnrichingAdapter("RARBG", {"a": "magnet:?xt=urn:btih:" + "e" * 40})
        rows = [
            make_result("a", None, needs_enrichment=True),
            make_result("b", HASH_B),
        ]
        before = [AdapterResult(source_name="RARBG", results=rows)]

        after = await _orchestrator().enrich(before, [adapter])

        assert after[0].results[0].magnet_link.endswith("e" * 40)
        assert after[0].results[0].needs_enrichment is False
        assert after[0].results[1] == rows[1]
        assert adapter.enriched == ["a"]

    async def test_failures_keep_row_with_empty_magnet(self) -> None:
        adapter = _EnrichingAdapter("RARBG", {"slow": "slow", "boom": "boom"})
        rows = [
            make_result("slow", None, needs_enrichment=True),
            make_result("boom", None, needs_enrichment=True),
        ]
        after = await _orchestrator(enrich_timeout=0.05).enrich(
            [AdapterResult(source_name="RARBG", results=rows)], [adapter]
        )
        assert [r.title for r in after[0].results] == ["slow", "boom"]
        assert all(r.magnet_link == "" for r in after[0].results)
        assert not any(r.needs_enrichment for r in after[0].results)

    async def test_non_enriching_adapter_untouched(self) -> None:
        plain = FakeAdapter("YTS")
        before = [
            AdapterResult(
                source_name="YTS",
                results=[make_result("x", None, needs_enrichment=True)],
            )
        ]
        after = await _orchestrator().enrich(before, [plain])
        assert after == before

    async def test_stats_preserved(self) -> None:
        adapter = _EnrichingAdapter("RARBG", {})
        before = [
            AdapterResult(
                source_name="RARBG",
                results=[make_result("x", None, needs_enrichment=True)],
                success=False,
                error_message="parse error",
                elapsed_ms=42,
            )
        ]
        after = await _orchestrator().enrich(before, [adapter])
        assert after[0].success is False
        assert after[0].error_message == "parse error"
        assert after[0].elapsed_ms == 42

    async def test_passed_deadline_skips_detail_fetches(self, clock: FakeClock) -> None:
        adapter = _EnrichingAdapter("RARBG", {"a": "magnet:?xt=urn:btih:" + "e" * 40})
        rows = [make_result("a", None, needs_enrichment=True)]

        after = await _orchestrator(clock=clock).enrich(
            [AdapterResult(source_name="RARBG", results=rows)],
            [adapter],
            deadline=clock.now - 1,
        )

        assert adapter.enriched == []
        assert after[0].results[0].magnet_link == ""
        assert after[0].results[0].needs_enrichment is False

    async def test_deadline_bounds_the_whole_stage(self) -> None:
        titles = [f"row {i}" for i in range(20)]
        adapter = _EnrichingAdapter("RARBG", {t: "slow" for t in titles})
        rows = [make_result(t, None, needs_enrichment=True) for t in titles]
        loop = asyncio.get_running_loop()
        started = loop.time()

        after = await _orchestrator(
            enrich_max_concurrent=1, clock=loop.time
        ).enrich(
            [AdapterResult(source_name="RARBG", results=rows)],
            [adapter],
            deadline=started + 0.3,
        )

        assert loop.time() - started < 1.5
        assert [r.title for r in after[0].results] == titles
        assert all(r.magnet_link == "" for r in after[0].results)
        assert not any(r.needs_enrichment for r in after[0].results)
        assert len(adapter.enriched) < len(titles)
