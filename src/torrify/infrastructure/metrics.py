"""Zero-impact in-memory search metrics.

All counters are plain Python integers manipulated inside the single-threaded
async event loop: no locks, no I/O, no external dependencies.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class AdapterStats:
    """Accumulated statistics for a single adapter."""

    searches: int = 0
    successes: int = 0
    failures: int = 0
    timeouts: int = 0
    total_results: int = 0
    total_duration_ms: int = 0

    def snapshot(self) -> dict[str, object]:
        """Return a JSON-serializable summary."""
        avg_ms = round(self.total_duration_ms / self.searches, 1) if self.searches else 0.0
        return {
            "searches": self.searches,
            "successes": self.successes,
            "failures": self.failures,
            "timeouts": self.timeouts,
            "total_results": self.total_results,
            "avg_duration_ms": avg_ms,
        }


@dataclass
class MetricsCollector:
    """Central in-memory metrics collector."""

    _adapters: dict[str, AdapterStats] = field(default_factory=dict)
    _searches: int = 0
    _cache_hits: int = 0
    _cache_misses: int = 0
    _start_ns: int = field(default_factory=time.perf_counter_ns)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record_adapter_search(
        self,
        name: str,
        duration_ms: int,
        result_count: int,
        *,
        success: bool,
        timed_out: bool = False,
    ) -> None:
        """Record one adapter invocation."""
        stats = self._adapters.get(name)
        if stats is None:
            stats = AdapterStats()
            self._adapters[name] = stats

        stats.searches += 1
        stats.total_duration_ms += duration_ms
        stats.total_results += result_count

        if success:
            stats.successes += 1
        else:
            stats.failures += 1
        if timed_out:
            stats.timeouts += 1

    def record_search(self, *, cached: bool) -> None:
        self._searches += 1
        if cached:
            self._cache_hits += 1
        else:
            self._cache_misses += 1

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def snapshot(self) -> dict[str, object]:
        """Return a JSON-serializable snapshot of all metrics."""
        uptime_ns = time.perf_counter_ns() - self._start_ns
        return {
            "uptime_seconds": round(uptime_ns / 1_000_000_000, 1),
            "searches": self._searches,
            "cache": {"hits": self._cache_hits, "misses": self._cache_misses},
            "adapters": {
                name: stats.snapshot() for name, stats in sorted(self._adapters.items())
            },
        }
