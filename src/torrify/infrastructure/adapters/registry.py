"""Static adapter registry with category and name selection."""

from __future__ import annotations

from typing import Sequence

import structlog

from torrify.domain.adapters import (
    AdapterInfo,
    AdapterNotFoundError,
    AdapterProtocol,
    DuplicateAdapterError,
)
from torrify.domain.ports.page_fetcher import PageFetcherPort

log = structlog.get_logger(__name__)

_ALL_CATEGORIES = {"", "all"}


class AdapterRegistry:
    """
    Table of configured adapters, fixed at startup.

    Selection methods return enabled adapters in registration order and
    never mutate anything, so they are safe on the request path.
    """

    def __init__(
        self,
        adapters: Sequence[AdapterProtocol],
        *,
        closeables: Sequence[PageFetcherPort] = (),
    ) -> None:
        self._adapters: dict[str, AdapterProtocol] = {}
        for adapter in adapters:
            if adapter.key in self._adapters:
                raise DuplicateAdapterError(adapter.key)
            self._adapters[adapter.key] = adapter
        self._closeables = list(closeables)

    def __len__(self) -> int:
        return len(self._adapters)

    def all_enabled(self) -> list[AdapterProtocol]:
        return [a for a in self._adapters.values() if a.settings.enabled]

    def by_category(self, category: str | None) -> list[AdapterProtocol]:
        """Enabled adapters whose affinity contains *category*.

        ``None``, ``""`` and ``"all"`` select every enabled adapter.
        """
        wanted = (category or "").strip().lower()
        if wanted in _ALL_CATEGORIES:
            return self.all_enabled()
        return [a for a in self.all_enabled() if wanted in a.settings.category_affinity]

    def by_names(self, names: Sequence[str]) -> list[AdapterProtocol]:
        """Enabled adapters whose display name or key contains any of *names*.

        Matching is case-insensitive substring; the result keeps registry
        order and holds each adapter at most once.
        """
        needles = [n.strip().lower() for n in names if n and n.strip()]
        if not needles:
            return []

        selected: list[AdapterProtocol] = []
        for adapter in self.all_enabled():
            haystacks = (adapter.name.lower(), adapter.key.lower())
            if any(needle in hay for needle in needles for hay in haystacks):
                selected.append(adapter)
        return selected

    def get(self, key: str) -> AdapterProtocol:
        try:
            return self._adapters[key]
        except KeyError:
            raise AdapterNotFoundError(key) from None

    def list_info(self) -> list[AdapterInfo]:
        return [
            AdapterInfo(
                key=adapter.key,
                name=adapter.name,
                enabled=adapter.settings.enabled,
                categories=list(adapter.settings.category_affinity),
                base_url=adapter.settings.base_url,
                mirrors=list(adapter.settings.mirrors),
                timeout_ms=adapter.settings.timeout_ms,
                rate_limit_ms=adapter.settings.rate_limit_ms,
                fetcher=getattr(adapter, "fetcher_kind", "http"),
            )
            for adapter in self._adapters.values()
        ]

    async def cleanup(self) -> None:
        """Close fetchers the registry owns (e.g. the headless browser)."""
        for closeable in self._closeables:
            try:
                await closeable.aclose()
            except Exception:  # noqa: BLE001
                log.warning("adapter_fetcher_close_failed", exc_info=True)
        self._closeables.clear()
