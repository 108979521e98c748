"""Generic source adapter: mirror fallback, block detection, error capture.

A concrete source only knows how to build its search URL and how to turn a
response body into ScrapedRows (see ``sources/``). Everything that is the
same for every source lives here and is composed in, not inherited:

- one PageFetcher (plain HTTP or headless browser)
- one MinIntervalRateLimiter (applied to every outbound request)
- the ordered mirror loop with per-mirror rejection reasons
"""

from __future__ import annotations

import asyncio
import re
import time
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterator, Protocol

import structlog

from torrify.domain.adapters.base import AdapterSettings, ScrapedRow
from torrify.domain.entities.search import (
    AdapterError,
    AdapterParseError,
    AdapterResult,
    AdapterTimeout,
    AdapterTransportError,
    CanonicalResult,
)
from torrify.domain.ports.clock import WallClock
from torrify.domain.ports.page_fetcher import PageFetcherPort
from torrify.infrastructure.common.parsers import is_valid_magnet
from torrify.infrastructure.common.rate_limiter import MinIntervalRateLimiter
from torrify.infrastructure.search.normalizer import normalize

log = structlog.get_logger(__name__)

_NON_ALNUM_RE = re.compile(r"[^0-9a-z]+")


class SourceDefinition(Protocol):
    """What a concrete source contributes to a SourceAdapter."""

    key: str
    min_body_length: int
    block_markers: tuple[str, ...]

    def search_url(self, base_url: str, query: str, limit: int) -> str: ...

    def parse(self, text: str, base_url: str) -> Iterator[ScrapedRow]: ...


class DetailSourceDefinition(SourceDefinition, Protocol):
    """Source whose listing lacks magnets; the detail page supplies them."""

    def parse_detail(self, text: str) -> str: ...


def _normalize_words(text: str) -> str:
    return " ".join(_NON_ALNUM_RE.sub(" ", text.lower()).split())


def title_matches_query(title: str, query: str) -> bool:
    """True when *title* contains the query, or every query token."""
    norm_query = _normalize_words(query)
    if not norm_query:
        return True
    norm_title = _normalize_words(title)
    if norm_query in norm_title:
        return True
    return all(token in norm_title for token in norm_query.split())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SourceAdapter:
    """Adapter for one external source.

    ``search`` never raises for source-side trouble: timeouts, HTTP errors,
    block pages, unrelated listings and parse failures all come back as an
    AdapterResult with ``success=False`` and a message.
    """

    def __init__(
        self,
        settings: AdapterSettings,
        source: SourceDefinition,
        fetcher: PageFetcherPort,
        *,
        rate_limiter: MinIntervalRateLimiter | None = None,
        wall_clock: WallClock = _utcnow,
    ) -> None:
        self.settings = settings
        self._source = source
        self._fetcher = fetcher
        self._rate_limiter = rate_limiter or MinIntervalRateLimiter(
            settings.rate_limit_ms / 1000, name=settings.key
        )
        self._wall_clock = wall_clock

    @property
    def key(self) -> str:
        return self.settings.key

    @property
    def name(self) -> str:
        return self.settings.display_name

    @property
    def enabled(self) -> bool:
        return self.settings.enabled

    @property
    def fetcher_kind(self) -> str:
        return self._fetcher.kind

    @property
    def _timeout(self) -> float:
        return self.settings.timeout_ms / 1000

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, fetcher={self.fetcher_kind!r})"

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------

    async def search(self, query: str, limit: int) -> AdapterResult:
        started = time.perf_counter()

        if not self.enabled:
            return AdapterResult(
                source_name=self.name,
                success=False,
                error_message="adapter disabled",
            )

        try:
            results = await self._search_mirrors(query, limit)
        except AdapterParseError as exc:
            log.warning(
                "adapter_parse_error",
                adapter=self.key,
                error=str(exc),
                partial=len(exc.partial),
            )
            return self._failure(str(exc), started, partial=exc.partial)
        except AdapterError as exc:
            log.warning("adapter_failed", adapter=self.key, error=str(exc))
            return self._failure(str(exc), started)
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            log.exception("adapter_unexpected_error", adapter=self.key)
            return self._failure(f"unexpected error: {exc}", started)

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        log.info(
            "adapter_search_done",
            adapter=self.key,
            results=len(results),
            elapsed_ms=elapsed_ms,
        )
        return AdapterResult(
            source_name=self.name,
            results=results,
            success=True,
            elapsed_ms=elapsed_ms,
        )

    # ------------------------------------------------------------------
    # Mirror loop
    # ------------------------------------------------------------------

    async def _search_mirrors(self, query: str, limit: int) -> list[CanonicalResult]:
        reasons: list[str] = []
        parse_error: AdapterParseError | None = None
        empty_answer = False

        for base_url in self.settings.urls:
            url = self._source.search_url(base_url, query, limit)
            try:
                page = await self._fetch(url)
            except AdapterTimeout:
                reasons.append(f"{base_url}: timeout")
                log.warning("adapter_mirror_timeout", adapter=self.key, mirror=base_url)
                continue
            except AdapterTransportError as exc:
                reasons.append(f"{base_url}: {exc}")
                log.warning(
                    "adapter_mirror_error",
                    adapter=self.key,
                    mirror=base_url,
                    error=str(exc),
                )
                continue

            if page.status >= 400:
                reasons.append(f"{base_url}: HTTP {page.status}")
                log.warning(
                    "adapter_mirror_status",
                    adapter=self.key,
                    mirror=base_url,
                    status=page.status,
                )
                continue

            block_reason = self._block_reason(page.text)
            if block_reason:
                reasons.append(f"{base_url}: {block_reason}")
                log.warning(
                    "adapter_mirror_blocked",
                    adapter=self.key,
                    mirror=base_url,
                    reason=block_reason,
                )
                continue

            try:
                results = self._collect(page.text, base_url, limit)
            except AdapterParseError as exc:
                reasons.append(f"{base_url}: {exc}")
                if parse_error is None or len(exc.partial) > len(parse_error.partial):
                    parse_error = exc
                continue

            if not results:
                empty_answer = True
                log.debug("adapter_mirror_empty", adapter=self.key, mirror=base_url)
                continue

            if self.settings.check_relevance and not any(
                title_matches_query(r.title, query) for r in results
            ):
                reasons.append(f"{base_url}: unrelated results")
                log.warning(
                    "adapter_mirror_unrelated",
                    adapter=self.key,
                    mirror=base_url,
                    sample=results[0].title,
                )
                continue

            return results

        if empty_answer:
            return []
        if parse_error is not None:
            raise parse_error
        raise AdapterTransportError("all mirrors exhausted: " + "; ".join(reasons))

    async def _fetch(self, url: str):
        await self._rate_limiter.acquire()
        log.debug("adapter_fetch", adapter=self.key, url=url)
        return await self._fetcher.fetch(url, timeout=self._timeout)

    def _block_reason(self, text: str) -> str | None:
        if len(text) < self._source.min_body_length:
            return f"body too short ({len(text)} bytes)"
        lowered = text.lower()
        for marker in self._source.block_markers:
            if marker in lowered:
                return f"block marker {marker!r}"
        return None

    def _collect(self, text: str, base_url: str, limit: int) -> list[CanonicalResult]:
        """Drain the source's row generator into normalized results.

        Rows without a usable title are skipped. An exception escaping the
        generator becomes AdapterParseError carrying the rows read so far.
        """
        now = self._wall_clock()
        results: list[CanonicalResult] = []
        try:
            for row in self._source.parse(text, base_url):
                try:
                    results.append(normalize(row, self.name, now=now))
                except ValueError:
                    log.debug("adapter_row_skipped", adapter=self.key)
                    continue
                if len(results) >= limit:
                    break
        except Exception as exc:  # noqa: BLE001
            raise AdapterParseError(
                f"parse error: {type(exc).__name__}: {exc}", partial=results
            ) from exc
        return results

    def _failure(
        self,
        message: str,
        started: float,
        *,
        partial: list[CanonicalResult] | None = None,
    ) -> AdapterResult:
        return AdapterResult(
            source_name=self.name,
            results=list(partial or []),
            success=False,
            error_message=message,
            elapsed_ms=int((time.perf_counter() - started) * 1000),
        )


class EnrichingSourceAdapter(SourceAdapter):
    """SourceAdapter that can fetch a row's detail page for its magnet link."""

    _source: DetailSourceDefinition

    async def enrich(self, result: CanonicalResult) -> CanonicalResult:
        """Fill in the magnet link from the detail page.

        Never raises for source-side trouble; the row comes back with
        ``needs_enrichment=False`` and an empty magnet instead.
        """
        if not result.needs_enrichment or not result.external_link:
            return result

        try:
            page = await self._fetch(result.external_link)
        except AdapterError as exc:
            log.warning(
                "adapter_enrich_failed",
                adapter=self.key,
                url=result.external_link,
                error=str(exc),
            )
            return replace(result, needs_enrichment=False)

        magnet = ""
        if page.status < 400:
            try:
                magnet = self._source.parse_detail(page.text)
            except Exception as exc:  # noqa: BLE001
                log.warning(
                    "adapter_enrich_parse_failed",
                    adapter=self.key,
                    url=result.external_link,
                    error=str(exc),
                )
        if not is_valid_magnet(magnet):
            magnet = ""
        return replace(result, magnet_link=magnet, needs_enrichment=False)
