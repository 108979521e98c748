"""Builds configured adapters from built-in sources and config overrides."""

from __future__ import annotations

from dataclasses import replace

import httpx
import structlog

from torrify.domain.adapters.base import AdapterSettings
from torrify.domain.adapters.exceptions import AdapterConfigError
from torrify.domain.entities.search import CATEGORIES
from torrify.domain.ports.page_fetcher import PageFetcherPort
from torrify.infrastructure.config.schema import AdapterOverride, AppConfig

from .constants import DEFAULT_USER_AGENT
from .fetchers import BrowserFetcher, HttpxFetcher
from .registry import AdapterRegistry
from .source_adapter import EnrichingSourceAdapter, SourceAdapter
from .sources import BUILTIN_SOURCES

log = structlog.get_logger(__name__)


def apply_override(
    settings: AdapterSettings, override: AdapterOverride
) -> AdapterSettings:
    """Return *settings* with every field the override sets replaced."""
    changes = override.model_dump(exclude_none=True)
    if "mirrors" in changes:
        changes["mirrors"] = tuple(changes["mirrors"])
    if "category_affinity" in changes:
        unknown = set(changes["category_affinity"]) - set(CATEGORIES)
        if unknown:
            raise AdapterConfigError(
                f"adapter {settings.key!r}: unknown categories {sorted(unknown)}"
            )
        changes["category_affinity"] = tuple(changes["category_affinity"])
    return replace(settings, **changes)


def resolve_adapter_settings(config: AppConfig) -> list[AdapterSettings]:
    """Built-in defaults with config overrides applied, in registry order.

    Raises:
        AdapterConfigError: Override for an adapter key that does not exist.
    """
    unknown = set(config.adapters) - set(BUILTIN_SOURCES)
    if unknown:
        raise AdapterConfigError(f"unknown adapters in config: {sorted(unknown)}")

    resolved: list[AdapterSettings] = []
    for key, source in BUILTIN_SOURCES.items():
        settings = source.default_settings
        override = config.adapters.get(key)
        if override is not None:
            settings = apply_override(settings, override)
        resolved.append(settings)
    return resolved


def build_registry(
    config: AppConfig,
    http_client: httpx.AsyncClient,
) -> AdapterRegistry:
    """Create every built-in adapter and pick its page fetcher.

    Browser-capable adapters render through Playwright only when the
    process may launch a browser (``playwright.enabled`` and not
    serverless); otherwise they fall back to plain HTTP.
    """
    user_agent = config.http_user_agent or DEFAULT_USER_AGENT
    http_fetcher = HttpxFetcher(http_client, user_agent=user_agent)
    browser_fetcher: BrowserFetcher | None = None

    adapters: list[SourceAdapter] = []
    for settings in resolve_adapter_settings(config):
        source = BUILTIN_SOURCES[settings.key]

        fetcher: PageFetcherPort = http_fetcher
        if settings.browser_capable and config.browser_enabled:
            if browser_fetcher is None:
                browser_fetcher = BrowserFetcher(
                    headless=config.playwright_headless, user_agent=user_agent
                )
            fetcher = browser_fetcher

        adapter_cls = (
            EnrichingSourceAdapter
            if getattr(source, "detail_pages", False)
            else SourceAdapter
        )
        adapters.append(adapter_cls(settings, source, fetcher))
        log.debug(
            "adapter_built",
            adapter=settings.key,
            enabled=settings.enabled,
            fetcher=fetcher.kind,
        )

    closeables = [browser_fetcher] if browser_fetcher is not None else []
    return AdapterRegistry(adapters, closeables=closeables)
