"""Source adapters: fetchers, generic adapter, registry and built-in sources."""

from __future__ import annotations

from .factory import build_registry, resolve_adapter_settings
from .fetchers import BrowserFetcher, HttpxFetcher
from .registry import AdapterRegistry
from .source_adapter import EnrichingSourceAdapter, SourceAdapter

__all__ = [
    "AdapterRegistry",
    "BrowserFetcher",
    "EnrichingSourceAdapter",
    "HttpxFetcher",
    "SourceAdapter",
    "build_registry",
    "resolve_adapter_settings",
]
