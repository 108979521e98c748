"""Tests for building the adapter registry from configuration."""

from __future__ import annotations

import httpx
import pytest

from torrify.domain.adapters import AdapterConfigError
from torrify.infrastructure.adapters.factory import (
    apply_override,
    build_registry,
    resolve_adapter_settings,
)
from torrify.infrastructure.adapters.source_adapter import EnrichingSourceAdapter
from torrify.infrastructure.adapters.sources import YtsSource
from torrify.infrastructure.config.schema import AdapterOverride, AppConfig


class TestApplyOverride:
    def test_only_set_fields_change(self) -> None:
        base = YtsSource.default_settings
        updated = apply_override(base, AdapterOverride(timeout_ms=5000))
        assert updated.timeout_ms == 5000
        assert updated.base_url == base.base_url
        assert updated.rate_limit_ms == base.rate_limit_ms

    def test_lists_become_tuples(self) -> None:
        updated = apply_override(
            YtsSource.default_settings,
            AdapterOverride(mirrors=["https://yts.example"], category_affinity=["movies"]),
        )
        assert updated.mirrors == ("https://yts.example",)
        assert updated.category_affinity == ("movies",)

    def test_relevance_check_can_be_enabled(self) -> None:
        base = YtsSource.default_settings
        assert base.check_relevance is False
        updated = apply_override(base, AdapterOverride(check_relevance=True))
        assert updated.check_relevance is True

    def test_unknown_category_rejected(self) -> None:
        with pytest.raises(AdapterConfigError, match="unknown categories"):
            apply_override(
                YtsSource.default_settings, AdapterOverride(category_affinity=["cartoons"])
            )


class TestResolveAdapterSettings:
    def test_builtin_order(self) -> None:
        keys = [s.key for s in resolve_adapter_settings(AppConfig())]
        assert keys == ["piratebay", "apibay", "nyaa", "rarbg", "yts", "leetx"]

    def test_override_applied(self) -> None:
        config = AppConfig(adapters={"leetx": {"enabled": True}, "nyaa": {"enabled": False}})
        by_key = {s.key: s for s in resolve_adapter_settings(config)}
        assert by_key["leetx"].enabled is True
        assert by_key["nyaa"].enabled is False

    def test_unknown_adapter_rejected(self) -> None:
        with pytest.raises(AdapterConfigError, match="unknown adapters"):
            resolve_adapter_settings(AppConfig(adapters={"kickass": {"enabled": True}}))


class TestBuildRegistry:
    async def test_plain_http_when_browser_disabled(self) -> None:
        async with httpx.AsyncClient() as client:
            config = AppConfig(playwright_enabled=False)
            registry = build_registry(config, client)

        assert len(registry) == 6
        assert {i.fetcher for i in registry.list_info()} == {"http"}

    async def test_browser_for_capable_adapters(self) -> None:
        async with httpx.AsyncClient() as client:
            registry = build_registry(AppConfig(playwright_enabled=True), client)

        fetchers = {i.key: i.fetcher for i in registry.list_info()}
        assert fetchers["leetx"] == "browser"
        assert fetchers["yts"] == "http"

    async def test_serverless_never_uses_browser(self) -> None:
        async with httpx.AsyncClient() as client:
            config = AppConfig(playwright_enabled=True, search={"serverless": True})
            registry = build_registry(config, client)

        assert registry.get("leetx").fetcher_kind == "http"

    async def test_detail_page_sources_can_enrich(self) -> None:
        async with httpx.AsyncClient() as client:
            registry = build_registry(AppConfig(playwright_enabled=False), client)

        assert isinstance(registry.get("rarbg"), EnrichingSourceAdapter)
        assert isinstance(registry.get("leetx"), EnrichingSourceAdapter)
        assert not isinstance(registry.get("yts"), EnrichingSourceAdapter)

    async def test_leetx_disabled_by_default(self) -> None:
        async with httpx.AsyncClient() as client:
            registry = build_registry(AppConfig(playwright_enabled=False), client)

        assert "leetx" not in [a.key for a in registry.all_enabled()]
