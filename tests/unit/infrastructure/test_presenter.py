"""Tests for the camelCase JSON presenter."""

from __future__ import annotations

from factories import make_result
from torrify.domain.adapters.base import AdapterInfo
from torrify.domain.entities import AdapterResult, SearchResponse
from torrify.infrastructure.search.presenter import (
    render_adapter_info,
    render_search_json,
)


class TestRenderSearchJson:
    def test_camel_case_shape(self) -> None:
        response = SearchResponse(
            results=[make_result(category="software", verified=True)],
            total_count=1,
            per_source_stats=[
                AdapterResult(source_name="YTS", success=False, error_message="timeout")
            ],
            query="ubuntu",
            cached=True,
            execution_time_ms=12,
        )
        body = render_search_json(response)

        assert set(body) == {
            "results",
            "totalCount",
            "perSourceStats",
            "query",
            "cached",
            "executionTimeMs",
        }
        row = body["results"][0]
        assert row["magnetLink"].startswith("magnet:?xt=urn:btih:")
        assert row["sizeBytes"] == 4 * 1024**3
        assert row["uploadedAt"] == "2024-06-01T12:00:00Z"
        assert row["category"] == "software"
        assert row["verified"] is True
        assert "needsEnrichment" not in row

        stats = body["perSourceStats"][0]
        assert stats == {
            "sourceName": "YTS",
            "success": False,
            "errorMessage": "timeout",
            "elapsedMs": 0,
            "resultCount": 0,
        }
        assert body["cached"] is True
        assert body["executionTimeMs"] == 12


class TestRenderAdapterInfo:
    def test_shape(self) -> None:
        info = AdapterInfo(
            key="yts",
            name="YTS",
            enabled=True,
            categories=["movies"],
            base_url="https://yts.mx",
            timeout_ms=15000,
            rate_limit_ms=500,
        )
        body = render_adapter_info(info)
        assert body["key"] == "yts"
        assert body["baseUrl"] == "https://yts.mx"
        assert body["rateLimitMs"] == 500
        assert body["fetcher"] == "http"
