"""JSON rendering of search responses (camelCase wire format)."""

from __future__ import annotations

from typing import Any

from torrify.domain.adapters.base import AdapterInfo
from torrify.domain.entities.search import (
    AdapterResult,
    CanonicalResult,
    SearchResponse,
)


def _isoformat(value) -> str:
    return value.isoformat().replace("+00:00", "Z")


def render_result(result: CanonicalResult) -> dict[str, Any]:
    return {
        "title": result.title,
        "magnetLink": result.magnet_link,
        "seeds": result.seeds,
        "leechers": result.leechers,
        "sizeBytes": result.size_bytes,
        "uploadedAt": _isoformat(result.uploaded_at),
        "source": result.source,
        "externalLink": result.external_link,
        "category": result.category,
        "verified": result.verified,
    }


def render_source_stats(stats: AdapterResult) -> dict[str, Any]:
    return {
        "sourceName": stats.source_name,
        "success": stats.success,
        "errorMessage": stats.error_message,
        "elapsedMs": stats.elapsed_ms,
        "resultCount": stats.result_count,
    }


def render_search_json(response: SearchResponse) -> dict[str, Any]:
    return {
        "results": [render_result(r) for r in response.results],
        "totalCount": response.total_count,
        "perSourceStats": [render_source_stats(s) for s in response.per_source_stats],
        "query": response.query,
        "cached": response.cached,
        "executionTimeMs": response.execution_time_ms,
    }


def render_adapter_info(info: AdapterInfo) -> dict[str, Any]:
    return {
        "key": info.key,
        "name": info.name,
        "enabled": info.enabled,
        "categories": info.categories,
        "baseUrl": info.base_url,
        "mirrors": info.mirrors,
        "timeoutMs": info.timeout_ms,
        "rateLimitMs": info.rate_limit_ms,
        "fetcher": info.fetcher,
    }
