"""YTS movie API (``/api/v2/list_movies.json``)."""

from __future__ import annotations

from typing import Any, Iterable
from urllib.parse import quote_plus

from torrify.domain.adapters.base import AdapterSettings, ScrapedRow
from torrify.infrastructure.common.parsers import build_magnet

from .base import JsonSource

_MAX_PAGE_SIZE = 50


class YtsSource(JsonSource):
    key = "yts"
    default_settings = AdapterSettings(
        key="yts",
        display_name="YTS",
        base_url="https://yts.mx",
        category_affinity=("movies",),
        rate_limit_ms=500,
        # query_term also matches IMDb codes and cast names, so titles often
        # do not contain the query. Set adapters.yts.check_relevance: true
        # when pointing this adapter at an untrusted mirror.
        check_relevance=False,
    )

    def search_url(self, base_url: str, query: str, limit: int) -> str:
        page_size = max(1, min(limit, _MAX_PAGE_SIZE))
        return (
            f"{base_url}/api/v2/list_movies.json"
            f"?query_term={quote_plus(query)}&limit={page_size}&sort_by=seeds"
        )

    def iter_items(self, payload: Any) -> Iterable[Any]:
        """One ``(movie, torrent)`` pair per downloadable release."""
        if not isinstance(payload, dict):
            raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
        if payload.get("status") != "ok":
            raise ValueError(f"unexpected YTS status: {payload.get('status')!r}")

        data = payload.get("data") or {}
        for movie in data.get("movies") or []:
            if not isinstance(movie, dict):
                continue
            for torrent in movie.get("torrents") or []:
                if isinstance(torrent, dict):
                    yield movie, torrent

    def parse_item(self, item: Any, base_url: str) -> ScrapedRow | None:
        movie, torrent = item
        title = movie.get("title_long") or movie.get("title") or ""
        quality = torrent.get("quality") or ""
        full_title = f"{title} [{quality}] [YTS]" if quality else f"{title} [YTS]"
        return ScrapedRow(
            title=full_title,
            magnet=build_magnet(str(torrent.get("hash") or ""), full_title),
            seeds=torrent.get("seeds"),
            leechers=torrent.get("peers"),
            size=torrent.get("size_bytes") or torrent.get("size"),
            uploaded=torrent.get("date_uploaded_unix") or torrent.get("date_uploaded"),
            link=movie.get("url") or "",
            category="movies",
            verified=True,
        )
