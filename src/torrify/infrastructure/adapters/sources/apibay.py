"""apibay.org JSON API (the backend of the current Pirate Bay frontend)."""

from __future__ import annotations

from typing import Any, Iterable
from urllib.parse import quote

from torrify.domain.adapters.base import AdapterSettings, ScrapedRow
from torrify.infrastructure.common.parsers import build_magnet

from .base import JsonSource

# Sentinel row apibay returns instead of an empty list.
_NO_RESULTS_ID = "0"
_TV_CODES = {205, 208, 212}
_BOOK_CODES = {601, 602}


def map_category_code(raw: Any) -> str | None:
    """Translate a numeric Pirate Bay category code."""
    try:
        code = int(raw)
    except (TypeError, ValueError):
        return None
    if code in _TV_CODES:
        return "tv"
    if code in _BOOK_CODES:
        return "books"
    group = code // 100
    return {
        1: "music",
        2: "movies",
        3: "software",
        4: "games",
    }.get(group, "other")


class ApiBaySource(JsonSource):
    key = "apibay"
    default_settings = AdapterSettings(
        key="apibay",
        display_name="ThePirateBay API",
        base_url="https://apibay.org",
        category_affinity=(
            "movies", "tv", "anime", "music", "games", "software", "books", "other",
        ),
    )

    def search_url(self, base_url: str, query: str, limit: int) -> str:
        return f"{base_url}/q.php?q={quote(query)}&cat="

    def iter_items(self, payload: Any) -> Iterable[Any]:
        if not isinstance(payload, list):
            raise ValueError(f"expected a JSON list, got {type(payload).__name__}")
        return payload

    def parse_item(self, item: Any, base_url: str) -> ScrapedRow | None:
        if not isinstance(item, dict) or str(item.get("id", "")) == _NO_RESULTS_ID:
            return None
        name = str(item.get("name") or "")
        return ScrapedRow(
            title=name,
            magnet=build_magnet(str(item.get("info_hash") or ""), name),
            seeds=item.get("seeders"),
            leechers=item.get("leechers"),
            size=item.get("size"),
            uploaded=item.get("added"),
            link=f"https://thepiratebay.org/description.php?id={item.get('id')}",
            category=map_category_code(item.get("category")),
            verified=str(item.get("status", "")).lower() in ("vip", "trusted"),
        )
