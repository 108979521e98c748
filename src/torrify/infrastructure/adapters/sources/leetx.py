"""1337x HTML listing; magnets live on the detail page."""

from __future__ import annotations

import re
from urllib.parse import quote

from bs4 import Tag

from torrify.domain.adapters.base import AdapterSettings, ScrapedRow
from torrify.infrastructure.common.html_selectors import (
    absolute_url,
    extract_attr,
    extract_text,
)

from .base import HtmlSource, cell_text, own_text

_SUB_CATEGORY_RE = re.compile(r"/sub/(\d+)/")

# 1337x sub-category ids grouped by top-level category
_SUB_CATEGORIES: dict[str, tuple[int, ...]] = {
    "movies": (1, 2, 3, 4, 42, 54, 66, 70, 73, 76),
    "tv": (5, 6, 7, 9, 41, 71, 74, 75),
    "music": (22, 23, 24, 25, 26, 27, 53, 58, 59, 60),
    "games": (10, 11, 12, 13, 14, 15, 16, 17, 43, 44, 45, 46, 67, 72, 77, 82),
    "software": (18, 19, 20, 21, 47, 48, 56),
    "anime": (28, 78, 79, 80),
    "books": (33, 34, 35, 36, 37, 38, 39, 40, 52),
}
_CATEGORY_BY_SUB = {
    sub: category for category, subs in _SUB_CATEGORIES.items() for sub in subs
}


def map_sub_category(href: str) -> str | None:
    match = _SUB_CATEGORY_RE.search(href or "")
    if not match:
        return None
    return _CATEGORY_BY_SUB.get(int(match.group(1)), "other")


class LeetxSource(HtmlSource):
    key = "leetx"
    default_settings = AdapterSettings(
        key="leetx",
        display_name="1337x",
        base_url="https://1337x.to",
        mirrors=("https://1337x.st", "https://x1337x.ws", "https://1337x.gd"),
        enabled=False,
        category_affinity=(
            "movies", "tv", "anime", "music", "games", "software", "books", "other",
        ),
        timeout_ms=18_000,
        rate_limit_ms=1_500,
        browser_capable=True,
    )

    detail_pages = True
    row_selectors = (
        "table.table-list tbody tr",
        "table.table-list tr",
    )

    def search_url(self, base_url: str, query: str, limit: int) -> str:
        return f"{base_url}/search/{quote(query)}/1/"

    def parse_row(self, row: Tag, base_url: str) -> ScrapedRow | None:
        name_cell = row.select_one("td.name, td.coll-1")
        if name_cell is None:
            return None

        title = extract_text(name_cell, 'a[href^="/torrent/"]', 'a[href*="/torrent/"]')
        if not title:
            return None
        href = extract_attr(
            name_cell, 'a[href^="/torrent/"]', "href", 'a[href*="/torrent/"]'
        )

        # The size cell repeats the seed count in a nested <span>.
        size_cell = row.select_one("td.size, td.coll-4")
        seeds_cell = row.select_one("td.seeds, td.coll-2")
        leeches_cell = row.select_one("td.leeches, td.coll-3")
        date_cell = row.select_one("td.coll-date")

        return ScrapedRow(
            title=title,
            seeds=cell_text(seeds_cell) if seeds_cell else None,
            leechers=cell_text(leeches_cell) if leeches_cell else None,
            size=own_text(size_cell) if size_cell else None,
            uploaded=cell_text(date_cell) if date_cell else None,
            link=absolute_url(base_url, href),
            category=map_sub_category(extract_attr(name_cell, 'a[href*="/sub/"]', "href")),
            verified=row.select_one("td.vip") is not None,
            needs_enrichment=True,
        )
