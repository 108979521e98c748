"""The Pirate Bay HTML listing (classic ``table#searchResult`` layout)."""

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

from .base import HtmlSource, cell_text

_UPLOADED_RE = re.compile(r"Uploaded\s+([^,]+)", re.IGNORECASE)
_SIZE_RE = re.compile(r"Size\s+([\d.,]+\s*[KMGT]?i?B)", re.IGNORECASE)
_VERIFIED_SELECTOR = (
    'img[title*="VIP"], img[title*="Trusted"], img[alt*="VIP"], img[alt*="Trusted"]'
)


class PirateBaySource(HtmlSource):
    key = "piratebay"
    default_settings = AdapterSettings(
        key="piratebay",
        display_name="The Pirate Bay",
        base_url="https://thepiratebay.org",
        mirrors=(
            "https://piratebay.live",
            "https://thepiratebay7.com",
            "https://thepiratebay0.org",
            "https://thepiratebay.zone",
            "https://tpb.party",
        ),
        category_affinity=(
            "movies", "tv", "anime", "music", "games", "software", "books", "other",
        ),
    )

    row_selectors = (
        "table#searchResult tr",
        "#searchResult tbody tr",
        "table tbody tr",
    )

    def search_url(self, base_url: str, query: str, limit: int) -> str:
        # /1/99/0 = first page, ordered by seeders desc, all categories
        return f"{base_url}/search/{quote(query)}/1/99/0"

    def parse_row(self, row: Tag, base_url: str) -> ScrapedRow | None:
        if "header" in (row.get("class") or []):
            return None
        cells = row.find_all("td", recursive=False)
        if len(cells) < 3:
            return None

        title = extract_text(row, "a.detLink", ".detName a", 'a[href*="/torrent/"]')
        if not title:
            return None
        href = extract_attr(row, "a.detLink", "href", ".detName a", 'a[href*="/torrent/"]')

        desc = extract_text(row, "font.detDesc", ".detDesc") or cell_text(row)
        uploaded = _UPLOADED_RE.search(desc)
        size = _SIZE_RE.search(desc)

        return ScrapedRow(
            title=title,
            magnet=extract_attr(row, 'a[href^="magnet:"]', "href"),
            seeds=cell_text(cells[-2]),
            leechers=cell_text(cells[-1]),
            size=size.group(1) if size else None,
            uploaded=uploaded.group(1) if uploaded else None,
            link=absolute_url(base_url, href),
            category=cell_text(cells[0]) if len(cells) >= 4 else None,
            verified=row.select_one(_VERIFIED_SELECTOR) is not None,
        )
