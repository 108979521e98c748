"""RARBG successor sites (``table.lista2t`` layout)."""

from __future__ import annotations

from urllib.parse import quote_plus

from bs4 import Tag

from torrify.domain.adapters.base import AdapterSettings, ScrapedRow
from torrify.infrastructure.common.html_selectors import absolute_url, extract_attr

from ..constants import BLOCK_MARKERS
from .base import HtmlSource, cell_text


class RarbgSource(HtmlSource):
    key = "rarbg"
    default_settings = AdapterSettings(
        key="rarbg",
        display_name="RARBG",
        base_url="https://rargb.to",
        mirrors=(
            "https://rarbg.to",
            "https://rarbggo.to",
            "https://www.rarbgproxy.to",
            "https://proxyrarbg.to",
        ),
        category_affinity=("movies", "tv", "games", "software", "music"),
    )

    detail_pages = True
    block_markers = (
        *BLOCK_MARKERS,
        "site is blocked",
        "has been suspended",
        "temporarily unavailable",
        "under maintenance",
    )
    row_selectors = (
        "table.lista2t tr.lista2",
        "table.lista2t tr",
        "tr.lista2",
    )

    def search_url(self, base_url: str, query: str, limit: int) -> str:
        return f"{base_url}/search/?search={quote_plus(query)}"

    def parse_row(self, row: Tag, base_url: str) -> ScrapedRow | None:
        cells = row.find_all("td", recursive=False)
        if len(cells) < 7:
            return None

        title_link = cells[1].select_one('a[href*="/torrent/"]') or cells[1].select_one(
            "a[title]"
        )
        if title_link is None:
            return None
        title = str(title_link.get("title") or "") or title_link.get_text(strip=True)
        href = str(title_link.get("href", ""))
        magnet = extract_attr(row, 'a[href^="magnet:"]', "href")

        return ScrapedRow(
            title=title,
            magnet=magnet,
            seeds=cell_text(cells[5]),
            leechers=cell_text(cells[6]),
            size=cell_text(cells[4]),
            uploaded=cell_text(cells[3]),
            link=absolute_url(base_url, href),
            category=cell_text(cells[2]) or None,
            needs_enrichment=not magnet,
        )
