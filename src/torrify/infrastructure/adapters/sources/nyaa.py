"""Nyaa HTML listing (``table.torrent-list``)."""

from __future__ import annotations

from urllib.parse import quote_plus

from bs4 import Tag

from torrify.domain.adapters.base import AdapterSettings, ScrapedRow
from torrify.infrastructure.common.html_selectors import absolute_url, extract_attr

from .base import HtmlSource, cell_text

# Nyaa only lists anime-adjacent material; rows without a label are anime.
_DEFAULT_CATEGORY = "anime"


class NyaaSource(HtmlSource):
    key = "nyaa"
    default_settings = AdapterSettings(
        key="nyaa",
        display_name="Nyaa",
        base_url="https://nyaa.si",
        mirrors=("https://nyaa.land", "https://nyaa.net"),
        category_affinity=("anime", "books", "music"),
    )

    min_body_length = 1000
    row_selectors = (
        "table.torrent-list tbody tr",
        "table.torrent-list tr",
        "table tbody tr",
    )

    def search_url(self, base_url: str, query: str, limit: int) -> str:
        return f"{base_url}/?f=0&c=0_0&q={quote_plus(query)}&s=seeders&o=desc"

    def parse_row(self, row: Tag, base_url: str) -> ScrapedRow | None:
        cells = row.find_all("td", recursive=False)
        if len(cells) < 7:
            return None

        # The name cell may also hold a "/view/<id>#comments" link.
        title_link = None
        for link in cells[1].select('a[href*="/view/"]'):
            if "#comments" not in str(link.get("href", "")):
                title_link = link
        if title_link is None:
            return None
        title = str(title_link.get("title") or "") or title_link.get_text(strip=True)

        date_cell = cells[4]
        uploaded = date_cell.get("data-timestamp") or cell_text(date_cell)

        row_classes = row.get("class") or []
        return ScrapedRow(
            title=title,
            magnet=extract_attr(row, 'a[href^="magnet:"]', "href"),
            seeds=cell_text(cells[5]),
            leechers=cell_text(cells[6]),
            size=cell_text(cells[3]),
            uploaded=uploaded,
            link=absolute_url(base_url, str(title_link.get("href", ""))),
            category=extract_attr(cells[0], "a[title]", "title")
            or _DEFAULT_CATEGORY,
            verified="success" in row_classes,
        )
