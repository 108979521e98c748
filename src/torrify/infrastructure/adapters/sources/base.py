"""Shared defaults for source definitions."""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, Iterator

import structlog
from bs4 import Tag

from torrify.domain.adapters.base import AdapterSettings, ScrapedRow
from torrify.infrastructure.common.html_selectors import parse_html, select_items

from ..constants import BLOCK_MARKERS, DEFAULT_MIN_BODY_LENGTH

log = structlog.get_logger(__name__)

_MAGNET_SELECTOR = 'a[href^="magnet:"]'


def _skip_row(source: str, exc: Exception) -> None:
    log.debug(
        "adapter_row_skipped",
        adapter=source,
        error=f"{type(exc).__name__}: {exc}",
    )


class HtmlSource:
    """Base for sources that scrape an HTML listing table.

    Subclasses **must** set ``key``/``default_settings`` and override
    ``search_url()`` and ``parse_row()``. A row whose ``parse_row()`` raises
    is skipped; the rest of the listing is still read.
    """

    key: str = ""
    default_settings: AdapterSettings

    min_body_length: int = DEFAULT_MIN_BODY_LENGTH
    block_markers: tuple[str, ...] = BLOCK_MARKERS
    # Listing rows may lack magnets that the detail page carries.
    detail_pages: bool = False

    # CSS selectors tried in order; the first one that matches wins.
    row_selectors: tuple[str, ...] = ()

    def search_url(self, base_url: str, query: str, limit: int) -> str:
        raise NotImplementedError(f"{type(self).__name__}.search_url() not implemented")

    def parse(self, text: str, base_url: str) -> Iterator[ScrapedRow]:
        soup = parse_html(text)
        for row in select_items(soup, *self.row_selectors):
            try:
                scraped = self.parse_row(row, base_url)
            except Exception as exc:  # noqa: BLE001
                _skip_row(self.key, exc)
                continue
            if scraped is not None:
                yield scraped

    def parse_row(self, row: Tag, base_url: str) -> ScrapedRow | None:
        """Return a row, or None for header/filler rows."""
        raise NotImplementedError(f"{type(self).__name__}.parse_row() not implemented")

    def parse_detail(self, text: str) -> str:
        """Magnet link from a detail page, or ""."""
        soup = parse_html(text)
        link = soup.select_one(_MAGNET_SELECTOR)
        return str(link.get("href", "")) if link else ""


class JsonSource:
    """Base for sources that expose a JSON search API.

    ``iter_items()`` checks the payload's overall shape and raises when it
    is unusable; ``parse_item()`` turns one entry into a row. An entry whose
    ``parse_item()`` raises is skipped.
    """

    key: str = ""
    default_settings: AdapterSettings

    # JSON bodies can be legitimately tiny; a non-JSON interstitial
    # surfaces as a parse error instead.
    min_body_length: int = 0
    block_markers: tuple[str, ...] = ()

    def search_url(self, base_url: str, query: str, limit: int) -> str:
        raise NotImplementedError(f"{type(self).__name__}.search_url() not implemented")

    def parse(self, text: str, base_url: str) -> Iterator[ScrapedRow]:
        for item in self.iter_items(json.loads(text)):
            try:
                row = self.parse_item(item, base_url)
            except Exception as exc:  # noqa: BLE001
                _skip_row(self.key, exc)
                continue
            if row is not None:
                yield row

    def iter_items(self, payload: Any) -> Iterable[Any]:
        raise NotImplementedError(f"{type(self).__name__}.iter_items() not implemented")

    def parse_item(self, item: Any, base_url: str) -> ScrapedRow | None:
        raise NotImplementedError(f"{type(self).__name__}.parse_item() not implemented")


def cell_text(cell: Tag) -> str:
    """Visible text of a table cell with whitespace collapsed."""
    return re.sub(r"\s+", " ", cell.get_text(" ", strip=True)).strip()


def own_text(cell: Tag) -> str:
    """Text directly inside *cell*, ignoring nested elements."""
    parts = [s.strip() for s in cell.find_all(string=True, recursive=False)]
    return " ".join(p for p in parts if p)
