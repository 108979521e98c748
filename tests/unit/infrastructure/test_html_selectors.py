"""Tests for CSS selector helpers with fallback chains."""

from __future__ import annotations

from torrify.infrastructure.common.html_selectors import (
    absolute_url,
    extract_attr,
    extract_text,
    parse_html,
    select_items,
)

_HTML = """
<table class="list">
  <tr class="row"><td><a class="t" href="/torrent/1">First</a></td></tr>
  <tr class="row"><td><a class="t" href="/torrent/2">Second</a></td></tr>
</table>
"""


class TestSelectItems:
    def test_primary_selector(self) -> None:
        soup = parse_html(_HTML)
        assert len(select_items(soup, "tr.row")) == 2

    def test_fallback_used_when_primary_misses(self) -> None:
        soup = parse_html(_HTML)
        assert len(select_items(soup, "tr.missing", "table.list tr")) == 2

    def test_no_match(self) -> None:
        assert select_items(parse_html(_HTML), "div.none") == []


class TestExtract:
    def test_extract_text_with_fallback(self) -> None:
        row = select_items(parse_html(_HTML), "tr.row")[0]
        assert extract_text(row, "span.title", "a.t") == "First"

    def test_extract_text_default(self) -> None:
        row = select_items(parse_html(_HTML), "tr.row")[0]
        assert extract_text(row, "span.none", default="?") == "?"

    def test_extract_text_own_element(self) -> None:
        link = parse_html(_HTML).select_one("a.t")
        assert extract_text(link, "") == "First"

    def test_extract_attr(self) -> None:
        row = select_items(parse_html(_HTML), "tr.row")[1]
        assert extract_attr(row, "a.t", "href") == "/torrent/2"

    def test_extract_attr_missing(self) -> None:
        row = select_items(parse_html(_HTML), "tr.row")[1]
        assert extract_attr(row, "a.t", "data-x") == ""


class TestAbsoluteUrl:
    def test_relative_path(self) -> None:
        assert absolute_url("https://a.example", "/torrent/1") == (
            "https://a.example/torrent/1"
        )

    def test_absolute_href_unchanged(self) -> None:
        assert absolute_url("https://a.example", "https://b.example/x") == (
            "https://b.example/x"
        )

    def test_empty_href(self) -> None:
        assert absolute_url("https://a.example", "") == ""
