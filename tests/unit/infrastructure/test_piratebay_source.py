"""Tests for The Pirate Bay HTML listing source."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from factories import NOW
from torrify.infrastructure.adapters.sources import PirateBaySource
from torrify.infrastructure.search.normalizer import normalize

_BASE = "https://thepiratebay.org"
_HASH = "0123456789abcdef0123456789abcdef01234567"

_SEARCH_HTML = f"""
<html><body>
<table id="searchResult">
  <thead id="tableHead">
    <tr class="header"><th>Type</th><th>Name</th><th>SE</th><th>LE</th></tr>
  </thead>
  <tr>
    <td class="vertTh"><center>
      <a href="/browse/300">Applications</a><br/>(<a href="/browse/303">UNIX</a>)
    </center></td>
    <td>
      <div class="detName">
        <a href="/torrent/123/Ubuntu_24.04" class="detLink">Ubuntu 24.04 Desktop amd64</a>
      </div>
      <a href="magnet:?xt=urn:btih:{_HASH}&amp;dn=Ubuntu"><img src="/static/img/icon-magnet.gif"/></a>
      <img src="/static/img/vip.gif" alt="VIP" title="VIP"/>
      <font class="detDesc">Uploaded 04-25&nbsp;2024, Size 5.7&nbsp;GiB, ULed by
        <a class="detDesc" href="/user/someone/">someone</a></font>
    </td>
    <td align="right">1204</td>
    <td align="right">33</td>
  </tr>
  <tr>
    <td class="vertTh"><center>
      <a href="/browse/200">Video</a><br/>(<a href="/browse/207">HD - Movies</a>)
    </center></td>
    <td>
      <div class="detName">
        <a href="/torrent/456/Big_Buck_Bunny" class="detLink">Big Buck Bunny 1080p</a>
      </div>
      <font class="detDesc">Uploaded Y-day&nbsp;23:10, Size 700&nbsp;MiB, ULed by anon</font>
    </td>
    <td align="right">50</td>
    <td align="right">0</td>
  </tr>
</table>
</body></html>
"""


class TestSearchUrl:
    def test_url_shape(self) -> None:
        url = PirateBaySource().search_url(_BASE, "big buck", 50)
        assert url == f"{_BASE}/search/big%20buck/1/99/0"


class TestParse:
    def test_skips_header_and_reads_rows(self) -> None:
        rows = list(PirateBaySource().parse(_SEARCH_HTML, _BASE))
        assert [r.title for r in rows] == [
            "Ubuntu 24.04 Desktop amd64",
            "Big Buck Bunny 1080p",
        ]

    def test_first_row_fields(self) -> None:
        row = next(PirateBaySource().parse(_SEARCH_HTML, _BASE))
        assert row.magnet == f"magnet:?xt=urn:btih:{_HASH}&dn=Ubuntu"
        assert row.seeds == "1204"
        assert row.leechers == "33"
        assert row.size == "5.7\xa0GiB"
        assert row.link == f"{_BASE}/torrent/123/Ubuntu_24.04"
        assert row.verified is True

    def test_second_row_not_verified_and_no_magnet(self) -> None:
        row = list(PirateBaySource().parse(_SEARCH_HTML, _BASE))[1]
        assert row.verified is False
        assert row.magnet == ""

    def test_normalized(self) -> None:
        first, second = (
            normalize(r, "The Pirate Bay", now=NOW)
            for r in PirateBaySource().parse(_SEARCH_HTML, _BASE)
        )
        assert first.category == "software"
        assert first.size_bytes == int(5.7 * 1024**3)
        assert first.uploaded_at == datetime(2024, 4, 25, tzinfo=timezone.utc)
        assert first.seeds == 1204

        assert second.category == "movies"
        assert second.size_bytes == 700 * 1024**2
        assert second.uploaded_at == (NOW - timedelta(days=1)).replace(
            hour=23, minute=10
        )

    def test_page_without_table(self) -> None:
        assert list(PirateBaySource().parse("<html><p>No hits</p></html>", _BASE)) == []


class TestDefaults:
    def test_serves_every_category(self) -> None:
        settings = PirateBaySource.default_settings
        assert "movies" in settings.category_affinity
        assert "other" in settings.category_affinity
        assert len(settings.urls) == 6
