"""Tests for scraped-row normalization."""

from __future__ import annotations

import pytest

from factories import NOW
from torrify.domain.adapters.base import ScrapedRow
from torrify.infrastructure.search.normalizer import map_category, normalize

_MAGNET = "magnet:?xt=urn:btih:" + "d" * 40 + "&dn=x"


class TestMapCategory:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Video > HD - Movies", "movies"),
            ("Movies", "movies"),
            ("TV Shows", "tv"),
            ("Anime - English-translated", "anime"),
            ("Audio > FLAC", "music"),
            ("Games > PC", "games"),
            ("Applications > Windows", "software"),
            ("E-Books", "books"),
            ("Literature - Raw", "books"),
            ("Porn", "other"),
            ("tv", "tv"),
        ],
    )
    def test_known_labels(self, raw: str, expected: str) -> None:
        assert map_category(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing_label_is_none(self, raw: str | None) -> None:
        assert map_category(raw) is None


class TestNormalize:
    def test_full_row(self) -> None:
        row = ScrapedRow(
            title="  Ubuntu   24.04  ",
            magnet=_MAGNET,
            seeds="1,204",
            leechers="33",
            size="5.7 GiB",
            uploaded="2024-04-25",
            link="https://a.example/torrent/1",
            category="Applications > UNIX",
            verified=True,
        )
        result = normalize(row, "The Pirate Bay", now=NOW)

        assert result.title == "Ubuntu 24.04"
        assert result.magnet_link == _MAGNET
        assert result.seeds == 1204
        assert result.leechers == 33
        assert result.size_bytes == int(5.7 * 1024**3)
        assert result.uploaded_at.year == 2024
        assert result.source == "The Pirate Bay"
        assert result.category == "software"
        assert result.verified is True
        assert result.needs_enrichment is False

    def test_blank_title_raises(self) -> None:
        with pytest.raises(ValueError):
            normalize(ScrapedRow(title="   "), "Nyaa", now=NOW)

    def test_invalid_magnet_dropped(self) -> None:
        result = normalize(ScrapedRow(title="x", magnet="magnet:?bogus"), "Nyaa", now=NOW)
        assert result.magnet_link == ""

    def test_garbage_counts_become_zero(self) -> None:
        result = normalize(
            ScrapedRow(title="x", seeds="-", leechers=None, size="??"), "Nyaa", now=NOW
        )
        assert (result.seeds, result.leechers, result.size_bytes) == (0, 0, 0)

    def test_missing_date_uses_now(self) -> None:
        assert normalize(ScrapedRow(title="x"), "Nyaa", now=NOW).uploaded_at == NOW

    def test_needs_enrichment_cleared_when_magnet_present(self) -> None:
        row = ScrapedRow(title="x", magnet=_MAGNET, needs_enrichment=True)
        assert normalize(row, "RARBG", now=NOW).needs_enrichment is False

    def test_needs_enrichment_kept_without_magnet(self) -> None:
        row = ScrapedRow(title="x", needs_enrichment=True)
        assert normalize(row, "RARBG", now=NOW).needs_enrichment is True
