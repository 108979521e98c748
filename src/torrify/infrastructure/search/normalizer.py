"""Coerce adapter rows into CanonicalResult."""

from __future__ import annotations

from datetime import datetime, timezone

from torrify.domain.adapters.base import ScrapedRow
from torrify.domain.entities.search import CATEGORIES, CanonicalResult, Category
from torrify.infrastructure.common.converters import to_count
from torrify.infrastructure.common.parsers import (
    is_valid_magnet,
    parse_size_to_bytes,
    parse_upload_date,
)

# Checked in order; first keyword contained in the raw label wins.
_CATEGORY_KEYWORDS: tuple[tuple[str, Category], ...] = (
    ("anime", "anime"),
    ("manga", "books"),
    ("tv", "tv"),
    ("series", "tv"),
    ("episode", "tv"),
    ("movie", "movies"),
    ("film", "movies"),
    ("video", "movies"),
    ("music", "music"),
    ("audio", "music"),
    ("lossless", "music"),
    ("game", "games"),
    ("software", "software"),
    ("application", "software"),
    ("app", "software"),
    ("book", "books"),
    ("literature", "books"),
    ("comic", "books"),
)


def map_category(raw: str | None) -> Category | None:
    """Map a source category label onto the shared category set.

    Unknown non-empty labels become "other"; missing labels stay None.
    """
    if not raw:
        return None
    label = raw.strip().lower()
    if not label:
        return None
    if label in CATEGORIES:
        return label  # type: ignore[return-value]
    for keyword, category in _CATEGORY_KEYWORDS:
        if keyword in label:
            return category
    return "other"


def normalize(
    row: ScrapedRow,
    source_name: str,
    *,
    now: datetime | None = None,
) -> CanonicalResult:
    """Build a CanonicalResult from a scraped row.

    Raises:
        ValueError: When the row has no usable title.
    """
    title = " ".join((row.title or "").split())
    if not title:
        raise ValueError(f"{source_name}: row without title")

    magnet = (row.magnet or "").strip()
    if not is_valid_magnet(magnet):
        magnet = ""

    return CanonicalResult(
        title=title,
        magnet_link=magnet,
        seeds=to_count(row.seeds),
        leechers=to_count(row.leechers),
        size_bytes=parse_size_to_bytes(row.size),
        uploaded_at=parse_upload_date(
            row.uploaded, now=now or datetime.now(timezone.utc)
        ),
        source=source_name,
        external_link=(row.link or "").strip(),
        category=map_category(row.category),
        verified=bool(row.verified),
        needs_enrichment=bool(row.needs_enrichment) and not magnet,
    )
