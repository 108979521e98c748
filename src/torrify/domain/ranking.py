"""Cross-source dedup, stable sort and truncation."""

from __future__ import annotations

from typing import Any, Callable, Iterable

from torrify.domain.entities.search import (
    SORT_KEYS,
    SORT_ORDERS,
    CanonicalResult,
    InputError,
)

# Public query-string spellings → internal sort keys
SORT_ALIASES: dict[str, str] = {
    "size": "size_bytes",
    "date": "uploaded_at",
    "uploaded": "uploaded_at",
}


def health(result: CanonicalResult) -> float:
    """Seed-to-leech ratio; seeds alone when nobody is leeching."""
    if result.leechers > 0:
        return result.seeds / result.leechers
    return float(result.seeds)


_SORT_FUNCS: dict[str, Callable[[CanonicalResult], Any]] = {
    "seeds": lambda r: r.seeds,
    "leechers": lambda r: r.leechers,
    "size_bytes": lambda r: r.size_bytes,
    "uploaded_at": lambda r: r.uploaded_at,
    "health": health,
}


def resolve_sort_key(sort_by: str | None) -> str:
    """Translate API spellings and validate. Raises InputError on unknown keys."""
    key = (sort_by or "seeds").strip()
    key = SORT_ALIASES.get(key, key)
    if key not in SORT_KEYS:
        raise InputError(f"Unsupported sortBy: {sort_by!r}")
    return key


def resolve_sort_order(sort_order: str | None) -> str:
    order = (sort_order or "desc").strip().lower()
    if order not in SORT_ORDERS:
        raise InputError(f"Unsupported sortOrder: {sort_order!r}")
    return order


def rank(
    results: Iterable[CanonicalResult],
    sort_by: str = "seeds",
    sort_order: str = "desc",
    limit: int | None = None,
) -> list[CanonicalResult]:
    """Stable sort on *sort_by*, then truncate to *limit*.

    Python's sort is stable in both directions (``reverse=True`` keeps
    equal elements in input order), so ties never reorder.
    """
    key = resolve_sort_key(sort_by)
    order = resolve_sort_order(sort_order)

    ranked = sorted(results, key=_SORT_FUNCS[key], reverse=(order == "desc"))
    if limit is not None:
        ranked = ranked[: max(0, limit)]
    return ranked


def dedupe(results: Iterable[CanonicalResult]) -> list[CanonicalResult]:
    """Drop later rows that share an info-hash with an earlier row.

    Rows without a hash are never merged.
    """
    seen: set[str] = set()
    out: list[CanonicalResult] = []
    for result in results:
        info_hash = result.info_hash
        if info_hash:
            if info_hash in seen:
                continue
            seen.add(info_hash)
        out.append(result)
    return out
