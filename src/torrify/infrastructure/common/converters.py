"""Type conversion utilities."""

from __future__ import annotations

from typing import Any


def to_int(raw: str | int | None) -> int | None:
    """Convert string or int to int, return None if invalid.

    Handles various formats:
        - None → None
        - int → int (passthrough)
        - "123" → 123
        - "1,234" → 1234
        - "1 234" → 1234
        - "" → None
        - invalid → None
    """
    if raw is None or isinstance(raw, bool):
        return None

    if isinstance(raw, int):
        return raw

    if isinstance(raw, float):
        return int(raw)

    if isinstance(raw, str):
        stripped = raw.strip()
        negative = stripped.startswith("-")
        # Remove commas and spaces, extract digits only
        txt = "".join(ch for ch in stripped if ch.isdigit())
        if not txt:
            return None
        return -int(txt) if negative else int(txt)

    return None


def to_count(raw: Any) -> int:
    """Seed/leech count: invalid → 0, negatives clamped to 0."""
    value = to_int(raw)
    if value is None:
        return 0
    return max(0, value)
