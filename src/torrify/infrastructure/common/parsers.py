"""Parsing utilities for data extraction."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any
from urllib.parse import quote

_SIZE_RE = re.compile(r"([\d.]+)\s*([KMGT]?)(I?)B(?:YTES?)?\b")

_SIZE_MULTIPLIERS = {
    "": 1,
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
}

_MAGNET_RE = re.compile(r"^magnet:\?xt=urn:btih:[0-9a-fA-F]{40}(?:&.*)?$")
_HEX40_RE = re.compile(r"^[0-9a-fA-F]{40}$")

_WHITESPACE_RE = re.compile(r"\s+")

_RELATIVE_RE = re.compile(
    r"^(\d+|an?|one)\s+"
    r"(second|sec|minute|min|hour|hr|day|week|month|mo|year|yr)s?\s+ago$"
)
_UNIT_SECONDS = {
    "second": 1,
    "sec": 1,
    "minute": 60,
    "min": 60,
    "hour": 3600,
    "hr": 3600,
    "day": 86_400,
    "week": 7 * 86_400,
    "month": 30 * 86_400,
    "mo": 30 * 86_400,
    "year": 365 * 86_400,
    "yr": 365 * 86_400,
}

# "Today 14:02", "Y-day 23:10" (Pirate Bay), "Yesterday"
_DAY_WORD_RE = re.compile(r"^(today|y-day|yesterday)(?:\s+(\d{1,2}):(\d{2}))?$")
# "03-14 2023" (older than a year) / "03-14 09:41" (this year)
_MONTH_DAY_YEAR_RE = re.compile(r"^(\d{2})-(\d{2})\s+(\d{4})$")
_MONTH_DAY_TIME_RE = re.compile(r"^(\d{2})-(\d{2})\s+(\d{1,2}):(\d{2})$")
_ORDINAL_RE = re.compile(r"(\d+)(st|nd|rd|th)\b")

_ABSOLUTE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%d %b %Y",
    "%d %B %Y",
    "%b. %d '%y",
    "%b %d '%y",
    "%b. %d %Y",
)

DEFAULT_TRACKERS: tuple[str, ...] = (
    "udp://tracker.opentrackr.org:1337/announce",
    "udp://open.stealth.si:80/announce",
    "udp://tracker.torrent.eu.org:451/announce",
    "udp://tracker.bittor.pw:1337/announce",
    "udp://public.popcorn-tracker.org:6969/announce",
    "udp://tracker.dler.org:6969/announce",
    "udp://exodus.desync.com:6969/announce",
    "udp://open.demonii.com:1337/announce",
)

def parse_size_to_bytes(size: Any) -> int:
    """Parse size string to bytes.

    Supports formats:
        - 1234 / "1234" (raw bytes)
        - "4.5 GB", "500 MB", "1.2 TB"
        - "1.4 GiB", "700 MiB" (binary spellings, same table)
        - "1,024.5 MB" (thousands separators)

    Args:
        size: Size string or number.

    Returns:
        Size in bytes (int), 0 when unparsable.
    """
    if size is None or isinstance(size, bool):
        return 0

    if isinstance(size, (int, float)):
        return max(0, int(size))

    text = str(size).replace(",", "").replace("\xa0", " ").strip().upper()
    if not text:
        return 0

    if text.isdigit():
        return int(text)

    match = _SIZE_RE.search(text)
    if not match:
        return 0

    try:
        value = float(match.group(1))
    except ValueError:
        return 0

    return max(0, int(value * _SIZE_MULTIPLIERS[match.group(2)]))

def parse_upload_date(value: Any, *, now: datetime | None = None) -> datetime:
    """Parse an upload timestamp into a tz-aware UTC datetime.

    Accepts unix timestamps (seconds or milliseconds), ISO-8601, a handful
    of absolute site formats and relative phrases ("3 days ago",
    "Y-day 14:02", "yesterday"). Anything else resolves to *now*.
    """
    now = now or datetime.now(timezone.utc)

    if value is None or isinstance(value, bool):
        return now

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, (int, float)):
        return _from_timestamp(value, now)

    text = _WHITESPACE_RE.sub(" ", str(value).replace("\xa0", " ")).strip()
    if not text:
        return now

    if text.isdigit():
        return _from_timestamp(int(text), now)

    lowered = text.lower()
    if lowered in ("now", "just now"):
        return now

    relative = _parse_relative(lowered, now)
    if relative is not None:
        return relative

    absolute = _parse_absolute(text, now)
    if absolute is not None:
        return absolute

    return now

def _from_timestamp(value: float, now: datetime) -> datetime:
    if value <= 0:
        return now
    if value > 1e12:  # milliseconds
        value = value / 1000
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return now

def _parse_relative(text: str, now: datetime) -> datetime | None:
    match = _RELATIVE_RE.match(text)
    if match:
        amount_raw, unit = match.groups()
        amount = int(amount_raw) if amount_raw.isdigit() else 1
        return now - timedelta(seconds=amount * _UNIT_SECONDS[unit])

    match = _DAY_WORD_RE.match(text)
    if match:
        word, hour, minute = match.groups()
        day = now if word == "today" else now - timedelta(days=1)
        if hour is None:
            return day
        try:
            return day.replace(
                hour=int(hour), minute=int(minute), second=0, microsecond=0
            )
        except ValueError:
            return day

    return None

def _parse_absolute(text: str, now: datetime) -> datetime | None:
    match = _MONTH_DAY_YEAR_RE.match(text)
    if match:
        month, day, year = (int(g) for g in match.groups())
        return _safe_datetime(year, month, day)

    match = _MONTH_DAY_TIME_RE.match(text)
    if match:
        month, day, hour, minute = (int(g) for g in match.groups())
        return _safe_datetime(now.year, month, day, hour, minute)

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        parsed = None
    if parsed is not None:
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    cleaned = _ORDINAL_RE.sub(r"\1", text)
    for fmt in _ABSOLUTE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None

def _safe_datetime(
    year: int, month: int, day: int, hour: int = 0, minute: int = 0
) -> datetime | None:
    try:
        return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)
    except ValueError:
        return None

def is_valid_magnet(value: str | None) -> bool:
    return bool(value) and bool(_MAGNET_RE.match(value.strip()))

def build_magnet(
    info_hash: str, name: str, trackers: tuple[str, ...] = DEFAULT_TRACKERS
) -> str:
    """Build a magnet URI from a bare info-hash. Returns "" for invalid hashes."""
    if not info_hash or not _HEX40_RE.match(info_hash.strip()):
        return ""
    parts = [f"magnet:?xt=urn:btih:{info_hash.strip().lower()}"]
    if name:
        parts.append(f"dn={quote(name)}")
    parts.extend(f"tr={quote(tr, safe='')}" for tr in trackers)
    return "&".join(parts)
