"""Common infrastructure utilities."""

from __future__ import annotations

from .converters import to_count, to_int
from .parsers import (
    build_magnet,
    is_valid_magnet,
    parse_size_to_bytes,
    parse_upload_date,
)
from .rate_limiter import MinIntervalRateLimiter

__all__ = [
    "MinIntervalRateLimiter",
    "build_magnet",
    "is_valid_magnet",
    "parse_size_to_bytes",
    "parse_upload_date",
    "to_count",
    "to_int",
]
