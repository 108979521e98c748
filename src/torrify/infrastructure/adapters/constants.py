"""Shared constants for source adapters."""

from __future__ import annotations

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/131.0.0.0 Safari/537.36"
)

# Bodies shorter than this are treated as block / interstitial pages.
DEFAULT_MIN_BODY_LENGTH = 500

# Lower-cased substrings that identify a block or anti-bot interstitial.
BLOCK_MARKERS: tuple[str, ...] = (
    "checking your browser",
    "just a moment",
    "ddos-guard",
    "attention required",
    "access denied",
)
