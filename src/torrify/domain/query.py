"""Free-text query handling shared by every adapter."""

from __future__ import annotations

import re

from torrify.domain.entities.search import InputError

MIN_QUERY_LENGTH = 2

_QUERY_STRIP_RE = re.compile(r"[^\w\s\-.]")
_WHITESPACE_RE = re.compile(r"\s+")


def clean_query(query: str) -> str:
    """Replace characters outside word/space/-/_/. with spaces and collapse whitespace."""
    return _WHITESPACE_RE.sub(" ", _QUERY_STRIP_RE.sub(" ", query or "")).strip()


def validate_query(query: str | None) -> str:
    """Return the trimmed query or raise InputError when it is too short."""
    trimmed = (query or "").strip()
    if len(trimmed) < MIN_QUERY_LENGTH:
        raise InputError(
            f"Query must be at least {MIN_QUERY_LENGTH} characters long"
        )
    return trimmed
