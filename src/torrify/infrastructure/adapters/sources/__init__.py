"""Built-in source definitions, in registry order."""

from __future__ import annotations

from .apibay import ApiBaySource
from .base import HtmlSource, JsonSource
from .leetx import LeetxSource
from .nyaa import NyaaSource
from .piratebay import PirateBaySource
from .rarbg import RarbgSource
from .yts import YtsSource

BUILTIN_SOURCES: dict[str, HtmlSource | JsonSource] = {
    source.key: source
    for source in (
        PirateBaySource(),
        ApiBaySource(),
        NyaaSource(),
        RarbgSource(),
        YtsSource(),
        LeetxSource(),
    )
}

__all__ = [
    "BUILTIN_SOURCES",
    "ApiBaySource",
    "HtmlSource",
    "JsonSource",
    "LeetxSource",
    "NyaaSource",
    "PirateBaySource",
    "RarbgSource",
    "YtsSource",
]
