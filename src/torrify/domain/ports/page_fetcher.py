"""Page Fetcher Port - how adapters obtain a page body."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class FetchedPage:
    url: str
    status: int
    text: str


class PageFetcherPort(Protocol):
    """
    Fetches one URL and returns its body.

    Implementations:
      - HttpxFetcher (plain HTTP)
      - BrowserFetcher (headless Chromium via Playwright)

    Network failures raise AdapterTransportError, timeouts AdapterTimeout.
    HTTP error statuses are returned, not raised.
    """

    kind: str

    async def fetch(self, url: str, *, timeout: float) -> FetchedPage: ...

    async def aclose(self) -> None: ...
