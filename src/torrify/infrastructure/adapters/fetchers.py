"""Page fetchers: plain HTTP (httpx) and headless browser (Playwright).

Both satisfy PageFetcherPort so an adapter never knows which one it got.
"""

from __future__ import annotations

import asyncio

import httpx
import structlog
from playwright.async_api import (
    Browser,
    BrowserContext,
    Playwright,
    async_playwright,
)

from torrify.domain.entities.search import AdapterTimeout, AdapterTransportError
from torrify.domain.ports.page_fetcher import FetchedPage

from .constants import DEFAULT_USER_AGENT

log = structlog.get_logger(__name__)


class HttpxFetcher:
    """Fetches pages through a shared ``httpx.AsyncClient``.

    The client is owned by the composition root; ``aclose`` only closes a
    client this fetcher created itself.
    """

    kind = "http"

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        follow_redirects: bool = True,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self._user_agent = user_agent
        self._follow_redirects = follow_redirects

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                follow_redirects=self._follow_redirects,
                headers={"User-Agent": self._user_agent},
            )
        return self._client

    async def fetch(self, url: str, *, timeout: float) -> FetchedPage:
        client = self._ensure_client()
        try:
            resp = await client.get(
                url,
                timeout=timeout,
                headers={
                    "User-Agent": self._user_agent,
                    "Accept": "text/html,application/json;q=0.9,*/*;q=0.8",
                },
            )
        except httpx.TimeoutException as exc:
            raise AdapterTimeout(f"timeout fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise AdapterTransportError(f"{type(exc).__name__}: {exc}") from exc

        return FetchedPage(url=str(resp.url), status=resp.status_code, text=resp.text)

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None


class BrowserFetcher:
    """Fetches pages by rendering them in headless Chromium.

    One browser and context are launched lazily and shared by every adapter
    using this fetcher; each fetch gets its own page. Cloudflare-style
    "Just a moment" challenges are waited out on a best-effort basis.
    """

    kind = "browser"

    def __init__(
        self,
        *,
        headless: bool = True,
        user_agent: str = DEFAULT_USER_AGENT,
        challenge_timeout_ms: int = 10_000,
    ) -> None:
        self._headless = headless
        self._user_agent = user_agent
        self._challenge_timeout_ms = challenge_timeout_ms
        self._pw: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._lock = asyncio.Lock()

    async def _ensure_context(self) -> BrowserContext:
        async with self._lock:
            if self._context is None:
                self._pw = await async_playwright().start()
                self._browser = await self._pw.chromium.launch(
                    headless=self._headless,
                )
                self._context = await self._browser.new_context(
                    user_agent=self._user_agent,
                    viewport={"width": 1280, "height": 720},
                )
                log.info("browser_launched", headless=self._headless)
            return self._context

    async def fetch(self, url: str, *, timeout: float) -> FetchedPage:
        try:
            ctx = await self._ensure_context()
        except Exception as exc:  # noqa: BLE001
            raise AdapterTransportError(f"browser unavailable: {exc}") from exc

        page = await ctx.new_page()
        try:
            try:
                resp = await page.goto(
                    url, wait_until="domcontentloaded", timeout=int(timeout * 1000)
                )
            except Exception as exc:  # noqa: BLE001
                if "timeout" in str(exc).lower():
                    raise AdapterTimeout(f"timeout fetching {url}") from exc
                raise AdapterTransportError(f"{type(exc).__name__}: {exc}") from exc

            status = resp.status if resp else 200
            if status < 400:
                await self._wait_for_challenge(page)
            return FetchedPage(url=page.url, status=status, text=await page.content())
        finally:
            if not page.is_closed():
                await page.close()

    async def _wait_for_challenge(self, page) -> None:
        try:
            await page.wait_for_function(
                "() => !document.title.includes('Just a moment')",
                timeout=self._challenge_timeout_ms,
            )
        except Exception:  # noqa: BLE001
            pass  # block detection downstream decides whether the body is usable

    async def aclose(self) -> None:
        """Close context, browser, and Playwright."""
        if self._context is not None:
            await self._context.close()
            self._context = None
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._pw is not None:
            await self._pw.stop()
            self._pw = None
