"""Tests for the httpx page fetcher."""

from __future__ import annotations

import httpx
import pytest
import respx

from torrify.domain.entities import AdapterTimeout, AdapterTransportError
from torrify.infrastructure.adapters.fetchers import BrowserFetcher, HttpxFetcher

_URL = "https://example.org/search"


class TestHttpxFetcher:
    @respx.mock
    async def test_returns_status_and_body(self) -> None:
        respx.get(_URL).mock(return_value=httpx.Response(404, text="gone"))
        async with httpx.AsyncClient() as client:
            page = await HttpxFetcher(client).fetch(_URL, timeout=1)
        assert page.status == 404
        assert page.text == "gone"
        assert page.url == _URL

    @respx.mock
    async def test_sends_user_agent(self) -> None:
        route = respx.get(_URL).mock(return_value=httpx.Response(200, text="ok"))
        async with httpx.AsyncClient() as client:
            await HttpxFetcher(client, user_agent="TestAgent/1.0").fetch(_URL, timeout=1)
        assert route.calls.last.request.headers["User-Agent"] == "TestAgent/1.0"

    @respx.mock
    async def test_timeout_maps_to_adapter_timeout(self) -> None:
        respx.get(_URL).mock(side_effect=httpx.ConnectTimeout("slow"))
        async with httpx.AsyncClient() as client:
            with pytest.raises(AdapterTimeout):
                await HttpxFetcher(client).fetch(_URL, timeout=1)

    @respx.mock
    async def test_network_error_maps_to_transport_error(self) -> None:
        respx.get(_URL).mock(side_effect=httpx.ConnectError("refused"))
        async with httpx.AsyncClient() as client:
            with pytest.raises(AdapterTransportError, match="ConnectError"):
                await HttpxFetcher(client).fetch(_URL, timeout=1)

    @respx.mock
    async def test_owns_client_when_none_given(self) -> None:
        respx.get(_URL).mock(return_value=httpx.Response(200, text="ok"))
        fetcher = HttpxFetcher()
        assert (await fetcher.fetch(_URL, timeout=1)).status == 200
        await fetcher.aclose()

    async def test_shared_client_not_closed(self) -> None:
        async with httpx.AsyncClient() as client:
            await HttpxFetcher(client).aclose()
            assert not client.is_closed


class TestBrowserFetcher:
    def test_kind(self) -> None:
        assert BrowserFetcher().kind == "browser"

    async def test_close_without_launch_is_noop(self) -> None:
        await BrowserFetcher().aclose()
