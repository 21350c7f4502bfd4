"""Unit tests for HTTPClient."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from mostro.client.utils.http import HTTPClient

URL = "https://example.com/.well-known/lnurlp/alice"


class FakeResponse:
    """Async context manager standing in for an aiohttp response."""

    def __init__(self, body: str, error: Exception | None = None):
        self.body = body
        self.error = error

    def raise_for_status(self):
        if self.error is not None:
            raise self.error

    async def text(self):
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None


def _client(response: FakeResponse) -> tuple[HTTPClient, MagicMock]:
    session = MagicMock()
    session.closed = False
    session.get.return_value = response
    session.close = AsyncMock()
    client = HTTPClient()
    client._session = session
    return client, session


def test_default_headers_request_json():
    client = HTTPClient(headers={"User-Agent": "mostro-client"})
    assert client.headers == {"Accept": "application/json", "User-Agent": "mostro-client"}
    assert client.timeout.total == 10.0


@pytest.mark.asyncio
async def test_get_decodes_json_regardless_of_content_type():
    client, session = _client(FakeResponse('{"tag": "payRequest"}'))

    assert await client.get(URL, params={"amount": 1000}) == {"tag": "payRequest"}
    session.get.assert_called_once_with(URL, params={"amount": 1000})


@pytest.mark.asyncio
async def test_get_rejects_non_json_body():
    client, _ = _client(FakeResponse("<html>captive portal</html>"))

    with pytest.raises(ValueError, match="did not return JSON"):
        await client.get(URL)


@pytest.mark.asyncio
async def test_get_propagates_http_errors():
    error = aiohttp.ClientError("404")
    client, _ = _client(FakeResponse("", error=error))

    with pytest.raises(aiohttp.ClientError):
        await client.get(URL)


@pytest.mark.asyncio
async def test_close_closes_open_session():
    client, session = _client(FakeResponse("{}"))

    async with client:
        pass

    session.close.assert_awaited_once()
