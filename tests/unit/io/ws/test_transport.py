"""Unit tests for RelayConnection.

Tests focus on connection setup, frame broadcasting, and close handling.
"""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, patch

import pytest
import websockets

from mostro.client.core.config import TransportConfig
from mostro.client.core.enums import NotificationKind
from mostro.client.core.exceptions import TransportError
from mostro.client.io.ws.transport import RelayConnection, open_relay

URL = "wss://relay.example.com"


class FakeWebSocket:
    """Websocket stand-in fed through an inbound queue; ``None`` ends the stream."""

    def __init__(self):
        self.inbound: asyncio.Queue = asyncio.Queue()
        self.sent: list[str] = []
        self.closed = False
        self.send_error: Exception | None = None

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self.inbound.get()
        if item is None:
            raise StopAsyncIteration
        return item

    async def send(self, message):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(message)

    async def close(self):
        self.closed = True
        self.inbound.put_nowait(None)


async def next_frame(stream):
    return await asyncio.wait_for(stream.__anext__(), timeout=1.0)


@pytest.fixture
def fake_ws():
    return FakeWebSocket()


@pytest.fixture
def mock_connect(fake_ws):
    with patch("websockets.connect", new=AsyncMock(return_value=fake_ws)) as connect:
        yield connect


class TestRelayConnection:
    """Test RelayConnection."""

    def test_init_default_config(self):
        connection = RelayConnection(URL)
        assert connection.url == URL
        assert connection._conf.ping_interval == 30
        assert not connection.is_connected

    @pytest.mark.asyncio
    async def test_connect_passes_transport_options(self, mock_connect):
        config = TransportConfig(open_timeout=2.0, max_size=2048)
        connection = RelayConnection(URL, config)

        await connection.connect()
        try:
            assert connection.is_connected
            kwargs = mock_connect.call_args.kwargs
            assert mock_connect.call_args.args == (URL,)
            assert kwargs["open_timeout"] == 2.0
            assert kwargs["max_size"] == 2048
        finally:
            await connection.close()

    @pytest.mark.asyncio
    async def test_connect_failure_raises_transport_error(self):
        with patch("websockets.connect", new=AsyncMock(side_effect=OSError("refused"))):
            connection = RelayConnection(URL)
            with pytest.raises(TransportError) as exc_info:
                await connection.connect()

        assert exc_info.value.url == URL
        assert "refused" in str(exc_info.value)
        assert not connection.is_connected

    @pytest.mark.asyncio
    async def test_send_requires_connection(self):
        connection = RelayConnection(URL)
        with pytest.raises(TransportError, match="Not connected"):
            await connection.send(["CLOSE", "abc"])

    @pytest.mark.asyncio
    async def test_send_serializes_frame(self, mock_connect, fake_ws):
        async with RelayConnection(URL) as connection:
            await connection.send(["REQ", "abc", {"kinds": [30000]}])

        assert json.loads(fake_ws.sent[0]) == ["REQ", "abc", {"kinds": [30000]}]
        assert fake_ws.closed

    @pytest.mark.asyncio
    async def test_send_on_closed_socket(self, mock_connect, fake_ws):
        fake_ws.send_error = websockets.exceptions.ConnectionClosed(None, None)

        async with RelayConnection(URL) as connection:
            with pytest.raises(TransportError, match="closed"):
                await connection.send(["CLOSE", "abc"])
            assert not connection.is_connected

    @pytest.mark.asyncio
    async def test_frames_are_broadcast_to_every_listener(self, mock_connect, fake_ws):
        async with RelayConnection(URL) as connection:
            async with connection.listen() as first, connection.listen() as second:
                fake_ws.inbound.put_nowait('["EOSE", "abc"]')

                for stream in (first, second):
                    notification = await next_frame(stream)
                    assert notification.kind == NotificationKind.EOSE
                    assert notification.subscription_id == "abc"

    @pytest.mark.asyncio
    async def test_malformed_frames_are_dropped(self, mock_connect, fake_ws):
        async with RelayConnection(URL) as connection:
            async with connection.listen() as stream:
                fake_ws.inbound.put_nowait("not json")
                fake_ws.inbound.put_nowait('{"not": "a frame"}')
                fake_ws.inbound.put_nowait('["NOTICE", "slow down"]')

                notification = await next_frame(stream)
                assert notification.kind == NotificationKind.NOTICE
                assert notification.message == "slow down"

    @pytest.mark.asyncio
    async def test_remote_close_ends_listeners(self, mock_connect, fake_ws):
        async with RelayConnection(URL) as connection:
            async with connection.listen() as stream:
                fake_ws.inbound.put_nowait(None)

                with pytest.raises(TransportError):
                    await next_frame(stream)
            assert not connection.is_connected

    @pytest.mark.asyncio
    async def test_listen_after_close(self, mock_connect):
        connection = RelayConnection(URL)
        await connection.connect()
        await connection.close()

        async with connection.listen() as stream:
            with pytest.raises(TransportError):
                await next_frame(stream)


@pytest.mark.asyncio
async def test_open_relay_closes_on_exit(mock_connect, fake_ws):
    async with open_relay(URL) as connection:
        assert connection.is_connected

    assert fake_ws.closed
    assert not connection.is_connected
