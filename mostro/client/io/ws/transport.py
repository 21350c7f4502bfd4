"""Websocket connection to a single relay.

Architecture:
    One background reader task owns ``recv`` on the socket and fans every
    parsed frame out to all active listeners. A relay session opens a
    listener *before* sending its REQ so no frame addressed to it can be
    missed, then filters the shared stream by subscription id. Several
    sessions may therefore share one connection.

    When the socket closes, each listener's iterator raises TransportError.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Protocol

import websockets

from ...core.config import TransportConfig
from ...core.exceptions import TransportError
from ...models.events import RelayNotification

logger = logging.getLogger(__name__)

# Queued to listeners when the connection is gone.
_CLOSED = object()


class RelayTransport(Protocol):
    """Surface a relay session needs from a connection."""

    url: str

    async def send(self, frame: list[Any]) -> None:
        """Send one client frame (REQ, CLOSE, ...)."""
        ...

    def listen(self) -> Any:
        """Async context manager yielding an iterator of RelayNotification."""
        ...


class RelayConnection:
    """Websocket connection to one relay with broadcast notifications."""

    def __init__(self, url: str, config: TransportConfig | None = None) -> None:
        self.url = url
        self._conf = config or TransportConfig()
        self._ws: Any = None
        self._reader_task: asyncio.Task[None] | None = None
        self._listeners: set[asyncio.Queue[Any]] = set()
        self._closed = False

    @property
    def is_connected(self) -> bool:
        return self._ws is not None and not self._closed

    async def connect(self) -> None:
        """Open the websocket and start the reader task.

        Raises:
            TransportError: If the relay cannot be reached
        """
        if self._ws is not None:
            return
        try:
            self._ws = await websockets.connect(self.url, **self._conf._connect_kwargs())
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._closed = True
            raise TransportError(f"Failed to connect to {self.url}: {e}", url=self.url) from e

        self._closed = False
        self._reader_task = asyncio.create_task(self._read_loop())
        logger.debug(f"Connected to relay {self.url}")

    async def close(self) -> None:
        """Stop the reader and close the socket."""
        if self._reader_task is not None:
            self._reader_task.cancel()
            await asyncio.gather(self._reader_task, return_exceptions=True)
            self._reader_task = None

        if self._ws is not None:
            try:
                await self._ws.close()
            except Exception as e:  # noqa: BLE001
                logger.debug(f"Error closing websocket to {self.url}: {e}")
            self._ws = None

        self._mark_closed()

    async def send(self, frame: list[Any]) -> None:
        """Serialize and send a client frame.

        Raises:
            TransportError: If not connected or the socket is closed
        """
        if not self.is_connected:
            raise TransportError(f"Not connected to {self.url}", url=self.url)
        try:
            await self._ws.send(json.dumps(frame))
        except websockets.exceptions.ConnectionClosed as e:
            self._mark_closed()
            raise TransportError(f"Connection to {self.url} closed: {e}", url=self.url) from e
        logger.debug(f"Sent to {self.url}: {frame[0]} {frame[1] if len(frame) > 1 else ''}")

    @asynccontextmanager
    async def listen(self) -> AsyncIterator[AsyncIterator[RelayNotification]]:
        """Register a listener for every frame received from now on."""
        queue: asyncio.Queue[Any] = asyncio.Queue()
        if self._closed:
            queue.put_nowait(_CLOSED)
        self._listeners.add(queue)
        try:
            yield self._drain(queue)
        finally:
            self._listeners.discard(queue)

    async def _drain(self, queue: asyncio.Queue[Any]) -> AsyncIterator[RelayNotification]:
        while True:
            item = await queue.get()
            if item is _CLOSED:
                raise TransportError(f"Connection to {self.url} closed", url=self.url)
            yield item

    def _broadcast(self, item: Any) -> None:
        for queue in list(self._listeners):
            queue.put_nowait(item)

    def _mark_closed(self) -> None:
        if not self._closed:
            self._closed = True
            self._broadcast(_CLOSED)

    async def _read_loop(self) -> None:
        try:
            async for message in self._ws:
                try:
                    notification = RelayNotification.from_wire(message)
                except ValueError as e:
                    logger.warning(f"Dropping malformed frame from {self.url}: {e}")
                    continue
                self._broadcast(notification)
        except asyncio.CancelledError:
            raise
        except websockets.exceptions.ConnectionClosed as e:
            logger.warning(f"Relay {self.url} closed the connection: {e}")
        except Exception as e:  # noqa: BLE001
            logger.error(f"Relay {self.url} read error: {e}")
        finally:
            self._mark_closed()

    async def __aenter__(self) -> RelayConnection:
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


@asynccontextmanager
async def open_relay(url: str, config: TransportConfig | None = None) -> AsyncIterator[RelayConnection]:
    """Connect to ``url`` for the duration of the block."""
    connection = RelayConnection(url, config)
    await connection.connect()
    try:
        yield connection
    finally:
        await connection.close()
