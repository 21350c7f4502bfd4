"""Shared fixtures: in-memory relays, order events and invoice builders."""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import Any

import pytest

from mostro.client.core.enums import NotificationKind
from mostro.client.core.exceptions import TransportError
from mostro.client.models.events import ORDER_EVENT_KIND, RelayNotification
from mostro.client.utils import bech32

# x coordinate of the secp256k1 generator: always a valid public key
MOSTRO_PUBKEY = "79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"


class FakeRelay:
    """In-memory relay transport.

    On REQ it pushes ``prelude`` notifications, then one EVENT per stored
    event, then EOSE (unless ``eose`` is False, leaving the subscription
    open forever).
    """

    def __init__(
        self,
        url: str,
        events: list[dict[str, Any]] | None = None,
        *,
        eose: bool = True,
        prelude: list[Callable[[str], RelayNotification]] | None = None,
        fail_send: bool = False,
        fail_close: bool = False,
        drop_after_events: bool = False,
    ) -> None:
        self.url = url
        self.events = events or []
        self.eose = eose
        self.prelude = prelude or []
        self.fail_send = fail_send
        self.fail_close = fail_close
        self.drop_after_events = drop_after_events
        self.sent: list[list[Any]] = []
        self._listeners: list[asyncio.Queue[Any]] = []

    @property
    def req_ids(self) -> list[str]:
        return [frame[1] for frame in self.sent if frame[0] == "REQ"]

    @property
    def close_ids(self) -> list[str]:
        return [frame[1] for frame in self.sent if frame[0] == "CLOSE"]

    def _deliver(self, item: Any) -> None:
        for queue in self._listeners:
            queue.put_nowait(item)

    async def send(self, frame: list[Any]) -> None:
        self.sent.append(frame)
        if frame[0] == "CLOSE" and self.fail_close:
            raise TransportError("close failed", url=self.url)
        if self.fail_send:
            raise TransportError("send failed", url=self.url)
        if frame[0] != "REQ":
            return

        subscription_id = frame[1]
        for make in self.prelude:
            self._deliver(make(subscription_id))
        for event in self.events:
            self._deliver(
                RelayNotification(
                    kind=NotificationKind.EVENT,
                    subscription_id=subscription_id,
                    event=event,
                )
            )
        if self.drop_after_events:
            self._deliver(TransportError("connection dropped", url=self.url))
        elif self.eose:
            self._deliver(RelayNotification(kind=NotificationKind.EOSE, subscription_id=subscription_id))

    @asynccontextmanager
    async def listen(self) -> AsyncIterator[AsyncIterator[RelayNotification]]:
        queue: asyncio.Queue[Any] = asyncio.Queue()
        self._listeners.append(queue)

        async def notifications() -> AsyncIterator[RelayNotification]:
            while True:
                item = await queue.get()
                if isinstance(item, Exception):
                    raise item
                yield item

        try:
            yield notifications()
        finally:
            self._listeners.remove(queue)


@pytest.fixture
def make_relay() -> Callable[..., FakeRelay]:
    """Factory for in-memory relays."""
    return FakeRelay


@pytest.fixture
def make_connector():
    """Build a connector over a mapping of URL -> FakeRelay or exception."""

    def factory(relays: dict[str, FakeRelay | Exception]):
        @asynccontextmanager
        async def connector(url: str) -> AsyncIterator[FakeRelay]:
            relay = relays[url]
            if isinstance(relay, Exception):
                raise relay
            yield relay

        return connector

    return factory


@pytest.fixture
def mostro_pubkey() -> str:
    return MOSTRO_PUBKEY


@pytest.fixture
def order_event() -> Callable[..., dict[str, Any]]:
    """Factory for broker order events."""

    def factory(
        order_id: int,
        status: str = "Pending",
        kind: str = "Sell",
        fiat_code: str = "USD",
        **overrides: Any,
    ) -> dict[str, Any]:
        content = {
            "id": order_id,
            "kind": kind,
            "status": status,
            "amount": 100_000,
            "fiat_code": fiat_code,
            "fiat_amount": 50,
            "payment_method": "bank transfer",
            "prime": 1,
            "payment_request": None,
            "created_at": 1_680_000_000,
        }
        content.update(overrides)
        return {
            "id": f"{order_id:064x}",
            "pubkey": MOSTRO_PUBKEY,
            "created_at": 1_680_000_000,
            "kind": ORDER_EVENT_KIND,
            "tags": [],
            "content": json.dumps(content),
            "sig": "00" * 64,
        }

    return factory


def _int_words(value: int, length: int) -> list[int]:
    return [(value >> 5 * (length - 1 - i)) & 31 for i in range(length)]


def _tagged(tag: str, words: list[int]) -> list[int]:
    return [bech32.CHARSET.index(tag)] + _int_words(len(words), 2) + words


@pytest.fixture
def make_invoice() -> Callable[..., str]:
    """Build structurally valid BOLT11 strings (zeroed signature)."""

    def factory(
        hrp: str = "lnbc2500u",
        timestamp: int | None = None,
        description: str | None = "1 cup coffee",
        expiry: int | None = None,
        payment_hash: bytes | None = bytes(range(32)),
    ) -> str:
        ts = int(time.time()) if timestamp is None else timestamp
        words = _int_words(ts, 7)
        if payment_hash is not None:
            words += _tagged("p", bech32.convertbits(payment_hash, 8, 5))
        if description is not None:
            words += _tagged("d", bech32.convertbits(description.encode("utf-8"), 8, 5))
        if expiry is not None:
            words += _tagged("x", _int_words(expiry, 2))
        words += [0] * 104
        return bech32.encode(hrp, words)

    return factory
