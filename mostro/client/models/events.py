"""Relay wire objects: filters, inbound notifications and raw events."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from nostr_sdk import NostrSdkError
from nostr_sdk import PublicKey as NostrPublicKey

from ..core.enums import NotificationKind

# Parameterized replaceable event kind the broker uses for order listings.
ORDER_EVENT_KIND = 30000

_HEX_KEY = re.compile(r"^[0-9a-f]{64}$")


@dataclass(frozen=True)
class PublicKey:
    """X-only public key of an event publisher, stored as lower-case hex."""

    hex: str

    def __post_init__(self) -> None:
        if not _HEX_KEY.match(self.hex):
            raise ValueError(f"public key must be 64 lower-case hex characters: {self.hex!r}")

    @classmethod
    def parse(cls, value: str) -> PublicKey:
        """Parse a hex key or a bech32 ``npub1...`` key.

        Raises:
            ValueError: If the value is neither, or not a valid curve point
        """
        try:
            key = NostrPublicKey.parse(value.strip().lower())
        except NostrSdkError as e:
            raise ValueError(f"invalid public key {value!r}: {e}") from e
        return cls(key.to_hex())

    @property
    def npub(self) -> str:
        """Bech32 rendering of the key."""
        return NostrPublicKey.parse(self.hex).to_bech32()

    def __str__(self) -> str:
        return self.hex


@dataclass(frozen=True)
class SubscriptionFilter:
    """Filter description sent with a subscription request."""

    authors: tuple[str, ...] = ()
    kinds: tuple[int, ...] = ()
    limit: int | None = None

    @classmethod
    def orders_of(cls, publisher: PublicKey | str) -> SubscriptionFilter:
        """Filter matching every order listing published by ``publisher``."""
        if not isinstance(publisher, PublicKey):
            publisher = PublicKey.parse(publisher)
        return cls(authors=(publisher.hex,), kinds=(ORDER_EVENT_KIND,))

    def to_wire(self) -> dict[str, Any]:
        """JSON object for a REQ frame."""
        wire: dict[str, Any] = {}
        if self.authors:
            wire["authors"] = list(self.authors)
        if self.kinds:
            wire["kinds"] = list(self.kinds)
        if self.limit is not None:
            wire["limit"] = self.limit
        return wire


@dataclass(frozen=True)
class RawEvent:
    """Event delivered by a relay under one of our subscriptions."""

    relay_url: str
    subscription_id: str
    event: dict[str, Any] = field(default_factory=dict)

    @property
    def content(self) -> Any:
        return self.event.get("content")

    @property
    def event_id(self) -> str | None:
        return self.event.get("id")

    @property
    def pubkey(self) -> str | None:
        return self.event.get("pubkey")


@dataclass(frozen=True)
class RelayNotification:
    """Single frame pushed by a relay, tagged by kind."""

    kind: NotificationKind
    subscription_id: str | None = None
    event: dict[str, Any] | None = None
    message: str | None = None
    raw: tuple[Any, ...] = ()

    @classmethod
    def from_wire(cls, frame: str | bytes | list[Any]) -> RelayNotification:
        """Parse a relay frame.

        Raises:
            ValueError: If the frame is not a JSON array with a string label
        """
        if isinstance(frame, (str, bytes)):
            try:
                frame = json.loads(frame)
            except json.JSONDecodeError as e:
                raise ValueError(f"relay frame is not JSON: {e}") from e
        if not isinstance(frame, list) or not frame or not isinstance(frame[0], str):
            raise ValueError(f"relay frame is not a labelled array: {frame!r}")

        kind = NotificationKind.from_label(frame[0])
        raw = tuple(frame)
        args = frame[1:]

        if kind == NotificationKind.EVENT:
            if len(args) < 2 or not isinstance(args[0], str) or not isinstance(args[1], dict):
                raise ValueError("EVENT frame must carry a subscription id and an event object")
            return cls(kind=kind, subscription_id=args[0], event=args[1], raw=raw)

        if kind in (NotificationKind.EOSE, NotificationKind.CLOSED):
            if not args or not isinstance(args[0], str):
                raise ValueError(f"{kind.value} frame must carry a subscription id")
            message = args[1] if len(args) > 1 and isinstance(args[1], str) else None
            return cls(kind=kind, subscription_id=args[0], message=message, raw=raw)

        if kind == NotificationKind.NOTICE:
            message = args[0] if args and isinstance(args[0], str) else None
            return cls(kind=kind, message=message, raw=raw)

        if kind == NotificationKind.OK:
            message = args[2] if len(args) > 2 and isinstance(args[2], str) else None
            return cls(kind=kind, message=message, raw=raw)

        return cls(kind=kind, raw=raw)


def req_frame(subscription_id: str, filters: list[SubscriptionFilter]) -> list[Any]:
    """Client frame opening a subscription."""
    return ["REQ", subscription_id, *(f.to_wire() for f in filters)]


def close_frame(subscription_id: str) -> list[Any]:
    """Client frame closing a subscription."""
    return ["CLOSE", subscription_id]
