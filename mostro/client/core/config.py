"""Relay endpoints and transport tuning.

The relay set is an explicit configuration object handed to the discovery
coordinator and the client. Nothing here is module-level mutable state.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import ConfigError

# Relays the broker historically published to.
DEFAULT_RELAYS: tuple[str, ...] = (
    "wss://nostr.p2sh.co",
    "wss://relay.nostr.vision",
    "wss://nostr.itssilvestre.com",
    "wss://nostr.drss.io",
    "wss://nostr.zebedee.cloud",
    "wss://nostr.fmt.wiz.biz",
    "wss://public.nostr.swissrouting.com",
    "wss://nostr.slothy.win",
    "wss://nostr.rewardsbunny.com",
    "wss://relay.nostropolis.xyz/websocket",
    "wss://nostr.supremestack.xyz",
    "wss://nostr.shawnyeager.net",
    "wss://relay.ryzizub.com",
    "wss://relay.nostrmoto.xyz",
    "wss://jiggytom.ddns.net",
    "wss://nostr.roundrockbitcoiners.com",
    "wss://nostr.utxo.lol",
    "wss://relay.nostrid.com",
    "wss://nostr1.starbackr.me",
    "wss://nostr-relay.schnitzel.world",
    "wss://sg.qemura.xyz",
    "wss://nostr.digitalreformation.info",
    "wss://nostr-relay.usebitcoin.space",
    "wss://nostr.bch.ninja",
    "wss://nostr.demovement.net",
    "wss://nostr.massmux.com",
    "wss://nostr-pub1.southflorida.ninja",
    "wss://relay.nostr.nu",
    "wss://nostr.easydns.ca",
    "wss://no-str.org",
    "wss://nostrical.com",
    "wss://student.chadpolytechnic.com",
)

DEFAULT_RELAY_TIMEOUT = 3.0
DEFAULT_MAX_CONCURRENCY = 8


@dataclass(frozen=True)
class TransportConfig:
    """Websocket connection settings for a single relay."""

    open_timeout: float = 10.0
    ping_interval: float | None = 30.0
    ping_timeout: float | None = 10.0
    close_timeout: float = 5.0
    max_size: int | None = None  # bytes; None = websockets default
    max_queue: int | None = 1024  # number of frames queued; None = websockets default

    def _connect_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``websockets.connect``."""
        kwargs: dict[str, Any] = {
            "open_timeout": self.open_timeout,
            "ping_interval": self.ping_interval,
            "ping_timeout": self.ping_timeout,
            "close_timeout": self.close_timeout,
        }
        # Only include size/queue if not None to keep library defaults
        if self.max_size is not None:
            kwargs["max_size"] = self.max_size
        if self.max_queue is not None:
            kwargs["max_queue"] = self.max_queue
        return kwargs


@dataclass(frozen=True)
class DiscoveryConfig:
    """Settings for one discovery client.

    Attributes:
        relays: Relay websocket URLs, queried independently
        relay_timeout: Deadline in seconds for one relay's subscription
        max_concurrency: Relay sessions allowed in flight (1 = one at a time)
        transport: Websocket settings applied to every relay connection
        mostro_pubkey: Default broker public key (hex or npub)
    """

    relays: tuple[str, ...] = DEFAULT_RELAYS
    relay_timeout: float = DEFAULT_RELAY_TIMEOUT
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    transport: TransportConfig = field(default_factory=TransportConfig)
    mostro_pubkey: str | None = None

    def __post_init__(self) -> None:
        """Validate and normalize configuration."""
        relays = tuple(dict.fromkeys(r.strip() for r in self.relays if r.strip()))
        for url in relays:
            if not url.startswith(("ws://", "wss://")):
                raise ConfigError(f"Relay URL must use ws:// or wss://: {url!r}")
        object.__setattr__(self, "relays", relays)

        if self.relay_timeout <= 0:
            raise ConfigError("relay_timeout must be positive")
        if self.max_concurrency < 1:
            raise ConfigError("max_concurrency must be at least 1")

    def with_relays(self, relays: Iterable[str]) -> DiscoveryConfig:
        """Return a copy of this config targeting other relays."""
        return DiscoveryConfig(
            relays=tuple(relays),
            relay_timeout=self.relay_timeout,
            max_concurrency=self.max_concurrency,
            transport=self.transport,
            mostro_pubkey=self.mostro_pubkey,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DiscoveryConfig:
        """Build a config from ``MOSTRO_*`` environment variables.

        Recognized variables:
            MOSTRO_RELAYS: Comma separated relay URLs
            MOSTRO_RELAY_TIMEOUT: Per-relay deadline in seconds
            MOSTRO_MAX_CONCURRENCY: Relay sessions in flight
            MOSTRO_PUBKEY: Broker public key

        Unset variables fall back to the defaults.

        Raises:
            ConfigError: If a numeric variable cannot be parsed
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, Any] = {}

        relays = env.get("MOSTRO_RELAYS")
        if relays:
            kwargs["relays"] = tuple(r for r in relays.split(",") if r.strip())

        timeout = env.get("MOSTRO_RELAY_TIMEOUT")
        if timeout:
            try:
                kwargs["relay_timeout"] = float(timeout)
            except ValueError as e:
                raise ConfigError(f"Invalid MOSTRO_RELAY_TIMEOUT: {timeout!r}") from e

        concurrency = env.get("MOSTRO_MAX_CONCURRENCY")
        if concurrency:
            try:
                kwargs["max_concurrency"] = int(concurrency)
            except ValueError as e:
                raise ConfigError(f"Invalid MOSTRO_MAX_CONCURRENCY: {concurrency!r}") from e

        pubkey = env.get("MOSTRO_PUBKEY")
        if pubkey:
            kwargs["mostro_pubkey"] = pubkey.strip()

        return cls(**kwargs)
