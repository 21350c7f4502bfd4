"""Fan a relay session out to every configured relay.

Architecture:
    Each relay is queried independently: its own connection, its own
    subscription id, its own deadline. A relay that times out, refuses the
    connection or fails in any other way contributes no batch, and the run
    goes on with the others. ``discover`` returns only once every relay has
    reached a terminal state.

    ``max_concurrency`` bounds the sessions in flight; ``1`` queries relays
    one after another in configuration order.

    Batches are appended from tasks on a single event loop, so the collector
    needs no lock. Batch order follows completion order and is not
    guaranteed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from time import perf_counter

from ..core.config import DiscoveryConfig
from ..core.exceptions import ConfigError, RelayTimeoutError, TransportError
from ..io.ws.transport import RelayTransport, open_relay
from ..models.events import RawEvent, SubscriptionFilter
from .session import RelaySession
from .telemetry import log_discovery_completed, log_relay_failed

logger = logging.getLogger(__name__)

Connector = Callable[[str], AbstractAsyncContextManager[RelayTransport]]


class DiscoveryCoordinator:
    """Collects event batches from all relays of a config."""

    def __init__(
        self,
        config: DiscoveryConfig,
        connector: Connector | None = None,
    ) -> None:
        """Initialize coordinator.

        Args:
            config: Relays, per-relay deadline and concurrency bound
            connector: Opens a transport for a relay URL (defaults to a
                websocket connection per relay)
        """
        self._config = config
        self._connector = connector or self._default_connector

    @property
    def config(self) -> DiscoveryConfig:
        return self._config

    def _default_connector(self, url: str) -> AbstractAsyncContextManager[RelayTransport]:
        return open_relay(url, self._config.transport)

    async def discover(self, filters: list[SubscriptionFilter]) -> list[list[RawEvent]]:
        """Run one session per relay and gather the non-empty batches.

        Raises:
            ConfigError: If no relays are configured
        """
        relays = self._config.relays
        if not relays:
            raise ConfigError("No relays configured for discovery")

        semaphore = asyncio.Semaphore(self._config.max_concurrency)
        batches: list[list[RawEvent]] = []
        started = perf_counter()

        async def run(url: str) -> None:
            async with semaphore:
                batch = await self._query_relay(url, filters)
            if batch:
                batches.append(batch)

        await asyncio.gather(*(run(url) for url in relays))

        log_discovery_completed(
            relays=len(relays),
            batches=len(batches),
            events=sum(len(b) for b in batches),
            latency_ms=(perf_counter() - started) * 1000.0,
        )
        return batches

    async def _query_relay(self, url: str, filters: list[SubscriptionFilter]) -> list[RawEvent]:
        """Query one relay; every failure is logged and yields no events."""
        logger.info(f"Requesting to relay : {url}")
        try:
            async with self._connector(url) as transport:
                session = RelaySession(
                    transport, close_timeout=self._config.transport.close_timeout
                )
                events = await session.collect(filters, timeout=self._config.relay_timeout)
        except (RelayTimeoutError, TransportError) as e:
            log_relay_failed(relay_url=url, error=e)
            return []
        except Exception as e:  # noqa: BLE001
            logger.error(f"Unexpected error querying relay {url}: {e}", exc_info=True)
            log_relay_failed(relay_url=url, error=e)
            return []

        if not events:
            logger.info(f"No order found on relay {url}")
        return events
