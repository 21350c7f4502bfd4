"""High-level client exposing order discovery and invoice handling."""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from ..core.config import DiscoveryConfig
from ..core.exceptions import ConfigError
from ..invoice.classifier import InvoiceClassification, classify_invoice
from ..invoice.lightning_address import LightningAddress, PayRequestInfo, resolve_lightning_address
from ..models.events import PublicKey, SubscriptionFilter
from ..models.message import build_add_invoice_message
from ..models.order import DiscoveryCriteria, Order
from ..runtime.coordinator import Connector, DiscoveryCoordinator
from ..runtime.pipeline import extract_orders
from ..utils.http import HTTPClient

logger = logging.getLogger(__name__)


class MostroClient:
    """Entry point for the command layer.

    Example:
        >>> async with MostroClient(DiscoveryConfig.from_env()) as client:
        ...     orders = await client.discover_orders(pubkey, DiscoveryCriteria(status="Pending"))
    """

    def __init__(
        self,
        config: DiscoveryConfig | None = None,
        *,
        connector: Connector | None = None,
        http: HTTPClient | None = None,
    ) -> None:
        self._config = config or DiscoveryConfig()
        self._coordinator = DiscoveryCoordinator(self._config, connector=connector)
        self._http = http

    @property
    def config(self) -> DiscoveryConfig:
        return self._config

    def _publisher(self, publisher: PublicKey | str | None) -> PublicKey:
        if isinstance(publisher, PublicKey):
            return publisher
        value = publisher or self._config.mostro_pubkey
        if not value:
            raise ConfigError("No broker public key given and MOSTRO_PUBKEY is not set")
        try:
            return PublicKey.parse(value)
        except ValueError as e:
            raise ConfigError(f"Invalid broker public key: {e}") from e

    async def discover_orders(
        self,
        publisher: PublicKey | str | None = None,
        criteria: DiscoveryCriteria | None = None,
    ) -> list[Order]:
        """List the broker's orders across all configured relays.

        Args:
            publisher: Broker public key (defaults to ``config.mostro_pubkey``)
            criteria: Optional status/currency/kind predicates

        Raises:
            ConfigError: If no relays or no valid publisher key is configured
        """
        pubkey = self._publisher(publisher)
        order_filter = SubscriptionFilter.orders_of(pubkey)
        logger.info(
            f"Request to mostro id : {list(order_filter.authors)} "
            f"with event kind : {list(order_filter.kinds)}"
        )
        batches = await self._coordinator.discover([order_filter])
        return extract_orders(batches, criteria)

    def classify_invoice_input(self, raw: str) -> InvoiceClassification:
        """Classify a Lightning address or BOLT11 invoice string."""
        return classify_invoice(raw)

    def add_invoice_message(self, order_id: int | str | UUID, raw: str) -> str:
        """JSON envelope attaching ``raw`` as the payment request of an order.

        Raises:
            InvalidInvoiceError: If ``raw`` is neither an address nor a valid invoice
        """
        message = build_add_invoice_message(order_id, self.classify_invoice_input(raw))
        return message.as_json()

    async def resolve_lightning_address(self, address: LightningAddress | str) -> PayRequestInfo:
        """Look up the LNURL-pay parameters behind a Lightning address."""
        if self._http is None:
            self._http = HTTPClient()
        return await resolve_lightning_address(address, http=self._http)

    async def close(self) -> None:
        if self._http is not None:
            await self._http.close()

    async def __aenter__(self) -> MostroClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
