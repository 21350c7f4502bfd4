"""Mostro client - discover P2P orders across Nostr relays."""

from .api import MostroClient
from .core import (
    DEFAULT_RELAYS,
    ConfigError,
    DecodeError,
    DiscoveryConfig,
    InvalidInvoiceError,
    MostroError,
    OrderKind,
    OrderStatus,
    RelayError,
    RelayTimeoutError,
    TransportConfig,
    TransportError,
)
from .invoice import (
    Bolt11Invoice,
    InvalidFormat,
    LightningAddress,
    PaymentAddress,
    PaymentRequest,
    classify_invoice,
)
from .models import DiscoveryCriteria, Order, PublicKey, RawEvent, SubscriptionFilter
from .runtime import DiscoveryCoordinator, RelaySession, extract_orders
from .utils.formatting import build_orders_table, format_orders_table

__version__ = "0.1.0"

__all__ = [
    # Client
    "MostroClient",
    # Config
    "DEFAULT_RELAYS",
    "DiscoveryConfig",
    "TransportConfig",
    # Enums
    "OrderKind",
    "OrderStatus",
    # Models
    "DiscoveryCriteria",
    "Order",
    "PublicKey",
    "RawEvent",
    "SubscriptionFilter",
    # Runtime
    "DiscoveryCoordinator",
    "RelaySession",
    "extract_orders",
    # Invoices
    "Bolt11Invoice",
    "InvalidFormat",
    "LightningAddress",
    "PaymentAddress",
    "PaymentRequest",
    "classify_invoice",
    # Rendering
    "build_orders_table",
    "format_orders_table",
    # Exceptions
    "MostroError",
    "ConfigError",
    "RelayError",
    "TransportError",
    "RelayTimeoutError",
    "DecodeError",
    "InvalidInvoiceError",
]
