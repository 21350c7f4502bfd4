"""Core components."""

from .config import DEFAULT_RELAYS, DiscoveryConfig, TransportConfig
from .enums import Network, NotificationKind, OrderKind, OrderStatus
from .exceptions import (
    ConfigError,
    DecodeError,
    InvalidInvoiceError,
    MostroError,
    RelayError,
    RelayTimeoutError,
    TransportError,
)

__all__ = [
    "DEFAULT_RELAYS",
    "DiscoveryConfig",
    "TransportConfig",
    "Network",
    "NotificationKind",
    "OrderKind",
    "OrderStatus",
    "MostroError",
    "ConfigError",
    "RelayError",
    "TransportError",
    "RelayTimeoutError",
    "DecodeError",
    "InvalidInvoiceError",
]
