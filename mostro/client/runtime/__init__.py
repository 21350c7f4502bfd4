"""Runtime orchestration components."""

from .coordinator import Connector, DiscoveryCoordinator
from .pipeline import extract_orders
from .session import RelaySession, new_subscription_id

__all__ = [
    "Connector",
    "DiscoveryCoordinator",
    "RelaySession",
    "extract_orders",
    "new_subscription_id",
]
