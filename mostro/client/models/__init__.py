"""Data models.

Architecture:
    Orders and criteria are Pydantic v2 models (frozen, validated on decode);
    relay wire objects are frozen dataclasses since they are built by this
    library, never by untrusted input directly.

Model Categories:
    - Domain: Order, DiscoveryCriteria
    - Relay wire: PublicKey, SubscriptionFilter, RawEvent, RelayNotification
    - Outbound: Message, MessageKind, Action
"""

from .events import (
    ORDER_EVENT_KIND,
    PublicKey,
    RawEvent,
    RelayNotification,
    SubscriptionFilter,
    close_frame,
    req_frame,
)
from .message import Action, Message, MessageKind, build_add_invoice_message
from .order import DiscoveryCriteria, Order

__all__ = [
    "ORDER_EVENT_KIND",
    "Action",
    "DiscoveryCriteria",
    "Message",
    "MessageKind",
    "Order",
    "PublicKey",
    "RawEvent",
    "RelayNotification",
    "SubscriptionFilter",
    "build_add_invoice_message",
    "close_frame",
    "req_frame",
]
