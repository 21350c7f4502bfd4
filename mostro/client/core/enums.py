"""Core enumerations shared by the models, runtime and invoice parsers.

Architecture:
    String enums keep wire values and Python values identical, so models can
    be dumped back to JSON without custom encoders. The broker publishes
    PascalCase values ("WaitingBuyerInvoice"); newer brokers use kebab-case
    ("waiting-buyer-invoice"). ``from_str`` accepts both spellings.

Key Types:
    - OrderKind: Buy or Sell side of a listing
    - OrderStatus: Order lifecycle state
    - NotificationKind: Relay-to-client frame types (NIP-01)
    - Network: Bitcoin network encoded in a BOLT11 prefix
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

_SEPARATORS = re.compile(r"[-_\s]")


def _normalize(value: str) -> str:
    return _SEPARATORS.sub("", value).lower()


class _LenientEnum(str, Enum):
    """String enum that resolves values regardless of case or separators."""

    @classmethod
    def from_str(cls, value: str) -> Optional["_LenientEnum"]:
        """Get member from its wire value. Returns None if no match."""
        key = _normalize(value)
        for member in cls:
            if _normalize(member.value) == key:
                return member
        return None

    def __str__(self) -> str:
        return self.value


class OrderKind(_LenientEnum):
    """Side of an order listing."""

    BUY = "Buy"
    SELL = "Sell"


class OrderStatus(_LenientEnum):
    """Lifecycle state of an order as published by the broker."""

    ACTIVE = "Active"
    CANCELED = "Canceled"
    CANCELED_BY_ADMIN = "CanceledByAdmin"
    COMPLETED_BY_ADMIN = "CompletedByAdmin"
    COOPERATIVELY_CANCELED = "CooperativelyCanceled"
    DISPUTE = "Dispute"
    EXPIRED = "Expired"
    FIAT_SENT = "FiatSent"
    PENDING = "Pending"
    SETTLED_HOLD_INVOICE = "SettledHoldInvoice"
    SUCCESS = "Success"
    WAITING_BUYER_INVOICE = "WaitingBuyerInvoice"
    WAITING_PAYMENT = "WaitingPayment"


class NotificationKind(str, Enum):
    """Frame types a relay may push to a client."""

    EVENT = "EVENT"
    EOSE = "EOSE"  # end of stored events
    NOTICE = "NOTICE"
    CLOSED = "CLOSED"
    OK = "OK"
    OTHER = "OTHER"

    @classmethod
    def from_label(cls, label: str) -> "NotificationKind":
        try:
            kind = cls(label)
        except ValueError:
            return cls.OTHER
        return kind


class Network(str, Enum):
    """Bitcoin network a BOLT11 invoice is bound to."""

    BITCOIN = "bc"
    TESTNET = "tb"
    SIGNET = "tbs"
    REGTEST = "bcrt"
    SIMNET = "sb"

    @classmethod
    def match_prefix(cls, hrp_tail: str) -> Optional["Network"]:
        """Match the longest network prefix at the start of ``hrp_tail``."""
        for network in sorted(cls, key=lambda n: len(n.value), reverse=True):
            if hrp_tail.startswith(network.value):
                return network
        return None
