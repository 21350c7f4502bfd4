"""Classify user input as a Lightning address or a BOLT11 payment request.

Lightning addresses are passed through untouched (the broker resolves them).
BOLT11 strings are validated and re-encoded in canonical form. Anything else
yields ``InvalidFormat`` with the parser's diagnostic, and no message should
be sent for it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from ..core.exceptions import InvalidInvoiceError
from .bolt11 import Bolt11Invoice, check_invoice
from .lightning_address import LightningAddress

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentAddress:
    """Input resolved later by the counterparty via its Lightning address."""

    address: str
    lightning_address: LightningAddress


@dataclass(frozen=True)
class PaymentRequest:
    """Self-contained BOLT11 invoice."""

    invoice: Bolt11Invoice

    @property
    def encoded(self) -> str:
        return self.invoice.encoded


@dataclass(frozen=True)
class InvalidFormat:
    """Input that is neither an address nor a valid invoice."""

    value: str
    reason: str


InvoiceClassification = Union[PaymentAddress, PaymentRequest, InvalidFormat]


def _as_address(value: str) -> LightningAddress | None:
    try:
        return LightningAddress.parse(value)
    except InvalidInvoiceError:
        return None


def classify_invoice(value: str, now: float | None = None) -> InvoiceClassification:
    """Classify a raw invoice string.

    Args:
        value: User-supplied Lightning address or BOLT11 invoice
        now: Reference unix time for the expiry check (defaults to now)
    """
    address = _as_address(value)
    if address is not None:
        return PaymentAddress(address=value, lightning_address=address)

    try:
        invoice = check_invoice(value, now=now)
    except InvalidInvoiceError as e:
        logger.info(f"Rejected invoice input: {e}")
        return InvalidFormat(value=value, reason=str(e))
    return PaymentRequest(invoice=invoice)
