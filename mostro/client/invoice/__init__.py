"""Invoice input parsing and classification."""

from .bolt11 import Bolt11Invoice, check_invoice, parse_bolt11
from .classifier import (
    InvalidFormat,
    InvoiceClassification,
    PaymentAddress,
    PaymentRequest,
    classify_invoice,
)
from .lightning_address import LightningAddress, PayRequestInfo, resolve_lightning_address

__all__ = [
    "Bolt11Invoice",
    "InvalidFormat",
    "InvoiceClassification",
    "LightningAddress",
    "PayRequestInfo",
    "PaymentAddress",
    "PaymentRequest",
    "check_invoice",
    "classify_invoice",
    "parse_bolt11",
    "resolve_lightning_address",
]
