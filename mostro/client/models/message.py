"""Outbound message envelope sent to the broker.

Only the "add invoice" action is built here; signing and delivery belong to
the caller.
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from ..core.exceptions import InvalidInvoiceError
from ..invoice.classifier import InvalidFormat, InvoiceClassification, PaymentAddress, PaymentRequest

PROTOCOL_VERSION = 1


class Action(str, Enum):
    """Broker actions this client can request."""

    ADD_INVOICE = "add-invoice"


class MessageKind(BaseModel):
    """Body of an order-scoped message."""

    version: int = PROTOCOL_VERSION
    id: str | None = None
    pubkey: str | None = None
    action: Action
    content: dict[str, Any] | None = None

    model_config = ConfigDict(frozen=True)


class Message(BaseModel):
    """Top-level envelope; the broker dispatches on the ``order`` key."""

    order: MessageKind

    model_config = ConfigDict(frozen=True)

    def as_json(self) -> str:
        return self.model_dump_json()


def payment_request_content(classification: InvoiceClassification) -> dict[str, Any]:
    """Content object carrying a classified invoice input.

    Raises:
        InvalidInvoiceError: If the input was classified as ``InvalidFormat``
    """
    if isinstance(classification, PaymentAddress):
        value = classification.address
    elif isinstance(classification, PaymentRequest):
        value = classification.encoded
    elif isinstance(classification, InvalidFormat):
        raise InvalidInvoiceError(classification.reason, value=classification.value)
    else:
        raise TypeError(f"Unsupported classification: {type(classification).__name__}")
    # [order, payment request, amount]
    return {"payment_request": [None, value, None]}


def build_add_invoice_message(
    order_id: int | str | UUID,
    classification: InvoiceClassification,
) -> Message:
    """Envelope asking the broker to attach a payment request to an order."""
    return Message(
        order=MessageKind(
            id=str(order_id),
            action=Action.ADD_INVOICE,
            content=payment_request_content(classification),
        )
    )
