"""Tests for the add-invoice envelope."""

from __future__ import annotations

import json
from uuid import UUID

import pytest

from mostro.client.core.exceptions import InvalidInvoiceError
from mostro.client.invoice.classifier import InvalidFormat, classify_invoice
from mostro.client.models.message import Action, build_add_invoice_message


def test_lightning_address_is_passed_through():
    message = build_add_invoice_message(42, classify_invoice("alice@example.com"))
    body = json.loads(message.as_json())

    assert body == {
        "order": {
            "version": 1,
            "id": "42",
            "pubkey": None,
            "action": "add-invoice",
            "content": {"payment_request": [None, "alice@example.com", None]},
        }
    }


def test_payment_request_uses_canonical_encoding(make_invoice):
    invoice = make_invoice()
    classification = classify_invoice("lightning:" + invoice.upper())

    message = build_add_invoice_message(
        UUID("6f1c9c1e-6a5e-4f8a-9d8e-2b0f5f0e2a11"), classification
    )

    assert message.order.action == Action.ADD_INVOICE
    assert message.order.id == "6f1c9c1e-6a5e-4f8a-9d8e-2b0f5f0e2a11"
    assert message.order.content == {"payment_request": [None, invoice, None]}


def test_invalid_format_builds_no_message():
    with pytest.raises(InvalidInvoiceError, match="bad checksum"):
        build_add_invoice_message(1, InvalidFormat(value="x", reason="bad checksum"))
