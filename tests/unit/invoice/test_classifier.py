"""Tests for invoice input classification."""

from __future__ import annotations

import time

import pytest

from mostro.client.invoice.classifier import (
    InvalidFormat,
    PaymentAddress,
    PaymentRequest,
    classify_invoice,
)


def test_lightning_address():
    result = classify_invoice("user@example.com")

    assert isinstance(result, PaymentAddress)
    assert result.address == "user@example.com"
    assert result.lightning_address.domain == "example.com"


def test_address_is_passed_through_unmodified():
    result = classify_invoice("Alice.Smith@Wallet.Example.org")

    assert isinstance(result, PaymentAddress)
    assert result.address == "Alice.Smith@Wallet.Example.org"


def test_payment_request_is_canonicalized(make_invoice):
    invoice = make_invoice(hrp="lntb20n")

    result = classify_invoice(invoice.upper())

    assert isinstance(result, PaymentRequest)
    assert result.encoded == invoice
    assert result.invoice.amount_msat == 2_000


@pytest.mark.parametrize("value", ["not-an-invoice", "", "lnbc1qqqqqq", "@example.com"])
def test_invalid_format(value):
    result = classify_invoice(value)

    assert isinstance(result, InvalidFormat)
    assert result.value == value
    assert result.reason


def test_expired_invoice_is_invalid(make_invoice):
    result = classify_invoice(make_invoice(timestamp=int(time.time()) - 86_400))

    assert isinstance(result, InvalidFormat)
    assert "expired" in result.reason


def test_reference_time(make_invoice):
    invoice = make_invoice(timestamp=1_000)
    assert isinstance(classify_invoice(invoice, now=1_500), PaymentRequest)
