"""Tests for the exception hierarchy."""

from mostro.client.core import (
    DecodeError,
    InvalidInvoiceError,
    MostroError,
    RelayError,
    RelayTimeoutError,
    TransportError,
)


def test_relay_timeout_error_carries_context():
    error = RelayTimeoutError(
        "timeout", url="wss://a", subscription_id="sub", timeout=3.0, partial_events=[]
    )
    assert error.url == "wss://a"
    assert error.subscription_id == "sub"
    assert error.partial_events == []
    assert isinstance(error, RelayError)
    assert isinstance(error, TimeoutError)
    assert isinstance(error, MostroError)


def test_transport_error_is_relay_error():
    error = TransportError("refused", url="wss://a")
    assert str(error) == "refused"
    assert isinstance(error, RelayError)


def test_decode_and_invoice_errors_keep_input():
    assert DecodeError("bad", payload="{}").payload == "{}"
    assert InvalidInvoiceError("bad", value="lnbc1").value == "lnbc1"
