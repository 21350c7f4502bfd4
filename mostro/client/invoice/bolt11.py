"""BOLT11 payment request parser.

Checks everything that can be verified without the node's key: bech32
checksum, human-readable prefix (network and amount), timestamp, tagged
fields and signature length. The signature itself is not verified.

Layout of the data part (5-bit words):
    - 7 words: timestamp (seconds since epoch)
    - tagged fields: 1 word type, 2 words length, ``length`` words data
    - 104 words: 64 byte compact signature + 1 byte recovery id
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from decimal import Decimal

from ..core.enums import Network
from ..core.exceptions import InvalidInvoiceError
from ..utils import bech32

URI_SCHEME = "lightning:"
DEFAULT_EXPIRY = 3600
DEFAULT_MIN_FINAL_CLTV_EXPIRY = 18

TIMESTAMP_WORDS = 7
SIGNATURE_WORDS = 104
HASH_WORDS = 52  # 256 bits padded to 5-bit words

# millisatoshis per unit of each amount multiplier
_MSAT_PER_UNIT = {
    "": 100_000_000_000,
    "m": 100_000_000,
    "u": 100_000,
    "n": 100,
}
_AMOUNT = re.compile(r"^([1-9][0-9]*)([munp]?)$")


@dataclass(frozen=True)
class Bolt11Invoice:
    """Structurally valid BOLT11 payment request."""

    hrp: str
    network: Network
    amount_msat: int | None
    timestamp: int
    payment_hash: str
    signature: str
    description: str | None = None
    description_hash: str | None = None
    payment_secret: str | None = None
    expiry: int = DEFAULT_EXPIRY
    min_final_cltv_expiry: int = DEFAULT_MIN_FINAL_CLTV_EXPIRY
    unknown_tags: tuple[str, ...] = ()
    words: tuple[int, ...] = field(default=(), repr=False)

    @property
    def encoded(self) -> str:
        """Canonical lower-case encoding with a recomputed checksum."""
        return bech32.encode(self.hrp, list(self.words))

    @property
    def amount_sat(self) -> Decimal | None:
        if self.amount_msat is None:
            return None
        return Decimal(self.amount_msat) / 1000

    @property
    def expires_at(self) -> int:
        return self.timestamp + self.expiry

    def is_expired(self, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return now >= self.expires_at

    def __str__(self) -> str:
        return self.encoded


def _words_to_int(words: list[int]) -> int:
    value = 0
    for word in words:
        value = (value << 5) | word
    return value


def _words_to_bytes(words: list[int]) -> bytes:
    # Trailing bits that do not fill a whole byte are padding.
    return bytes(bech32.convertbits(words, 5, 8, pad=True)[: len(words) * 5 // 8])


def _parse_amount(amount: str) -> int | None:
    if not amount:
        return None
    match = _AMOUNT.match(amount)
    if not match:
        raise InvalidInvoiceError(f"Invalid invoice amount {amount!r}", value=amount)
    digits, multiplier = int(match.group(1)), match.group(2)
    if multiplier == "p":
        if digits % 10:
            raise InvalidInvoiceError("Pico amount must be a multiple of 10", value=amount)
        return digits // 10
    return digits * _MSAT_PER_UNIT[multiplier]


def _parse_hrp(hrp: str) -> tuple[Network, int | None]:
    if not hrp.startswith("ln"):
        raise InvalidInvoiceError(f"Invoice prefix must start with 'ln', got {hrp!r}", value=hrp)
    network = Network.match_prefix(hrp[2:])
    if network is None:
        raise InvalidInvoiceError(f"Unknown network in invoice prefix {hrp!r}", value=hrp)
    return network, _parse_amount(hrp[2 + len(network.value) :])


def parse_bolt11(value: str) -> Bolt11Invoice:
    """Parse a BOLT11 string, with or without the ``lightning:`` scheme.

    Raises:
        InvalidInvoiceError: If any structural check fails
    """
    text = value.strip()
    if text.lower().startswith(URI_SCHEME):
        text = text[len(URI_SCHEME) :]

    try:
        hrp, words = bech32.decode(text)
    except ValueError as e:
        raise InvalidInvoiceError(f"Invalid invoice encoding: {e}", value=value) from e

    network, amount_msat = _parse_hrp(hrp)

    if len(words) < TIMESTAMP_WORDS + SIGNATURE_WORDS:
        raise InvalidInvoiceError("Invoice data part is too short", value=value)

    timestamp = _words_to_int(words[:TIMESTAMP_WORDS])
    tagged = words[TIMESTAMP_WORDS:-SIGNATURE_WORDS]
    signature = bytes(bech32.convertbits(words[-SIGNATURE_WORDS:], 5, 8, pad=False))

    fields: dict[str, object] = {}
    unknown: list[str] = []
    i = 0
    while i < len(tagged):
        if i + 3 > len(tagged):
            raise InvalidInvoiceError("Truncated tagged field header", value=value)
        tag = bech32.CHARSET[tagged[i]]
        length = tagged[i + 1] * 32 + tagged[i + 2]
        data = tagged[i + 3 : i + 3 + length]
        if len(data) < length:
            raise InvalidInvoiceError(f"Truncated tagged field {tag!r}", value=value)
        i += 3 + length

        if tag in ("p", "h", "s"):
            # Hash fields of the wrong length are skipped, not rejected.
            if length != HASH_WORDS:
                continue
            key = {"p": "payment_hash", "h": "description_hash", "s": "payment_secret"}[tag]
            if key == "payment_hash" and key in fields:
                raise InvalidInvoiceError("Invoice has more than one payment hash", value=value)
            fields[key] = _words_to_bytes(data).hex()
        elif tag == "d":
            try:
                fields["description"] = _words_to_bytes(data).decode("utf-8")
            except UnicodeDecodeError as e:
                raise InvalidInvoiceError("Invoice description is not UTF-8", value=value) from e
        elif tag == "x":
            fields["expiry"] = _words_to_int(data)
        elif tag == "c":
            fields["min_final_cltv_expiry"] = _words_to_int(data)
        else:
            unknown.append(tag)

    if "payment_hash" not in fields:
        raise InvalidInvoiceError("Invoice has no payment hash", value=value)

    return Bolt11Invoice(
        hrp=hrp,
        network=network,
        amount_msat=amount_msat,
        timestamp=timestamp,
        signature=signature.hex(),
        unknown_tags=tuple(unknown),
        words=tuple(words),
        **fields,  # type: ignore[arg-type]
    )


def check_invoice(value: str, now: float | None = None) -> Bolt11Invoice:
    """Parse ``value`` and reject invoices that have already expired."""
    invoice = parse_bolt11(value)
    if invoice.is_expired(now):
        raise InvalidInvoiceError(
            f"Invoice expired at {invoice.expires_at} (unix time)", value=value
        )
    return invoice
