"""Bech32 codec (BIP-173).

Used for BOLT11 payment requests. Those routinely exceed the 90 character
limit of BIP-173, so the limit is opt-in.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
CHECKSUM_LENGTH = 6

_GENERATOR = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)


def _polymod(values: Iterable[int]) -> int:
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1FFFFFF) << 5 ^ value
        for i in range(5):
            if (top >> i) & 1:
                chk ^= _GENERATOR[i]
    return chk


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def verify_checksum(hrp: str, data: Sequence[int]) -> bool:
    """Return True if ``data`` (checksum included) is valid for ``hrp``."""
    return _polymod(_hrp_expand(hrp) + list(data)) == 1


def create_checksum(hrp: str, data: Sequence[int]) -> list[int]:
    """Compute the six checksum words for ``hrp`` and ``data``."""
    polymod = _polymod(_hrp_expand(hrp) + list(data) + [0] * CHECKSUM_LENGTH) ^ 1
    return [(polymod >> 5 * (5 - i)) & 31 for i in range(CHECKSUM_LENGTH)]


def encode(hrp: str, data: Sequence[int]) -> str:
    """Encode 5-bit words under ``hrp`` into a lower-case bech32 string."""
    combined = list(data) + create_checksum(hrp, data)
    return hrp + "1" + "".join(CHARSET[d] for d in combined)


def decode(value: str, max_length: int | None = None) -> tuple[str, list[int]]:
    """Split a bech32 string into its hrp and 5-bit data words.

    Args:
        value: Bech32 string, all lower-case or all upper-case
        max_length: Optional maximum total length

    Returns:
        Tuple of (hrp, data words without checksum)

    Raises:
        ValueError: On invalid characters, mixed case, bad separator or checksum
    """
    if any(ord(c) < 33 or ord(c) > 126 for c in value):
        raise ValueError("invalid character in bech32 string")
    if value.lower() != value and value.upper() != value:
        raise ValueError("mixed case bech32 string")
    if max_length is not None and len(value) > max_length:
        raise ValueError(f"bech32 string longer than {max_length} characters")

    value = value.lower()
    pos = value.rfind("1")
    if pos < 1 or pos + CHECKSUM_LENGTH + 1 > len(value):
        raise ValueError("missing or misplaced bech32 separator")

    hrp, payload = value[:pos], value[pos + 1 :]
    invalid = [c for c in payload if c not in CHARSET]
    if invalid:
        raise ValueError(f"invalid bech32 data character {invalid[0]!r}")

    data = [CHARSET.index(c) for c in payload]
    if not verify_checksum(hrp, data):
        raise ValueError("invalid bech32 checksum")
    return hrp, data[:-CHECKSUM_LENGTH]


def convertbits(data: Iterable[int], frombits: int, tobits: int, pad: bool = True) -> list[int]:
    """Regroup a sequence of ``frombits``-bit integers into ``tobits`` groups.

    Raises:
        ValueError: If a value is out of range or padding is non-zero when
            ``pad`` is False
    """
    acc = 0
    bits = 0
    ret: list[int] = []
    maxv = (1 << tobits) - 1
    max_acc = (1 << (frombits + tobits - 1)) - 1
    for value in data:
        if value < 0 or value >> frombits:
            raise ValueError(f"value {value} does not fit in {frombits} bits")
        acc = ((acc << frombits) | value) & max_acc
        bits += frombits
        while bits >= tobits:
            bits -= tobits
            ret.append((acc >> bits) & maxv)
    if pad:
        if bits:
            ret.append((acc << (tobits - bits)) & maxv)
    elif bits >= frombits or ((acc << (tobits - bits)) & maxv):
        raise ValueError("invalid padding in bech32 data")
    return ret
