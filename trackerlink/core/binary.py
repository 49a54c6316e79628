from __future__ import annotations

import base64
from typing import Iterable, Optional

from trackerlink.core.errors import MalformedHexError

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

SHORT_BITS = 16
TRIPLE_BITS = 24
QUADRUPLE_BITS = 32


def to_hex(data: Iterable[int] | bytes) -> str:
    """Render bytes as lowercase hex, two digits per byte.

    Values are masked to 8 bits first, so ``-1`` and ``255`` both render as ``ff``.
    """
    return "".join(f"{value & 0xFF:02x}" for value in data)


def b64_to_bytes(b64_data: str) -> bytes:
    cleaned = "".join(b64_data.split())
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        return base64.b64decode(cleaned, validate=True)
    except ValueError as exc:
        raise ValueError(f"Failed to decode base64 payload: {exc}") from exc


def first_non_hex(text: str) -> Optional[int]:
    for index, char in enumerate(text):
        if char not in HEX_DIGITS:
            return index
    return None


def parse_unsigned(text: str, max_digits: int) -> int:
    """
    Parse up to ``max_digits`` hex digits as an unsigned integer.

    Stricter than ``int(text, 16)``: prefixes, signs, underscores and
    whitespace are rejected.

    Raises:
        MalformedHexError: If ``text`` is empty, too long or not pure hex.
    """
    if not text:
        raise MalformedHexError("Empty hex field")
    if len(text) > max_digits:
        raise MalformedHexError(f"Hex field {text!r} is wider than {max_digits} digits")
    bad = first_non_hex(text)
    if bad is not None:
        raise MalformedHexError(f"Invalid hex digit {text[bad]!r} in {text!r}")
    return int(text, 16)


def sign_extend(value: int, bits: int) -> int:
    value &= (1 << bits) - 1
    if value & (1 << (bits - 1)):
        value -= 1 << bits
    return value


def parse_short(text: str) -> int:
    """Signed 16-bit value from up to 4 hex digits."""
    return sign_extend(parse_unsigned(text, SHORT_BITS // 4), SHORT_BITS)


def parse_triple(text: str) -> int:
    """Signed 24-bit value from up to 6 hex digits."""
    return sign_extend(parse_unsigned(text, TRIPLE_BITS // 4), TRIPLE_BITS)


def parse_quadruple(text: str) -> int:
    """Signed 32-bit value from up to 8 hex digits."""
    return sign_extend(parse_unsigned(text, QUADRUPLE_BITS // 4), QUADRUPLE_BITS)


def parse_signed(text: str, bits: int) -> int:
    readers = {
        SHORT_BITS: parse_short,
        TRIPLE_BITS: parse_triple,
        QUADRUPLE_BITS: parse_quadruple,
    }
    try:
        reader = readers[bits]
    except KeyError:
        raise ValueError(f"Unsupported width class: {bits} bits") from None
    return reader(text)
