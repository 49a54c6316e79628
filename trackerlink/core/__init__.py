"""
Low-level helpers shared by the payload decoder: hex staging, width-bounded
integer readers and the decoding exception hierarchy.
"""
from trackerlink.core.binary import (
    b64_to_bytes,
    parse_quadruple,
    parse_short,
    parse_signed,
    parse_triple,
    sign_extend,
    to_hex,
)
from trackerlink.core.errors import DecodeError, MalformedHexError, TruncatedInputError

__all__ = [
    "b64_to_bytes",
    "parse_quadruple",
    "parse_short",
    "parse_signed",
    "parse_triple",
    "sign_extend",
    "to_hex",
    "DecodeError",
    "MalformedHexError",
    "TruncatedInputError",
]
