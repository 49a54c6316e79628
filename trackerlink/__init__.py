from trackerlink.core.binary import to_hex
from trackerlink.core.errors import DecodeError, MalformedHexError, TruncatedInputError
from trackerlink.parsing.tlv import decode_hex, decode_payload, iter_records
from importlib.metadata import PackageNotFoundError, version

decode = decode_payload

__all__ = [
    "decode",
    "decode_hex",
    "decode_payload",
    "iter_records",
    "to_hex",
    "DecodeError",
    "MalformedHexError",
    "TruncatedInputError",
]

try:
    __version__ = version("trackerlink")
except PackageNotFoundError:
    __version__ = "0.0.0"
