"""
TLV (Tag-Length-Value) decoder for the WisBlock tracker uplink payload.

Records are identified by a two-byte tag that fixes both the measurement and
the number of payload bytes that follow. Unknown tags are skipped with a
fixed, best-effort step.
"""
from trackerlink.parsing.tlv.decode import (
    decode_hex,
    decode_payload,
    iter_records,
    tag_name,
    FieldSpec,
    FIELD_NAMES,
    HexCursor,
    RecordShape,
    RECORD_SHAPES,
    TlvRecord,
    UNKNOWN_TAG_SKIP_DIGITS,
)

__all__ = [
    "decode_hex",
    "decode_payload",
    "iter_records",
    "tag_name",
    "FieldSpec",
    "FIELD_NAMES",
    "HexCursor",
    "RecordShape",
    "RECORD_SHAPES",
    "TlvRecord",
    "UNKNOWN_TAG_SKIP_DIGITS",
]
