"""
TLV decoder for the WisBlock tracker uplink payload.

The payload is a concatenation of records, each a 2-byte tag followed by a
tag-specific number of big-endian signed integers. There is no length field:
the tag alone fixes the record's width. The decoder works on the hex rendering
of the payload and counts positions in hex digits, because the skip applied to
unknown tags is an odd number of digits.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Optional

from trackerlink.core.binary import (
    QUADRUPLE_BITS,
    SHORT_BITS,
    first_non_hex,
    parse_signed,
    parse_unsigned,
    to_hex,
)
from trackerlink.core.errors import DecodeError, MalformedHexError, TruncatedInputError

TAG_DIGITS = 4

# Unknown tags carry no length, so the cursor moves past the tag plus this many digits.
UNKNOWN_TAG_SKIP_DIGITS = 3

Reading = dict[str, float | int]


@dataclass(frozen=True)
class FieldSpec:
    """
    One scalar inside a record.

    Attributes:
        name: Key written to the decoded reading.
        digits: Hex digits consumed from the payload.
        bits: Width class used for sign reconstruction (16, 24 or 32).
        scale: Multiplier applied after the integer decode.
        places: Decimal places the scaled value is rounded to.
    """
    name: str
    digits: int
    bits: int
    scale: float
    places: int

    def decode(self, text: str) -> float:
        return round(parse_signed(text, self.bits) * self.scale, self.places)


@dataclass(frozen=True)
class RecordShape:
    label: str
    fields: tuple[FieldSpec, ...]
    derive: Optional[Callable[[Reading], Reading]] = None
    # Keys written by ``derive``, in the order it writes them.
    derived: tuple[str, ...] = ()

    @property
    def payload_digits(self) -> int:
        return sum(spec.digits for spec in self.fields)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields) + self.derived


@dataclass(frozen=True)
class TlvRecord:
    """
    A single record walked by :func:`iter_records`.

    Attributes:
        offset: Hex-digit position of the tag.
        tag: The 16-bit tag value.
        consumed: Hex digits the cursor advanced, tag included.
        values: Decoded fields; empty for unknown tags.
    """
    offset: int
    tag: int
    consumed: int
    values: Reading = field(default_factory=dict)

    @property
    def known(self) -> bool:
        return self.tag in RECORD_SHAPES


def _short(name: str, scale: float, places: int = 2, digits: int = 4) -> FieldSpec:
    return FieldSpec(name=name, digits=digits, bits=SHORT_BITS, scale=scale, places=places)


def _quadruple(name: str, scale: float, places: int) -> FieldSpec:
    return FieldSpec(name=name, digits=8, bits=QUADRUPLE_BITS, scale=scale, places=places)


def _gps_fix(values: Reading) -> Reading:
    no_fix = values["latitude"] == 0.0 and values["longitude"] == 0.0
    return {"hasFix": 0 if no_fix else 1}


TAG_HUMIDITY = 0x0768
TAG_BAROMETER = 0x0673
TAG_TEMPERATURE = 0x0267
TAG_GPS = 0x0188
TAG_ACCELERATION = 0x0371
TAG_GAS_RESISTANCE = 0x0402
TAG_BATTERY = 0x0802
TAG_LUMINOSITY = 0x0565
TAG_GYROSCOPE = 0x0586
TAG_MAGNETOMETER_X = 0x0902
TAG_MAGNETOMETER_Y = 0x0A02
TAG_MAGNETOMETER_Z = 0x0B02

RECORD_SHAPES: dict[int, RecordShape] = {
    # Humidity is a single byte in 0.5 %RH steps.
    TAG_HUMIDITY: RecordShape("humidity", (_short("humidity", 0.5, places=1, digits=2),)),
    TAG_BAROMETER: RecordShape("barometer", (_short("barometer", 0.1),)),
    TAG_TEMPERATURE: RecordShape("temperature", (_short("temperature", 0.1),)),
    TAG_GPS: RecordShape(
        "gps",
        (
            _quadruple("latitude", 0.000001, 6),
            _quadruple("longitude", 0.000001, 6),
            _quadruple("altitude", 0.01, 2),
        ),
        derive=_gps_fix,
        derived=("hasFix",),
    ),
    TAG_ACCELERATION: RecordShape(
        "acceleration",
        tuple(_short(f"acceleration_{axis}", 0.001, places=3) for axis in "xyz"),
    ),
    TAG_GAS_RESISTANCE: RecordShape("gas_resistance", (_short("gasResistance", 0.01),)),
    TAG_BATTERY: RecordShape("battery", (_short("battery", 0.01),)),
    TAG_LUMINOSITY: RecordShape("luminosity", (_short("luminosity", 1.0),)),
    TAG_GYROSCOPE: RecordShape(
        "gyroscope",
        tuple(_short(f"gyroscope_{axis}", 0.01) for axis in "xyz"),
    ),
    TAG_MAGNETOMETER_X: RecordShape("magnetometer_x", (_short("magnetometer_x", 0.01),)),
    TAG_MAGNETOMETER_Y: RecordShape("magnetometer_y", (_short("magnetometer_y", 0.01),)),
    TAG_MAGNETOMETER_Z: RecordShape("magnetometer_z", (_short("magnetometer_z", 0.01),)),
}

# Every key the decoder can emit, in table order.
FIELD_NAMES: tuple[str, ...] = tuple(
    name for shape in RECORD_SHAPES.values() for name in shape.field_names
)


def tag_name(tag: int) -> str:
    """Label of a known tag, or its hex form (e.g. ``"0xffff"``) otherwise."""
    shape = RECORD_SHAPES.get(tag)
    return shape.label if shape else f"0x{tag:04x}"


class HexCursor:
    """Forward-only position over a hex string, counted in hex digits."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    @property
    def remaining(self) -> int:
        return len(self.text) - self.pos

    def take(self, digits: int) -> str:
        if digits > self.remaining:
            raise DecodeError(f"Cannot take {digits} hex digits, {self.remaining} remain", offset=self.pos)
        chunk = self.text[self.pos:self.pos + digits]
        self.pos += digits
        return chunk

    def skip(self, digits: int) -> None:
        self.pos = min(self.pos + digits, len(self.text))


def _check_hex(hex_str: str) -> None:
    bad = first_non_hex(hex_str)
    if bad is not None:
        raise MalformedHexError(f"Invalid hex digit {hex_str[bad]!r} at offset {bad}", offset=bad)


def iter_records(hex_str: str) -> Iterator[TlvRecord]:
    """
    Walk a hex-rendered payload record by record.

    Walking stops once 4 or fewer hex digits remain; a trailing partial tag
    is dropped. Unknown tags are yielded with empty ``values`` after a fixed
    skip of 3 digits past the tag, which can desynchronise the walk when the
    unknown record is of another width.

    Raises:
        MalformedHexError: If ``hex_str`` contains a non-hex character.
        TruncatedInputError: If a known tag's payload runs past the end.
    """
    _check_hex(hex_str)
    cursor = HexCursor(hex_str)
    while cursor.remaining > TAG_DIGITS:
        offset = cursor.pos
        tag = parse_unsigned(cursor.take(TAG_DIGITS), TAG_DIGITS)
        shape = RECORD_SHAPES.get(tag)
        if shape is None:
            cursor.skip(UNKNOWN_TAG_SKIP_DIGITS)
            yield TlvRecord(offset=offset, tag=tag, consumed=cursor.pos - offset)
            continue

        if shape.payload_digits > cursor.remaining:
            raise TruncatedInputError(tag, offset, shape.payload_digits, cursor.remaining)

        values: Reading = {spec.name: spec.decode(cursor.take(spec.digits)) for spec in shape.fields}
        if shape.derive is not None:
            values.update(shape.derive(values))
        yield TlvRecord(offset=offset, tag=tag, consumed=cursor.pos - offset, values=values)


def decode_hex(hex_str: str) -> Reading:
    """
    Decode a hex-rendered payload into a reading.

    Upper- and lowercase digits are accepted. A repeated tag overwrites the
    values of its earlier occurrence.

    Args:
        hex_str: The payload as hex digits, without separators.

    Returns:
        A dict of field name -> scaled value. ``hasFix`` is ``0`` or ``1``.

    Raises:
        MalformedHexError: If ``hex_str`` is not pure hex.
        TruncatedInputError: If a known record is cut short.
    """
    reading: Reading = {}
    for record in iter_records(hex_str.lower()):
        reading.update(record.values)
    return reading


def decode_payload(data: Iterable[int] | bytes) -> Reading:
    """
    Decode a raw uplink payload.

    Args:
        data: The payload bytes (signed or unsigned byte values).

    Returns:
        A dict of field name -> scaled value; empty for an empty payload.
    """
    return decode_hex(to_hex(data))
