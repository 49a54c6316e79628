"""Tests for the TLV payload decoder (tag table, cursor walk, edge cases)."""
import pytest

import trackerlink
from trackerlink.core.errors import DecodeError, MalformedHexError, TruncatedInputError
from trackerlink.parsing.tlv import (
    decode_hex,
    decode_payload,
    iter_records,
    tag_name,
    FIELD_NAMES,
    HexCursor,
    RECORD_SHAPES,
    UNKNOWN_TAG_SKIP_DIGITS,
)


def _record(tag: int, payload: str) -> str:
    """Helper: build one hex record from a tag and its payload digits."""
    shape = RECORD_SHAPES[tag]
    assert len(payload) == shape.payload_digits
    return f"{tag:04x}{payload}"


def test_decode_empty():
    assert decode_payload(b"") == {}
    assert decode_hex("") == {}


def test_decode_temperature():
    # 0x00fa = 250 -> 25.0 'C
    assert decode_payload(bytes([0x02, 0x67, 0x00, 0xFA])) == {"temperature": 25.0}


def test_decode_negative_temperature():
    # 0xff9c = -100 -> -10.0 'C
    assert decode_hex(_record(0x0267, "ff9c")) == {"temperature": -10.0}


def test_decode_humidity_single_byte():
    # 0x32 = 50 half-percent steps -> 25.0 %RH
    assert decode_payload(bytes([0x07, 0x68, 0x32])) == {"humidity": 25.0}
    assert decode_hex(_record(0x0768, "ff")) == {"humidity": 127.5}
    assert decode_hex(_record(0x0768, "01")) == {"humidity": 0.5}


def test_decode_humidity_then_temperature():
    data = [0x07, 0x68, 0x32, 0x02, 0x67, 0x00, 0xFA]
    assert trackerlink.to_hex(data) == "076832026700fa"
    assert trackerlink.decode(data) == {"humidity": 25.0, "temperature": 25.0}


def test_decode_barometer():
    # 0x2710 = 10000 -> 1000.0 hPa
    assert decode_hex(_record(0x0673, "2710")) == {"barometer": 1000.0}


def test_decode_gps_fix():
    # lat 52.520008, lon 13.404954, alt 34.00 m
    hex_str = _record(0x0188, "03216448" "00cc8b1a" "00000d48")
    assert decode_hex(hex_str) == {
        "latitude": 52.520008,
        "longitude": 13.404954,
        "altitude": 34.0,
        "hasFix": 1,
    }


def test_decode_gps_negative_coordinates():
    # lon -1.0 and alt -5.0 need 32-bit sign extension
    reading = decode_hex(_record(0x0188, "03216448" "fff0bdc0" "fffffe0c"))
    assert reading["longitude"] == -1.0
    assert reading["altitude"] == -5.0
    assert reading["hasFix"] == 1


def test_decode_gps_no_fix():
    reading = decode_hex(_record(0x0188, "0" * 24))
    assert reading == {"latitude": 0.0, "longitude": 0.0, "altitude": 0.0, "hasFix": 0}


def test_decode_gps_latitude_only_counts_as_fix():
    reading = decode_hex(_record(0x0188, "00000001" "00000000" "00000000"))
    assert reading["latitude"] == 0.000001
    assert reading["hasFix"] == 1


def test_decode_gps_altitude_alone_is_no_fix():
    reading = decode_hex(_record(0x0188, "00000000" "00000000" "00000d48"))
    assert reading["altitude"] == 34.0
    assert reading["hasFix"] == 0


def test_decode_acceleration():
    reading = decode_hex(_record(0x0371, "0001" "ffff" "03e8"))
    assert reading == {"acceleration_x": 0.001, "acceleration_y": -0.001, "acceleration_z": 1.0}


def test_acceleration_record_is_atomic():
    # Tag + 16 digits: 12 are the three axes, the last 4 are a dropped partial tag
    hex_str = "0371" + "0001ffff03e8" + "abcd"
    records = list(iter_records(hex_str))
    assert len(records) == 1
    assert records[0].consumed == 16
    assert set(records[0].values) == {"acceleration_x", "acceleration_y", "acceleration_z"}
    assert set(decode_hex(hex_str)) == {"acceleration_x", "acceleration_y", "acceleration_z"}


def test_decode_gyroscope():
    reading = decode_hex(_record(0x0586, "0064" "ff9c" "0000"))
    assert reading == {"gyroscope_x": 1.0, "gyroscope_y": -1.0, "gyroscope_z": 0.0}


def test_decode_single_short_fields():
    hex_str = (
        _record(0x0402, "1388")  # 5000 -> 50.0 KOhm
        + _record(0x0802, "019a")  # 410 -> 4.1 V
        + _record(0x0565, "00c8")  # 200 -> 200.0
        + _record(0x0902, "0fa0")  # 4000 -> 40.0 uT
        + _record(0x0A02, "f060")  # -4000 -> -40.0 uT
        + _record(0x0B02, "0001")  # 1 -> 0.01 uT
    )
    assert decode_hex(hex_str) == {
        "gasResistance": 50.0,
        "battery": 4.1,
        "luminosity": 200.0,
        "magnetometer_x": 40.0,
        "magnetometer_y": -40.0,
        "magnetometer_z": 0.01,
    }


def test_decode_full_uplink_preserves_record_order():
    hex_str = (
        _record(0x0188, "03216448" "00cc8b1a" "00000d48")
        + _record(0x0802, "017a")
        + _record(0x0768, "58")
        + _record(0x0673, "256d")
        + _record(0x0267, "011d")
        + _record(0x0402, "14af")
        + _record(0x0371, "ffffffddfc2e")
    )
    reading = decode_hex(hex_str)
    assert list(reading) == [
        "latitude", "longitude", "altitude", "hasFix",
        "battery", "humidity", "barometer", "temperature", "gasResistance",
        "acceleration_x", "acceleration_y", "acceleration_z",
    ]
    assert reading["battery"] == 3.78
    assert reading["humidity"] == 44.0
    assert reading["barometer"] == 958.1
    assert reading["temperature"] == 28.5
    assert reading["gasResistance"] == 52.95
    assert reading["acceleration_z"] == -0.978


def test_repeated_tag_last_write_wins():
    hex_str = _record(0x0267, "00fa") + _record(0x0267, "0064")
    assert decode_hex(hex_str) == {"temperature": 10.0}


def test_unknown_tag_is_skipped():
    records = list(iter_records("ffff" + "abc" + "0267" + "00fa"))
    assert records[0].known is False
    assert records[0].values == {}
    assert records[0].consumed == 4 + UNKNOWN_TAG_SKIP_DIGITS
    assert records[1].offset == 7
    assert records[1].values == {"temperature": 25.0}


def test_unknown_tag_does_not_raise():
    # After the 7-digit skip only 3 digits remain, so the walk ends
    assert decode_payload(bytes([0xFF, 0xFF, 0x12, 0x34, 0x56])) == {}


def test_unknown_tag_can_desynchronise():
    # A 2-byte unknown record: the skip lands mid-record and the rest decodes as garbage tags
    reading = decode_payload(bytes([0x01, 0x67, 0x00, 0xFA, 0x02, 0x67, 0x00, 0xFA]))
    assert "temperature" not in reading


def test_trailing_partial_tag_is_dropped():
    assert decode_payload(bytes([0x02, 0x67, 0x00, 0xFA, 0x02])) == {"temperature": 25.0}
    assert decode_payload(bytes([0x02, 0x67, 0x00, 0xFA, 0x02, 0x67])) == {"temperature": 25.0}


def test_truncated_known_tag_raises():
    with pytest.raises(TruncatedInputError) as excinfo:
        decode_payload(bytes([0x02, 0x67, 0x00]))
    assert excinfo.value.tag == 0x0267
    assert excinfo.value.offset == 0
    assert excinfo.value.needed == 4
    assert excinfo.value.available == 2


def test_truncated_gps_after_valid_record_raises():
    # Fail-fast: the valid temperature record is not returned on its own
    hex_str = _record(0x0267, "00fa") + "0188" + "03216448" + "00cc8b1a"
    with pytest.raises(TruncatedInputError) as excinfo:
        decode_hex(hex_str)
    assert excinfo.value.offset == 8


def test_malformed_hex_raises():
    with pytest.raises(MalformedHexError) as excinfo:
        decode_hex("0267zz00")
    assert excinfo.value.offset == 4


def test_decode_hex_accepts_uppercase():
    assert decode_hex("026700FA") == {"temperature": 25.0}


def test_hex_cursor_take_and_skip():
    cursor = HexCursor("0267ab")
    assert cursor.take(4) == "0267"
    assert cursor.remaining == 2
    cursor.skip(7)
    assert cursor.pos == 6
    assert cursor.remaining == 0
    with pytest.raises(DecodeError) as excinfo:
        cursor.take(1)
    assert excinfo.value.offset == 6
    assert cursor.pos == 6


def test_field_names_cover_table():
    assert "hasFix" in FIELD_NAMES
    assert "magnetometer_z" in FIELD_NAMES
    assert len(FIELD_NAMES) == len(set(FIELD_NAMES)) == 19


def test_tag_name():
    assert tag_name(0x0188) == "gps"
    assert tag_name(0xFFFF) == "0xffff"


def test_derived_field_names_match_decoded_keys():
    gps = RECORD_SHAPES[0x0188]
    assert gps.derived == ("hasFix",)
    assert gps.field_names == ("latitude", "longitude", "altitude", "hasFix")
    reading = decode_hex(_record(0x0188, "03216448" "00cc8b1a" "00000d48"))
    assert tuple(reading) == gps.field_names
    for shape in RECORD_SHAPES.values():
        if shape.derive is None:
            assert shape.derived == ()
