"""
ChirpStack payload codec adapter.

ChirpStack calls ``Decode(fPort, bytes, variables)`` and stores whatever object
comes back. This adapter keeps that shape and renders every measurement with
its unit suffix for display in the network server's event log.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from trackerlink.adapters._format import format_number
from trackerlink.parsing.tlv import decode_payload

logger = logging.getLogger(__name__)

UNIT_SUFFIXES: dict[str, str] = {
    "humidity": "%RH",
    "barometer": "hPa",
    "temperature": "'C",
    "latitude": "'",
    "longitude": "'",
    "altitude": "m",
    "acceleration_x": "g",
    "acceleration_y": "g",
    "acceleration_z": "g",
    "gasResistance": "KOhm",
    "battery": "V",
    "luminosity": "L",
    "gyroscope_x": "'/s",
    "gyroscope_y": "'/s",
    "gyroscope_z": "'/s",
    "magnetometer_x": "uT",
    "magnetometer_y": "uT",
    "magnetometer_z": "uT",
}


def with_units(reading: dict[str, float | int]) -> dict[str, Any]:
    """Append unit suffixes to a decoded reading. Fields without a unit (``hasFix``) pass through."""
    rendered: dict[str, Any] = {}
    for name, value in reading.items():
        suffix = UNIT_SUFFIXES.get(name)
        rendered[name] = value if suffix is None else f"{format_number(value)}{suffix}"
    return rendered


def decode(f_port: int, data: Iterable[int] | bytes, variables: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """
    Decode an uplink for ChirpStack.

    Args:
        f_port: The LoRaWAN FPort; not used by this payload format.
        data: The raw uplink bytes.
        variables: Device-profile variables; not used by this payload format.

    Returns:
        The decoded reading with unit-suffixed string values.

    Raises:
        DecodeError: If the payload is malformed or truncated.
    """
    reading = decode_payload(data)
    logger.debug("Decoded %d fields from fPort %s", len(reading), f_port)
    return with_units(reading)
