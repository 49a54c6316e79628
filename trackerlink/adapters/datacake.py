"""
Datacake payload decoder adapter.

Datacake expects a list of ``{"field": NAME, "value": ...}`` records whose
names match the device's field identifiers (upper case). Radio metadata is
taken from the normalized payload Datacake builds for each uplink, which the
host must pass in explicitly.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from trackerlink.adapters._format import format_number
from trackerlink.adapters.models import DatacakeField, NormalizedPayload
from trackerlink.parsing.tlv import decode_payload

logger = logging.getLogger(__name__)


def radio_fields(normalized_payload: NormalizedPayload) -> dict[str, Any]:
    gateway = normalized_payload.gateways[0] if normalized_payload.gateways else None
    if gateway is None:
        logger.debug("Normalized payload has no first gateway, reporting zero RSSI/SNR")
    return {
        "LORA_RSSI": (gateway.rssi if gateway else None) or 0,
        "LORA_SNR": (gateway.snr if gateway else None) or 0,
        "LORA_DATARATE": normalized_payload.data_rate,
    }


def to_fields(decoded: dict[str, Any]) -> list[DatacakeField]:
    return [DatacakeField(field=key.upper(), value=value) for key, value in decoded.items()]


def decoder(
    data: Iterable[int] | bytes,
    port: int,
    normalized_payload: NormalizedPayload | dict[str, Any],
) -> list[DatacakeField]:
    """
    Decode an uplink for Datacake.

    Args:
        data: The raw uplink bytes.
        port: The LoRaWAN FPort; not used by this payload format.
        normalized_payload: Datacake's normalized uplink context, as a model
            or a plain dict.

    Returns:
        Ordered Datacake field records: decoded measurements, then
        ``LORA_RSSI``, ``LORA_SNR``, ``LORA_DATARATE`` and, with a GPS fix,
        ``LOCATION`` as ``"(lat,lon)"``.

    Raises:
        DecodeError: If the payload is malformed or truncated.
    """
    if not isinstance(normalized_payload, NormalizedPayload):
        normalized_payload = NormalizedPayload.model_validate(normalized_payload)

    decoded: dict[str, Any] = dict(decode_payload(data))
    decoded.update(radio_fields(normalized_payload))

    if decoded.get("hasFix") == 1:
        decoded["location"] = f"({format_number(decoded['latitude'])},{format_number(decoded['longitude'])})"

    logger.debug("Forwarding %d fields from port %s", len(decoded), port)
    return to_fields(decoded)
