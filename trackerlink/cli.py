import argparse
import json
import sys
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from trackerlink.adapters import chirpstack, datacake
from trackerlink.adapters.models import GatewayMetadata, NormalizedPayload
from trackerlink.config import CliSettings, get_settings
from trackerlink.core.binary import b64_to_bytes, first_non_hex, to_hex
from trackerlink.core.errors import DecodeError, MalformedHexError
from trackerlink.logging import create_logger, describe_record
from trackerlink.parsing.tlv import decode_payload, iter_records, tag_name


def read_payload(text: str, is_base64: bool = False) -> bytes:
    if is_base64:
        return b64_to_bytes(text)
    cleaned = "".join(text.split())
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]
    bad = first_non_hex(cleaned)
    if bad is not None:
        raise MalformedHexError(f"Invalid hex digit {cleaned[bad]!r} at offset {bad}", offset=bad)
    if len(cleaned) % 2:
        raise MalformedHexError(f"Hex payload has an odd number of digits ({len(cleaned)})")
    return bytes.fromhex(cleaned)


def render(data: bytes, output_format: str, port: int = 1, normalized_payload: Optional[NormalizedPayload] = None) -> Any:
    if output_format == "chirpstack":
        return chirpstack.decode(port, data)
    if output_format == "datacake":
        fields = datacake.decoder(data, port, normalized_payload or NormalizedPayload())
        return [f.model_dump() for f in fields]
    return decode_payload(data)


def build_parser(settings: CliSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trackerlink", description="Decode a WisBlock tracker uplink payload.")
    parser.add_argument("payload", type=str, help="Payload as hex digits (or base64 with --base64).")
    parser.add_argument("--base64", action="store_true", help="Treat the payload as base64, as delivered by most network servers.")
    parser.add_argument(
        "--format",
        choices=["reading", "chirpstack", "datacake"],
        default=settings.output_format,
        help="Output shape.",
    )
    parser.add_argument("--port", type=int, default=1, help="LoRaWAN FPort passed to the adapters.")
    parser.add_argument("--rssi", type=float, default=None, help="Gateway RSSI for the datacake format.")
    parser.add_argument("--snr", type=float, default=None, help="Gateway SNR for the datacake format.")
    parser.add_argument("--data-rate", type=str, default=None, help="Data rate for the datacake format, e.g. SF7BW125.")
    parser.add_argument("--indent", type=int, default=settings.json_indent, help="JSON indentation.")
    parser.add_argument("--verbose", action="store_true", help="Log every walked record to stderr.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        settings = get_settings()
    except ValidationError as exc:
        create_logger("trackerlink").error("invalid settings: %s", exc)
        return 1
    args = build_parser(settings).parse_args(argv)
    logger = create_logger("trackerlink", "DEBUG" if args.verbose else settings.log_level)

    try:
        data = read_payload(args.payload, is_base64=args.base64)
        if args.verbose:
            for record in iter_records(to_hex(data)):
                details = describe_record(record.offset, record.tag, tag_name(record.tag), record.consumed, record.values)
                if record.known:
                    logger.debug("record %s", details["label"], extra={"details": details})
                else:
                    logger.debug("skipped unknown tag %s", details["tag"], extra={"details": details})

        gateways = []
        if args.rssi is not None or args.snr is not None:
            gateways.append(GatewayMetadata(rssi=args.rssi, snr=args.snr))
        normalized = NormalizedPayload(gateways=gateways, data_rate=args.data_rate)
        result = render(data, args.format, port=args.port, normalized_payload=normalized)
    except DecodeError as exc:
        logger.error("decode failed: %s", exc)
        return 1
    except ValueError as exc:
        logger.error("invalid payload: %s", exc)
        return 1

    print(json.dumps(result, indent=args.indent or None))
    return 0


if __name__ == "__main__":
    sys.exit(main())
