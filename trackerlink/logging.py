import logging
import sys
from typing import Optional, TextIO


def create_logger(name: str, level: str | int = logging.WARNING, stream: Optional[TextIO] = None) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler(stream or sys.stderr)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def describe_record(offset: int, tag: int, label: str, consumed: int, values: dict) -> dict:
    """Flatten a walked record into the ``details`` dict attached to log lines."""
    return {
        "offset": offset,
        "tag": f"0x{tag:04x}",
        "label": label,
        "consumed": consumed,
        "fields": sorted(values),
    }
