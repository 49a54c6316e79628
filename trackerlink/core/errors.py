from __future__ import annotations

from typing import Optional


class DecodeError(ValueError):
    """Base class for payload decoding failures.

    ``offset`` is the hex-digit index the failure refers to, when known.
    """

    def __init__(self, message: str, offset: Optional[int] = None) -> None:
        super().__init__(message)
        self.offset = offset


class TruncatedInputError(DecodeError):
    """A recognised tag claims more payload than the buffer still holds."""

    def __init__(self, tag: int, offset: int, needed: int, available: int) -> None:
        super().__init__(
            f"Tag 0x{tag:04x} at offset {offset} needs {needed} hex digits of payload, "
            f"only {available} remain",
            offset=offset,
        )
        self.tag = tag
        self.needed = needed
        self.available = available


class MalformedHexError(DecodeError):
    pass


__all__ = ["DecodeError", "TruncatedInputError", "MalformedHexError"]
