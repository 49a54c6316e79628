from __future__ import annotations

from decimal import Decimal


def format_number(value: float | int) -> str:
    """Render a number the way the JavaScript host runtimes print it (``25``, ``-1.5``, ``0.00001``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    # Decimal(repr()) keeps the shortest round-trip digits without exponent notation.
    return format(Decimal(repr(value)), "f")
