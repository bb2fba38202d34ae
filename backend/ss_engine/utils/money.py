"""Money helpers for Decimal arithmetic."""

from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal
from typing import Union

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
DOLLAR = Decimal("1")


def to_decimal(value: Number) -> Decimal:
    """Convert to Decimal without picking up binary float noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def floor_cents(value: Decimal) -> Decimal:
    """Round down to the cent (statutory convention for PIA and benefits)."""
    return value.quantize(CENT, rounding=ROUND_FLOOR)


def floor_dollars(value: Decimal) -> Decimal:
    return value.quantize(DOLLAR, rounding=ROUND_FLOOR)


def round_cents(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
