"""Half-up rounding for reported percentages and amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

_ONE_PLACE = Decimal("0.1")
_CENTS = Decimal("0.01")


def round_one(value: float) -> float:
    """Round to one decimal place, halves away from zero."""
    return float(Decimal(repr(value)).quantize(_ONE_PLACE, rounding=ROUND_HALF_UP))


def round_money(value: float) -> float:
    """Round to the nearest cent, halves away from zero."""
    return float(Decimal(repr(value)).quantize(_CENTS, rounding=ROUND_HALF_UP))


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator`` or 0 when the denominator is 0."""
    if not denominator:
        return 0.0
    return numerator / denominator


def round_whole(value: float) -> int:
    """Round to an integer, halves away from zero."""
    return int(Decimal(repr(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
