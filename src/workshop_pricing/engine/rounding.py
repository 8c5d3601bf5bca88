"""Rounding to whole cents."""
from decimal import Decimal, ROUND_HALF_UP


def to_decimal(value) -> Decimal:
    """Convert ints, floats and strings to Decimal as written (no binary float drift)."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_half_up(value) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(to_decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def percent_of(amount, percentage) -> int:
    """round_half_up(amount * percentage / 100) computed in Decimal."""
    return round_half_up(to_decimal(amount) * to_decimal(percentage) / 100)
