"""Currency presentation helpers (amounts are stored in cents)."""
from .rounding import round_half_up, to_decimal


def format_currency(cents: int) -> str:
    """Format cents as dollars, e.g. 12096 -> "$120.96"."""
    return f"${cents / 100:.2f}"


def cents_from_dollars(dollars) -> int:
    """Convert a dollar amount to integer cents, rounding half up."""
    return round_half_up(to_decimal(dollars) * 100)
