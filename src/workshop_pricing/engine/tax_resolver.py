"""
Tax Resolver - Maps a Canadian province/territory to its sales tax.

Rates are the combined federal + provincial rates (2024):
- HST provinces charge a single harmonized tax.
- GST + PST provinces charge federal GST plus a provincial sales tax
  (QST in Quebec), reported together as GST_PST.
- Everyone else, including unrecognized regions, pays GST only.
"""
from decimal import Decimal
from typing import Optional

from .models import TaxCalculation, TaxType
from .rounding import percent_of


GST_RATE = Decimal("5")

HST_RATES: dict[str, Decimal] = {
    "ON": Decimal("13"),  # Ontario
    "ONTARIO": Decimal("13"),
    "NB": Decimal("15"),  # New Brunswick
    "NEW BRUNSWICK": Decimal("15"),
    "NS": Decimal("15"),  # Nova Scotia
    "NOVA SCOTIA": Decimal("15"),
    "PE": Decimal("15"),  # Prince Edward Island
    "PEI": Decimal("15"),
    "PRINCE EDWARD ISLAND": Decimal("15"),
    "NL": Decimal("15"),  # Newfoundland and Labrador
    "NEWFOUNDLAND": Decimal("15"),
    "NEWFOUNDLAND AND LABRADOR": Decimal("15"),
}

GST_PST_RATES: dict[str, Decimal] = {
    "BC": Decimal("12"),  # 5% GST + 7% PST
    "BRITISH COLUMBIA": Decimal("12"),
    "SK": Decimal("11"),  # 5% GST + 6% PST
    "SASKATCHEWAN": Decimal("11"),
    "MB": Decimal("12"),  # 5% GST + 7% RST
    "MANITOBA": Decimal("12"),
    "QC": Decimal("14.975"),  # 5% GST + 9.975% QST
    "QUEBEC": Decimal("14.975"),
}

GST_ONLY_REGIONS = (
    "AB", "ALBERTA",
    "NT", "NORTHWEST TERRITORIES",
    "NU", "NUNAVUT",
    "YT", "YUKON",
)


def normalize_region(province: Optional[str]) -> str:
    """Uppercase and trim; None or blank becomes ''."""
    if not province:
        return ""
    return str(province).strip().upper()


def resolve_tax_rate(province: Optional[str]) -> tuple[Decimal, TaxType]:
    """Return (rate percentage, tax type) for a province code or name."""
    region = normalize_region(province)

    if region in HST_RATES:
        return HST_RATES[region], TaxType.HST
    if region in GST_PST_RATES:
        return GST_PST_RATES[region], TaxType.GST_PST
    if region in GST_ONLY_REGIONS:
        return GST_RATE, TaxType.GST

    # Unrecognized or missing region: federal GST only
    return GST_RATE, TaxType.GST


def calculate_tax(subtotal_cents: int, province: Optional[str]) -> TaxCalculation:
    """
    Calculate sales tax on a subtotal.

    The rate is never rounded; only the resulting amount is rounded
    (half up) to a whole cent.
    """
    rate, tax_type = resolve_tax_rate(province)
    return TaxCalculation(
        tax_rate=float(rate),
        tax_type=tax_type,
        tax_amount=percent_of(subtotal_cents, rate),
    )


def supported_regions() -> list[tuple[str, float, TaxType]]:
    """All recognized region codes/names with their rate and tax type."""
    regions = [(name, float(rate), TaxType.HST) for name, rate in HST_RATES.items()]
    regions += [(name, float(rate), TaxType.GST_PST) for name, rate in GST_PST_RATES.items()]
    regions += [(name, float(GST_RATE), TaxType.GST) for name in GST_ONLY_REGIONS]
    return regions
