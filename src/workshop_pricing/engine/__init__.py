"""Engine subpackage - core pricing, tax and invoice logic."""
from .pricing_engine import PricingEngine, calculate_workshop_price
from .tax_resolver import calculate_tax
from .invoice import generate_invoice_number
from .currency import format_currency, cents_from_dollars
from .models import (
    MembershipPricingRule,
    PricingBreakdown,
    PurchaserContext,
    TaxCalculation,
    TaxType,
    WorkshopPricingConfig,
)

__all__ = [
    'PricingEngine', 'calculate_workshop_price', 'calculate_tax',
    'generate_invoice_number', 'format_currency', 'cents_from_dollars',
    'MembershipPricingRule', 'PricingBreakdown', 'PurchaserContext',
    'TaxCalculation', 'TaxType', 'WorkshopPricingConfig',
]
