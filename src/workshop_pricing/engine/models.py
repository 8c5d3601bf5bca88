"""
Data models for the pricing engine.

Uses dataclasses for structured, type-safe data representation.
All currency amounts are integer cents.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TaxType(str, Enum):
    """Canadian sales tax classification applied to a purchase."""
    GST = "GST"
    HST = "HST"
    GST_PST = "GST_PST"
    PST = "PST"
    NONE = "None"


@dataclass
class TraceStep:
    """A single step in the pricing resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class MembershipPricingRule:
    """
    Share of the base cost a membership tier pays.

    percentage_paid is the percentage *charged*, not the discount:
    a Student rule of 60 means students pay 60% of the base cost.
    """
    membership_level: str
    percentage_paid: int
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass
class WorkshopPricingConfig:
    """The pricing-relevant subset of a workshop record."""
    is_paid: bool
    base_cost: Optional[int] = None  # cents
    global_discount_percentage: Optional[int] = 0
    workshop_id: Optional[int] = None
    title: Optional[str] = None


@dataclass
class PurchaserContext:
    """Who is buying: membership tier and where they are taxed."""
    membership_level: Optional[str] = None
    province: Optional[str] = None
    location: Optional[str] = None  # free-text profile location, fallback for province

    @property
    def tax_region(self) -> Optional[str]:
        return self.province or self.location or None


@dataclass
class TaxCalculation:
    """Result of resolving a province to a tax rate."""
    tax_rate: float  # percentage, e.g. 14.975
    tax_type: TaxType
    tax_amount: int


@dataclass
class PricingBreakdown:
    """Complete result of pricing a workshop for a purchaser."""
    base_cost: int
    membership_discount: int  # percentage paid (0-100)
    membership_discount_amount: int
    global_discount: int  # percentage off (0-100)
    global_discount_amount: int
    subtotal: int
    tax_rate: float
    tax_type: TaxType
    tax_amount: int
    total: int
    trace: list[TraceStep] = field(default_factory=list, compare=False, repr=False)

    @classmethod
    def free(cls) -> 'PricingBreakdown':
        """All-zero breakdown for unpaid or zero-cost workshops."""
        return cls(
            base_cost=0,
            membership_discount=0,
            membership_discount_amount=0,
            global_discount=0,
            global_discount_amount=0,
            subtotal=0,
            tax_rate=0,
            tax_type=TaxType.NONE,
            tax_amount=0,
            total=0,
        )

    @property
    def is_free(self) -> bool:
        return self.total == 0

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the pricing trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert to the camelCase shape consumed by payment and invoice code."""
        return {
            "baseCost": self.base_cost,
            "membershipDiscount": self.membership_discount,
            "membershipDiscountAmount": self.membership_discount_amount,
            "globalDiscount": self.global_discount,
            "globalDiscountAmount": self.global_discount_amount,
            "subtotal": self.subtotal,
            "taxRate": self.tax_rate,
            "taxType": self.tax_type.value,
            "taxAmount": self.tax_amount,
            "total": self.total,
        }
