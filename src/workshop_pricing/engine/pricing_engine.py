"""
Pricing Engine - Workshop price resolution with traceability.

Resolution order:
1. Unpaid or zero-cost workshops short-circuit to an all-zero breakdown
2. Membership tier rule → percentage of base cost paid (100 if no rule)
3. Promotional (global) discount on the post-membership price
4. Province sales tax on the subtotal
"""
import logging
from typing import Callable, Optional

from .models import (
    MembershipPricingRule,
    PricingBreakdown,
    PurchaserContext,
    WorkshopPricingConfig,
)
from .rounding import percent_of
from .tax_resolver import calculate_tax
from .currency import format_currency

logger = logging.getLogger(__name__)

RuleLookup = Callable[[str], Optional[MembershipPricingRule]]

FULL_PRICE_PERCENTAGE = 100


class PricingEngine:
    """
    Stateless workshop pricing calculator.

    The only collaborator is ``rule_lookup``, which maps a membership level
    to its MembershipPricingRule (or None). Matching is whatever the lookup
    does; the repositories in this package match exactly and case-sensitively.
    """

    def __init__(self, rule_lookup: Optional[RuleLookup] = None):
        self.rule_lookup = rule_lookup

    def calculate(
        self,
        workshop: WorkshopPricingConfig,
        purchaser: PurchaserContext,
    ) -> PricingBreakdown:
        """
        Price a workshop for a purchaser.

        Args:
            workshop: Pricing fields of the workshop
            purchaser: Membership level and province of the buyer

        Returns:
            PricingBreakdown in integer cents, with a resolution trace
        """
        if not workshop.is_paid or not workshop.base_cost:
            breakdown = PricingBreakdown.free()
            breakdown.add_trace("Free Workshop", "Workshop is not paid or has no base cost")
            return breakdown

        rule = None
        if purchaser.membership_level and self.rule_lookup is not None:
            rule = self.rule_lookup(purchaser.membership_level)

        return calculate_workshop_price(workshop, purchaser, rule)


def calculate_workshop_price(
    workshop: WorkshopPricingConfig,
    purchaser: PurchaserContext,
    rule: Optional[MembershipPricingRule] = None,
) -> PricingBreakdown:
    """
    Price a workshop against an already-fetched membership rule.

    Percentages are applied as given; range validation happens upstream
    in the rules service.
    """
    if not workshop.is_paid or not workshop.base_cost:
        breakdown = PricingBreakdown.free()
        breakdown.add_trace("Free Workshop", "Workshop is not paid or has no base cost")
        return breakdown

    base_cost = workshop.base_cost
    trace = []
    trace.append(("Base Cost", "Workshop base cost", format_currency(base_cost)))

    membership_discount = FULL_PRICE_PERCENTAGE
    if purchaser.membership_level and rule is not None:
        membership_discount = rule.percentage_paid
        trace.append((
            "Membership Rule",
            f"{purchaser.membership_level} pays {membership_discount}% of base cost",
            None,
        ))
    elif purchaser.membership_level:
        trace.append(("Membership Rule", f"No rule for {purchaser.membership_level}, full price", None))
    else:
        trace.append(("Membership Rule", "No membership level, full price", None))

    price_after_membership = percent_of(base_cost, membership_discount)
    membership_discount_amount = base_cost - price_after_membership
    trace.append(("Membership Discount", "Price after membership", format_currency(price_after_membership)))

    global_discount = workshop.global_discount_percentage or 0
    global_discount_amount = percent_of(price_after_membership, global_discount)
    subtotal = price_after_membership - global_discount_amount
    if global_discount:
        trace.append(("Global Discount", f"{global_discount}% promotional discount", format_currency(subtotal)))

    tax = calculate_tax(subtotal, purchaser.tax_region)
    trace.append((
        "Tax",
        f"{tax.tax_type.value} {tax.tax_rate:g}% for region '{purchaser.tax_region or 'default'}'",
        format_currency(tax.tax_amount),
    ))

    total = subtotal + tax.tax_amount
    trace.append(("Total", "Subtotal + tax", format_currency(total)))

    breakdown = PricingBreakdown(
        base_cost=base_cost,
        membership_discount=membership_discount,
        membership_discount_amount=membership_discount_amount,
        global_discount=global_discount,
        global_discount_amount=global_discount_amount,
        subtotal=subtotal,
        tax_rate=tax.tax_rate,
        tax_type=tax.tax_type,
        tax_amount=tax.tax_amount,
        total=total,
    )
    for step, desc, val in trace:
        breakdown.add_trace(step, desc, val)

    logger.debug(
        "Priced workshop %s for level=%s region=%s: total=%d",
        workshop.workshop_id, purchaser.membership_level, purchaser.tax_region, total,
    )
    return breakdown
