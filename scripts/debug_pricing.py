#!/usr/bin/env python
"""
Print a traced pricing breakdown for a workshop.

Usage:
    python scripts/debug_pricing.py WORKSHOP_ID [MEMBERSHIP_LEVEL] [PROVINCE]
"""
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from workshop_pricing.config.settings import get_settings
from workshop_pricing.data.repositories import MembershipRuleRepository, WorkshopRepository
from workshop_pricing.engine import PricingEngine, PurchaserContext, format_currency


def debug(workshop_id: int, membership_level: str = None, province: str = None):
    settings = get_settings()
    rules = MembershipRuleRepository(settings.membership_rules_csv)
    workshops = WorkshopRepository(settings.workshops_csv)

    print("Loaded Rules:")
    print(rules.rules_df.head(20))

    workshop = workshops.get(workshop_id)
    if workshop is None:
        print(f"\n❌ Workshop {workshop_id} not found in {settings.workshops_csv}")
        sys.exit(1)

    print(f"\n--- Pricing '{workshop.title}' for level={membership_level} province={province} ---")
    engine = PricingEngine(rule_lookup=rules.find_by_level)
    breakdown = engine.calculate(
        workshop,
        PurchaserContext(membership_level=membership_level, province=province),
    )
    print(breakdown.get_trace_text())
    print(f"\nTotal: {format_currency(breakdown.total)}")
    print(breakdown.to_dict())


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    args = sys.argv[1:]
    debug(int(args[0]), *args[1:3])
