#!/usr/bin/env python
"""
Seed the default membership pricing rules.

Usage:
    python scripts/seed_rules.py
"""
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from workshop_pricing.config.logging_config import configure_logging
from workshop_pricing.config.settings import get_settings
from workshop_pricing.services.rules_service import RulesService


def main():
    settings = get_settings()
    configure_logging(settings.log_level)
    service = RulesService(settings.membership_rules_csv)

    created = service.seed_default_rules()
    print(f"✅ Seeded {len(created)} pricing rules into {settings.membership_rules_csv}")
    for rule in service.list_rules():
        print(f"  {rule.membership_level:<14} {rule.percentage_paid:>3}% paid")


if __name__ == "__main__":
    main()
