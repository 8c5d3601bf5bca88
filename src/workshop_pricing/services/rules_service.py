"""
Rules Service - CRUD operations for membership pricing rules.
Handles reading/writing membership_pricing_rules.csv.
"""
import csv
import logging
from pathlib import Path
from datetime import datetime, timezone
from typing import Optional
from dataclasses import dataclass, field

from ..engine.models import MembershipPricingRule

logger = logging.getLogger(__name__)


DEFAULT_RULES = [
    ("Full", 100),
    ("Full Retired", 20),
    ("LifeFull", 20),
    ("Associate", 35),
    ("Affiliate", 60),
    ("Student", 60),
    ("Companion", 75),
]


@dataclass
class ValidationResult:
    """Result of rule validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='seconds')


class RulesService:
    """Service for managing membership pricing rules."""

    CSV_COLUMNS = ['id', 'membership_level', 'percentage_paid', 'created_at', 'updated_at']

    def __init__(self, rules_csv_path: Path):
        self.rules_csv_path = rules_csv_path

    def list_rules(self) -> list[MembershipPricingRule]:
        """List all rules ordered by membership level."""
        rules = []
        if not self.rules_csv_path.exists():
            return rules

        with open(self.rules_csv_path, 'r', encoding='utf-8', newline='') as f:
            reader = csv.DictReader(f)
            for row in reader:
                if not row.get('membership_level'):
                    continue
                try:
                    rule = MembershipPricingRule(
                        membership_level=row['membership_level'].strip(),
                        percentage_paid=int(row['percentage_paid']),
                        id=int(row['id']) if row.get('id') else None,
                        created_at=row.get('created_at') or None,
                        updated_at=row.get('updated_at') or None,
                    )
                except (TypeError, ValueError) as e:
                    logger.warning("Skipping malformed pricing rule row %s: %s", reader.line_num, e)
                    continue
                rules.append(rule)

        rules.sort(key=lambda r: r.membership_level)
        return rules

    def get_rule(self, rule_id: int) -> Optional[MembershipPricingRule]:
        """Get a single rule by ID."""
        for rule in self.list_rules():
            if rule.id == rule_id:
                return rule
        return None

    def get_rule_by_level(self, membership_level: str) -> Optional[MembershipPricingRule]:
        """Get the rule for a membership level (exact match)."""
        for rule in self.list_rules():
            if rule.membership_level == membership_level:
                return rule
        return None

    def validate_rule(self, membership_level: Optional[str], percentage_paid) -> ValidationResult:
        """Validate a rule before saving."""
        result = ValidationResult(valid=True)

        if not membership_level or not str(membership_level).strip():
            result.errors.append("Membership level is required")
            result.valid = False

        if percentage_paid is None or percentage_paid == '':
            result.errors.append("Percentage paid is required")
            result.valid = False
            return result

        try:
            value = int(percentage_paid)
        except (TypeError, ValueError, OverflowError):
            result.errors.append("Percentage paid must be a whole number")
            result.valid = False
            return result

        if value != float(percentage_paid):
            result.errors.append("Percentage paid must be a whole number")
            result.valid = False
        elif value < 0 or value > 100:
            result.errors.append("Percentage must be between 0 and 100")
            result.valid = False

        return result

    def _require_valid(self, membership_level: Optional[str], percentage_paid):
        validation = self.validate_rule(membership_level, percentage_paid)
        if not validation.valid:
            logger.warning("Rejected pricing rule %r: %s", membership_level, "; ".join(validation.errors))
            raise ValueError("; ".join(validation.errors))

    def upsert_rule(self, membership_level: str, percentage_paid: int) -> tuple[MembershipPricingRule, bool]:
        """
        Create a rule for a level, or update it if the level already has one.

        Returns (rule, created).
        """
        self._require_valid(membership_level, percentage_paid)
        membership_level = membership_level.strip()
        percentage_paid = int(percentage_paid)

        rules = self.list_rules()
        for rule in rules:
            if rule.membership_level == membership_level:
                rule.percentage_paid = percentage_paid
                rule.updated_at = _now()
                self._write_rules(rules)
                logger.info("Updated pricing rule %s: %d%% paid", membership_level, percentage_paid)
                return rule, False

        timestamp = _now()
        rule = MembershipPricingRule(
            membership_level=membership_level,
            percentage_paid=percentage_paid,
            id=self._next_id(rules),
            created_at=timestamp,
            updated_at=timestamp,
        )
        rules.append(rule)
        self._write_rules(rules)
        logger.info("Created pricing rule %s: %d%% paid", membership_level, percentage_paid)
        return rule, True

    def update_rule(self, rule_id: int, percentage_paid: int) -> MembershipPricingRule:
        """Change the percentage paid of an existing rule."""
        rules = self.list_rules()
        for rule in rules:
            if rule.id == rule_id:
                self._require_valid(rule.membership_level, percentage_paid)
                rule.percentage_paid = int(percentage_paid)
                rule.updated_at = _now()
                self._write_rules(rules)
                logger.info("Updated pricing rule %s: %d%% paid", rule.membership_level, rule.percentage_paid)
                return rule

        raise ValueError(f"Pricing rule '{rule_id}' not found")

    def delete_rule(self, rule_id: int) -> bool:
        """Delete a rule."""
        rules = self.list_rules()
        remaining = [r for r in rules if r.id != rule_id]

        if len(remaining) == len(rules):
            raise ValueError(f"Pricing rule '{rule_id}' not found")

        self._write_rules(remaining)
        logger.info("Deleted pricing rule %s", rule_id)
        return True

    def seed_default_rules(self) -> list[MembershipPricingRule]:
        """Insert the default tier rules that are missing. Existing levels are left alone."""
        created = []
        for level, percentage in DEFAULT_RULES:
            if self.get_rule_by_level(level) is None:
                rule, _ = self.upsert_rule(level, percentage)
                created.append(rule)
        logger.info("Seeded %d pricing rules", len(created))
        return created

    def _next_id(self, rules: list[MembershipPricingRule]) -> int:
        ids = [r.id for r in rules if r.id is not None]
        return max(ids, default=0) + 1

    def _write_rules(self, rules: list[MembershipPricingRule]):
        """Write rules back to CSV."""
        self.rules_csv_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.rules_csv_path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=self.CSV_COLUMNS)
            writer.writeheader()
            for rule in sorted(rules, key=lambda r: r.id or 0):
                writer.writerow({
                    'id': rule.id if rule.id is not None else '',
                    'membership_level': rule.membership_level,
                    'percentage_paid': rule.percentage_paid,
                    'created_at': rule.created_at or '',
                    'updated_at': rule.updated_at or '',
                })
