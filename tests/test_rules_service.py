"""Membership pricing rule administration."""
import pytest
import sys
import os

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from workshop_pricing.data.repositories import MembershipRuleRepository
from workshop_pricing.services.rules_service import DEFAULT_RULES, RulesService


@pytest.fixture
def rules_path(tmp_path):
    return tmp_path / "rules" / "membership_pricing_rules.csv"


@pytest.fixture
def service(rules_path):
    return RulesService(rules_path)


def test_empty_service_lists_nothing(service):
    assert service.list_rules() == []
    assert service.get_rule(1) is None


def test_upsert_creates_then_updates(service):
    rule, created = service.upsert_rule("Student", 60)
    assert created is True
    assert rule.id == 1
    assert rule.created_at is not None

    rule, created = service.upsert_rule("Student", 50)
    assert created is False
    assert rule.id == 1
    assert rule.percentage_paid == 50
    assert len(service.list_rules()) == 1


def test_upsert_assigns_next_id(service):
    service.upsert_rule("Student", 60)
    rule, _ = service.upsert_rule("Associate", 35)
    assert rule.id == 2
    assert [r.membership_level for r in service.list_rules()] == ["Associate", "Student"]


def test_levels_are_distinct_by_case(service):
    service.upsert_rule("Student", 60)
    _, created = service.upsert_rule("student", 40)
    assert created is True
    assert len(service.list_rules()) == 2


@pytest.mark.parametrize("level,percentage,message", [
    ("Student", 101, "Percentage must be between 0 and 100"),
    ("Student", -1, "Percentage must be between 0 and 100"),
    ("Student", None, "Percentage paid is required"),
    ("Student", "abc", "Percentage paid must be a whole number"),
    ("Student", 12.5, "Percentage paid must be a whole number"),
    ("", 50, "Membership level is required"),
    (None, 50, "Membership level is required"),
])
def test_invalid_rules_are_rejected(service, level, percentage, message):
    validation = service.validate_rule(level, percentage)
    assert validation.valid is False
    assert message in validation.errors

    with pytest.raises(ValueError, match=message):
        service.upsert_rule(level, percentage)
    assert service.list_rules() == []


@pytest.mark.parametrize("percentage", [0, 100, "75"])
def test_boundary_percentages_are_valid(service, percentage):
    assert service.validate_rule("Full", percentage).valid is True


def test_update_rule_by_id(service):
    rule, _ = service.upsert_rule("Associate", 35)
    updated = service.update_rule(rule.id, 40)
    assert updated.percentage_paid == 40
    assert service.get_rule(rule.id).percentage_paid == 40


def test_update_missing_rule(service):
    with pytest.raises(ValueError, match="not found"):
        service.update_rule(42, 50)


def test_update_rejects_out_of_range(service):
    rule, _ = service.upsert_rule("Associate", 35)
    with pytest.raises(ValueError, match="between 0 and 100"):
        service.update_rule(rule.id, 150)
    assert service.get_rule(rule.id).percentage_paid == 35


def test_delete_rule(service):
    rule, _ = service.upsert_rule("Associate", 35)
    assert service.delete_rule(rule.id) is True
    assert service.list_rules() == []
    with pytest.raises(ValueError):
        service.delete_rule(rule.id)


def test_seed_inserts_only_missing_defaults(service):
    service.upsert_rule("Student", 45)

    created = service.seed_default_rules()
    assert len(created) == len(DEFAULT_RULES) - 1
    assert service.get_rule_by_level("Student").percentage_paid == 45
    assert service.get_rule_by_level("Companion").percentage_paid == 75

    assert service.seed_default_rules() == []


def test_written_file_is_readable_by_repository(service, rules_path):
    service.seed_default_rules()
    repo = MembershipRuleRepository(rules_path)

    assert repo.find_by_level("Full Retired").percentage_paid == 20
    assert repo.find_by_level("Affiliate").percentage_paid == 60
    assert len(repo.all()) == len(DEFAULT_RULES)


def test_non_finite_percentage_is_rejected(service):
    validation = service.validate_rule("Student", float("inf"))
    assert validation.valid is False
    assert "Percentage paid must be a whole number" in validation.errors


def test_list_rules_skips_malformed_rows(service, rules_path):
    rules_path.parent.mkdir(parents=True)
    rules_path.write_text(
        "id,membership_level,percentage_paid,created_at,updated_at\n"
        "1,Student,,,\n"
        "2,Associate,12.7,,\n"
        "3,Full,100,,\n",
        encoding="utf-8",
    )

    assert [r.membership_level for r in service.list_rules()] == ["Full"]
    assert service.get_rule_by_level("Student") is None

    rule, created = service.upsert_rule("Student", 60)
    assert created is True
    assert rule.id == 4
