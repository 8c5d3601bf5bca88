"""
Shared API state - repositories, engine and services built from settings.

Each provider is a FastAPI dependency; tests swap them through
app.dependency_overrides. Instances are cached per CSV path, so a
reset_settings() that points at another data directory takes effect on the
next request.
"""
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from ..config.settings import get_settings
from ..data.repositories import MembershipRuleRepository, WorkshopRepository
from ..engine.pricing_engine import PricingEngine
from ..services.checkout_service import CheckoutService
from ..services.rules_service import RulesService


@lru_cache
def _rule_repository(path: Path) -> MembershipRuleRepository:
    return MembershipRuleRepository(path)


@lru_cache
def _workshop_repository(path: Path) -> WorkshopRepository:
    return WorkshopRepository(path)


@lru_cache
def _rules_service(path: Path) -> RulesService:
    return RulesService(path)


def get_rule_repository() -> MembershipRuleRepository:
    return _rule_repository(get_settings().membership_rules_csv)


def get_workshop_repository() -> WorkshopRepository:
    return _workshop_repository(get_settings().workshops_csv)


def get_rules_service() -> RulesService:
    return _rules_service(get_settings().membership_rules_csv)


def get_engine(
    rules: MembershipRuleRepository = Depends(get_rule_repository),
) -> PricingEngine:
    return PricingEngine(rule_lookup=rules.find_by_level)


def get_checkout_service(engine: PricingEngine = Depends(get_engine)) -> CheckoutService:
    return CheckoutService(engine, settings=get_settings())
