"""
Rules API - FastAPI router for membership pricing rule management.
"""
from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel
from typing import Optional

from ..data.repositories import MembershipRuleRepository
from ..services.rules_service import RulesService
from .state import get_rule_repository, get_rules_service

router = APIRouter(prefix="/api/membership-pricing-rules", tags=["membership-pricing-rules"])


# Pydantic models for API
class RuleUpsert(BaseModel):
    """Request model for creating or updating a rule by level."""
    membership_level: Optional[str] = None
    percentage_paid: Optional[int] = None


class RuleUpdate(BaseModel):
    """Request model for updating a rule by ID."""
    percentage_paid: Optional[int] = None


class RuleResponse(BaseModel):
    """Response model for a rule."""
    id: Optional[int]
    membership_level: str
    percentage_paid: int
    created_at: Optional[str]
    updated_at: Optional[str]


class SeedResponse(BaseModel):
    message: str
    rules: list[RuleResponse]


# Endpoints

@router.get("", response_model=list[RuleResponse])
async def list_rules(service: RulesService = Depends(get_rules_service)):
    """List all membership pricing rules."""
    return [RuleResponse(**rule.__dict__) for rule in service.list_rules()]


@router.post("", response_model=RuleResponse)
async def upsert_rule(
    rule_data: RuleUpsert,
    response: Response,
    service: RulesService = Depends(get_rules_service),
    repository: MembershipRuleRepository = Depends(get_rule_repository),
):
    """Create a rule for a membership level, or update the existing one."""
    try:
        rule, created = service.upsert_rule(rule_data.membership_level, rule_data.percentage_paid)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    repository.reload()
    response.status_code = 201 if created else 200
    return RuleResponse(**rule.__dict__)


@router.patch("/{rule_id}", response_model=RuleResponse)
async def update_rule(
    rule_id: int,
    updates: RuleUpdate,
    service: RulesService = Depends(get_rules_service),
    repository: MembershipRuleRepository = Depends(get_rule_repository),
):
    """Update the percentage paid of an existing rule."""
    if service.get_rule(rule_id) is None:
        raise HTTPException(status_code=404, detail="Pricing rule not found")

    try:
        rule = service.update_rule(rule_id, updates.percentage_paid)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    repository.reload()
    return RuleResponse(**rule.__dict__)


@router.delete("/{rule_id}")
async def delete_rule(
    rule_id: int,
    service: RulesService = Depends(get_rules_service),
    repository: MembershipRuleRepository = Depends(get_rule_repository),
):
    """Delete a rule."""
    try:
        service.delete_rule(rule_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    repository.reload()
    return {"success": True, "message": f"Pricing rule '{rule_id}' deleted"}


@router.post("/seed", response_model=SeedResponse)
async def seed_rules(
    service: RulesService = Depends(get_rules_service),
    repository: MembershipRuleRepository = Depends(get_rule_repository),
):
    """Insert the default membership tier rules that are missing."""
    created = service.seed_default_rules()
    repository.reload()
    return SeedResponse(
        message=f"Seeded {len(created)} pricing rules",
        rules=[RuleResponse(**rule.__dict__) for rule in created],
    )
