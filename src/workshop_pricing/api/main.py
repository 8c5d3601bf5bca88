from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import Optional

from ..config.logging_config import configure_logging
from ..config.settings import get_settings
from ..data.repositories import WorkshopRepository
from ..engine.models import PricingBreakdown, PurchaserContext, WorkshopPricingConfig
from ..engine.pricing_engine import PricingEngine
from ..engine.tax_resolver import supported_regions
from ..services.checkout_service import CheckoutError, CheckoutService
from .rules_api import router as rules_router
from .state import get_checkout_service, get_engine, get_workshop_repository

configure_logging(get_settings().log_level)

app = FastAPI(
    title="Workshop Pricing API",
    description="Workshop pricing, Canadian sales tax and checkout records",
    version="1.0.0"
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include rules management API
app.include_router(rules_router)


class WorkshopIn(BaseModel):
    is_paid: bool = False
    base_cost: Optional[int] = None
    global_discount_percentage: Optional[int] = 0


class PurchaserIn(BaseModel):
    membership_level: Optional[str] = None
    province: Optional[str] = None
    location: Optional[str] = None


class CalcRequest(BaseModel):
    workshop: WorkshopIn
    purchaser: PurchaserIn = PurchaserIn()


class CheckoutRequest(BaseModel):
    registration_id: int
    workshop_id: int
    payment_method: str
    membership_level: Optional[str] = None
    province: Optional[str] = None
    location: Optional[str] = None


def _pricing_response(breakdown: PricingBreakdown) -> dict:
    data = breakdown.to_dict()
    data["trace"] = [step.__dict__ for step in breakdown.trace]
    return data


@app.get("/")
async def root():
    return {"status": "online", "message": "Workshop Pricing API Active"}


@app.get("/api/tax-regions")
async def tax_regions():
    return [
        {"region": region, "taxRate": rate, "taxType": tax_type.value}
        for region, rate, tax_type in supported_regions()
    ]


@app.post("/api/pricing/calculate")
async def calculate_pricing(req: CalcRequest, engine: PricingEngine = Depends(get_engine)):
    workshop = WorkshopPricingConfig(**req.workshop.model_dump())
    purchaser = PurchaserContext(**req.purchaser.model_dump())
    return _pricing_response(engine.calculate(workshop, purchaser))


@app.get("/api/workshops/{workshop_id}/pricing")
async def workshop_pricing(
    workshop_id: int,
    membership_level: Optional[str] = None,
    province: Optional[str] = None,
    location: Optional[str] = None,
    engine: PricingEngine = Depends(get_engine),
    workshops: WorkshopRepository = Depends(get_workshop_repository),
):
    workshop = workshops.get(workshop_id)
    if workshop is None:
        raise HTTPException(status_code=404, detail="Workshop not found")

    purchaser = PurchaserContext(membership_level=membership_level, province=province, location=location)
    return _pricing_response(engine.calculate(workshop, purchaser))


@app.post("/api/payments/checkout")
async def checkout(
    req: CheckoutRequest,
    service: CheckoutService = Depends(get_checkout_service),
    workshops: WorkshopRepository = Depends(get_workshop_repository),
):
    workshop = workshops.get(req.workshop_id)
    if workshop is None:
        raise HTTPException(status_code=404, detail="Workshop not found")

    purchaser = PurchaserContext(
        membership_level=req.membership_level,
        province=req.province,
        location=req.location,
    )
    try:
        result = service.initiate(req.registration_id, workshop, purchaser, req.payment_method)
    except CheckoutError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "invoiceNumber": result.invoice.invoice_number,
        "totalCad": result.payment.amount_cad,
        "payment": {
            "method": result.payment.method,
            "status": result.payment.status,
            "currency": result.payment.currency,
            "metadata": result.payment.metadata,
        },
        "invoice": result.invoice.to_dict(),
    }
