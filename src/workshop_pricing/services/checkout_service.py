"""
Checkout Service - Turns a pricing breakdown into a payment record and invoice.

The payment processor call (Stripe) and persistence belong to the caller;
this service only decides amounts, statuses and invoice fields.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from ..config.settings import Settings, get_settings
from ..engine.invoice import generate_invoice_number
from ..engine.models import PricingBreakdown, PurchaserContext, TaxType, WorkshopPricingConfig
from ..engine.pricing_engine import PricingEngine

logger = logging.getLogger(__name__)

STRIPE_CARD = "stripe_card"
INTERAC_TRANSFER = "interac_transfer"
BANK_TRANSFER = "bank_transfer"

PAYMENT_METHODS = (STRIPE_CARD, INTERAC_TRANSFER, BANK_TRANSFER)


class CheckoutError(ValueError):
    """Raised when a registration cannot be checked out."""


@dataclass
class PaymentRecord:
    """Payment row to persist before handing off to the processor."""
    workshop_registration_id: int
    method: str
    amount_cad: int
    currency: str
    status: str
    metadata: dict = field(default_factory=dict)


@dataclass
class InvoiceDraft:
    """Invoice row populated from the pricing breakdown."""
    workshop_registration_id: int
    invoice_number: str
    subtotal_cad: int
    tax_cad: int
    total_cad: int
    tax_rate: float
    tax_type: TaxType
    status: str
    issued_at: datetime

    def to_dict(self) -> dict:
        return {
            "workshopRegistrationId": self.workshop_registration_id,
            "invoiceNumber": self.invoice_number,
            "subtotalCad": self.subtotal_cad,
            "taxCad": self.tax_cad,
            "totalCad": self.total_cad,
            "taxRate": self.tax_rate,
            "taxType": self.tax_type.value,
            "status": self.status,
            "issuedAt": self.issued_at.isoformat(),
        }


@dataclass
class CheckoutResult:
    """Everything the caller needs to persist and charge."""
    pricing: PricingBreakdown
    payment: PaymentRecord
    invoice: InvoiceDraft


class CheckoutService:
    """Prepares payment and invoice records for a workshop registration."""

    def __init__(
        self,
        engine: PricingEngine,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.engine = engine
        self.settings = settings or get_settings()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def payment_instructions(self, method: str) -> Optional[str]:
        if method == INTERAC_TRANSFER:
            return (
                f"Send e-Transfer to {self.settings.etransfer_email} "
                "with invoice number in message"
            )
        if method == BANK_TRANSFER:
            return "Contact admin for bank transfer details"
        return None

    def initiate(
        self,
        registration_id: int,
        workshop: WorkshopPricingConfig,
        purchaser: PurchaserContext,
        method: str,
    ) -> CheckoutResult:
        """
        Price the registration and build its payment and invoice records.

        A free registration is rejected before the payment method is checked.

        Raises:
            CheckoutError: nothing to pay, or unknown payment method
        """
        pricing = self.engine.calculate(workshop, purchaser)
        if pricing.total == 0:
            raise CheckoutError("This workshop is free")

        if method not in PAYMENT_METHODS:
            logger.warning("Rejected checkout for registration %s: method %r", registration_id, method)
            raise CheckoutError("Invalid payment method")

        now = self.clock()
        invoice_number = generate_invoice_number(now)

        if method == STRIPE_CARD:
            payment_status, invoice_status = "initiated", "draft"
            metadata = {"pricing": pricing.to_dict()}
        else:
            payment_status, invoice_status = "pending_settlement", "sent"
            metadata = {
                "pricing": pricing.to_dict(),
                "instructions": self.payment_instructions(method),
            }

        payment = PaymentRecord(
            workshop_registration_id=registration_id,
            method=method,
            amount_cad=pricing.total,
            currency=self.settings.currency,
            status=payment_status,
            metadata=metadata,
        )
        invoice = InvoiceDraft(
            workshop_registration_id=registration_id,
            invoice_number=invoice_number,
            subtotal_cad=pricing.subtotal,
            tax_cad=pricing.tax_amount,
            total_cad=pricing.total,
            tax_rate=pricing.tax_rate,
            tax_type=pricing.tax_type,
            status=invoice_status,
            issued_at=now,
        )

        logger.info(
            "Checkout initiated: registration=%s method=%s invoice=%s total=%d",
            registration_id, method, invoice_number, pricing.total,
        )
        return CheckoutResult(pricing=pricing, payment=payment, invoice=invoice)
