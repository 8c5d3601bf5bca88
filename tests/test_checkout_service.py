"""Checkout: payment record and invoice draft built from the breakdown."""
import pytest
import sys
import os
from datetime import datetime, timezone

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from workshop_pricing.config.settings import Settings
from workshop_pricing.engine import (
    MembershipPricingRule,
    PricingEngine,
    PurchaserContext,
    TaxType,
    WorkshopPricingConfig,
)
from workshop_pricing.services.checkout_service import (
    BANK_TRANSFER,
    INTERAC_TRANSFER,
    STRIPE_CARD,
    CheckoutError,
    CheckoutService,
)

FIXED_NOW = datetime(2024, 11, 20, 15, 30, 0, 456000, tzinfo=timezone.utc)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        project_root=tmp_path,
        data_dir=tmp_path,
        membership_rules_csv=tmp_path / "membership_pricing_rules.csv",
        workshops_csv=tmp_path / "workshops.csv",
        etransfer_email="treasurer@example.org",
    )


@pytest.fixture
def service(settings):
    rules = {"Student": MembershipPricingRule("Student", 60)}
    engine = PricingEngine(rule_lookup=rules.get)
    return CheckoutService(engine, settings=settings, clock=lambda: FIXED_NOW)


@pytest.fixture
def workshop():
    return WorkshopPricingConfig(is_paid=True, base_cost=20000, global_discount_percentage=10, workshop_id=1)


@pytest.fixture
def student_bc():
    return PurchaserContext(membership_level="Student", province="BC")


def test_card_checkout(service, workshop, student_bc):
    result = service.initiate(7, workshop, student_bc, STRIPE_CARD)

    assert result.pricing.total == 12096
    assert result.payment.amount_cad == 12096
    assert result.payment.currency == "CAD"
    assert result.payment.status == "initiated"
    assert result.payment.workshop_registration_id == 7
    assert result.payment.metadata["pricing"]["total"] == 12096
    assert "instructions" not in result.payment.metadata

    invoice = result.invoice
    assert invoice.status == "draft"
    assert invoice.subtotal_cad == 10800
    assert invoice.tax_cad == 1296
    assert invoice.total_cad == 12096
    assert invoice.tax_type == TaxType.GST_PST
    assert invoice.tax_rate == 12
    assert invoice.issued_at == FIXED_NOW
    assert invoice.invoice_number.startswith("INV-20241120-")


def test_interac_checkout_includes_instructions(service, workshop, student_bc):
    result = service.initiate(7, workshop, student_bc, INTERAC_TRANSFER)

    assert result.payment.status == "pending_settlement"
    assert result.invoice.status == "sent"
    assert "treasurer@example.org" in result.payment.metadata["instructions"]


def test_bank_transfer_checkout(service, workshop, student_bc):
    result = service.initiate(7, workshop, student_bc, BANK_TRANSFER)

    assert result.payment.status == "pending_settlement"
    assert result.payment.metadata["instructions"] == "Contact admin for bank transfer details"


def test_invoice_keeps_fractional_quebec_rate(service, workshop):
    result = service.initiate(3, workshop, PurchaserContext(province="QC"), STRIPE_CARD)
    assert result.invoice.tax_rate == 14.975
    assert result.invoice.to_dict()["taxType"] == "GST_PST"


def test_free_workshop_cannot_be_checked_out(service, student_bc):
    free = WorkshopPricingConfig(is_paid=False, base_cost=20000)
    with pytest.raises(CheckoutError, match="This workshop is free"):
        service.initiate(1, free, student_bc, STRIPE_CARD)


def test_zero_total_after_discount_is_free(service, student_bc):
    fully_discounted = WorkshopPricingConfig(is_paid=True, base_cost=20000, global_discount_percentage=100)
    with pytest.raises(CheckoutError, match="free"):
        service.initiate(1, fully_discounted, student_bc, INTERAC_TRANSFER)


def test_unknown_payment_method(service, workshop, student_bc):
    with pytest.raises(CheckoutError, match="Invalid payment method"):
        service.initiate(1, workshop, student_bc, "cheque")


def test_free_workshop_is_reported_before_payment_method(service, student_bc):
    free = WorkshopPricingConfig(is_paid=False)
    with pytest.raises(CheckoutError, match="This workshop is free"):
        service.initiate(1, free, student_bc, "cheque")


def test_checkout_error_is_a_value_error():
    assert issubclass(CheckoutError, ValueError)
