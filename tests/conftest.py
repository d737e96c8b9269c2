"""
Pytest configuration and shared fixtures.
"""

import io
from datetime import date
from decimal import Decimal

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from virement.config import get_settings
from virement.domain.models import (
    BankAccount,
    Beneficiary,
    Currency,
    Letterhead,
    TransferOrderRequest,
)
from virement.infrastructure.directory import AccountDirectory


ISSUED_ON = date(2025, 3, 14)


def make_letterhead_pdf(pages: int = 1, pagesize=A4) -> bytes:
    """Build a small letterhead PDF with reportlab."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=pagesize)
    width, height = pagesize
    for number in range(1, pages + 1):
        c.setFont("Helvetica-Bold", 16)
        c.drawString(40, height - 50, "AKOR FOODS SARL")
        c.setFont("Helvetica", 8)
        c.drawString(40, 30, f"Papier en-tete - page {number}")
        c.line(40, height - 60, width - 40, height - 60)
        c.showPage()
    c.save()
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def fresh_settings():
    """Reload settings for every test so env overrides take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def today():
    """Fixed clock for the date line."""
    return lambda: ISSUED_ON


@pytest.fixture
def letterhead_pdf() -> bytes:
    return make_letterhead_pdf()


@pytest.fixture
def payer() -> BankAccount:
    return BankAccount(
        id="acc1",
        company_name="AKOR FOODS",
        rib="007787000215400030054744",
        bank_address="Attijariwafa Bank, 22 Rue de la Paix, 75002 Paris",
        signatory_name="Le Gérant",
    )


@pytest.fixture
def payer_with_letterhead(payer, letterhead_pdf) -> BankAccount:
    return BankAccount(
        id=payer.id,
        company_name=payer.company_name,
        rib=payer.rib,
        bank_address=payer.bank_address,
        signatory_name=payer.signatory_name,
        letterhead=Letterhead(name="entete.pdf", content=letterhead_pdf),
    )


@pytest.fixture
def beneficiary() -> Beneficiary:
    return Beneficiary(id="6", name="Services Beta SARL", rib="164787000215400030054321")


@pytest.fixture
def make_request(payer, beneficiary):
    """Factory for TransferOrderRequest with overridable fields."""
    def factory(**overrides) -> TransferOrderRequest:
        values = {
            "payer": payer,
            "beneficiary": beneficiary,
            "amount": Decimal("1234.56"),
            "purpose": "Facture F-2025-031",
            "currency": Currency.MAD,
            "express": False,
        }
        values.update(overrides)
        return TransferOrderRequest(**values)
    return factory


@pytest.fixture
def directory() -> AccountDirectory:
    return AccountDirectory.with_defaults()
