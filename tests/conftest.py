"""Pytest configuration and fixtures."""

from decimal import Decimal

import pytest

from parcel_engine.config import EngineDefaults
from parcel_engine.models import Batch, GeneratedPiece, PaymentOffer, PieceStatus


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def defaults() -> EngineDefaults:
    """Stock engine defaults."""
    return EngineDefaults()


@pytest.fixture
def priced_batch() -> Batch:
    """Batch with both per-m² rates set."""
    return Batch(
        total_surface=Decimal("10000"),
        total_cost=Decimal("100000"),
        price_per_m2_full=Decimal("120"),
        price_per_m2_installment=Decimal("135"),
        name="Lotissement Test",
    )


@pytest.fixture
def sibling_pieces() -> list[GeneratedPiece]:
    """Two existing pieces averaging 106/m² full and 116/m² installment."""
    return [
        GeneratedPiece(
            piece_number="B1",
            surface_area=Decimal("400"),
            selling_price_full=Decimal("40000"),
            selling_price_installment=Decimal("44000"),
        ),
        GeneratedPiece(
            piece_number="B2",
            surface_area=Decimal("600"),
            selling_price_full=Decimal("66000"),
            selling_price_installment=Decimal("72000"),
            status=PieceStatus.SOLD,
        ),
    ]


@pytest.fixture
def monthly_offer() -> PaymentOffer:
    """Offer fixing a 2000 monthly payment with a flat 5000 advance."""
    return PaymentOffer(
        company_fee_percentage=Decimal("2"),
        advance_amount=Decimal("5000"),
        advance_is_percentage=False,
        monthly_payment=Decimal("2000"),
        offer_name="Offre Standard",
    )
