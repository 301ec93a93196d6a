"""Tests for the price calculator."""

from decimal import Decimal

import pytest

from parcel_engine.config import EngineDefaults
from parcel_engine.engine.pricing import PriceCalculator, calculate_piece_price
from parcel_engine.exceptions import ValidationError
from parcel_engine.models import Batch, GeneratedPiece, PaymentOffer, PieceStatus


@pytest.fixture
def calculator() -> PriceCalculator:
    return PriceCalculator()


class TestCalculatePiecePrice:
    """Tests for rate priority and rounding."""

    def test_batch_rates(self, priced_batch: Batch) -> None:
        full, installment = calculate_piece_price(priced_batch, "400.5")

        assert full == Decimal("48060.00")
        assert installment == Decimal("54067.50")

    def test_batch_rates_beat_siblings(self, priced_batch: Batch, sibling_pieces) -> None:
        priced_batch.pieces = sibling_pieces

        assert calculate_piece_price(priced_batch, 100) == (Decimal("12000.00"), Decimal("13500.00"))

    def test_sibling_average(self, sibling_pieces) -> None:
        """Without batch rates, existing pieces give a surface-weighted rate."""
        batch = Batch(total_surface=10000, pieces=sibling_pieces)

        assert calculate_piece_price(batch, 500) == (Decimal("53000.00"), Decimal("58000.00"))

    def test_partial_batch_rates_ignored(self, sibling_pieces) -> None:
        batch = Batch(price_per_m2_full=200, pieces=sibling_pieces)

        assert calculate_piece_price(batch, 500) == (Decimal("53000.00"), Decimal("58000.00"))

    def test_fallback_rates(self) -> None:
        assert calculate_piece_price(Batch(), 400) == (Decimal("40000.00"), Decimal("44000.00"))

    def test_siblings_without_surface_use_fallback(self) -> None:
        batch = Batch(pieces=[GeneratedPiece(piece_number="B1", surface_area=0, selling_price_full=500)])

        assert calculate_piece_price(batch, 400) == (Decimal("40000.00"), Decimal("44000.00"))

    def test_custom_fallback_rates(self) -> None:
        defaults = EngineDefaults(fallback_rate_full=Decimal("50"), fallback_rate_installment=Decimal("60"))

        assert calculate_piece_price(Batch(), 400, defaults) == (Decimal("20000.00"), Decimal("24000.00"))

    def test_rounds_half_up(self) -> None:
        batch = Batch(price_per_m2_full=1, price_per_m2_installment="0.5")

        assert calculate_piece_price(batch, "0.125") == (Decimal("0.13"), Decimal("0.06"))

    @pytest.mark.parametrize("surface", [0, -1])
    def test_rejects_bad_surface(self, priced_batch: Batch, surface) -> None:
        with pytest.raises(ValidationError, match="surface"):
            calculate_piece_price(priced_batch, surface)


class TestPricePieces:
    """Tests for price_pieces."""

    def test_returns_priced_copies(self, calculator: PriceCalculator, priced_batch: Batch) -> None:
        pieces = [GeneratedPiece(piece_number="P001", surface_area=400, allocated_purchase_cost=4000)]

        priced = calculator.price_pieces(pieces, priced_batch)

        assert priced[0].selling_price_full == Decimal("48000.00")
        assert priced[0].selling_price_installment == Decimal("54000.00")
        assert priced[0].allocated_purchase_cost == Decimal("4000")
        assert pieces[0].selling_price_full == Decimal("0")

    def test_new_pieces_do_not_influence_each_other(self, calculator: PriceCalculator, sibling_pieces) -> None:
        batch = Batch(pieces=sibling_pieces)
        pieces = [
            GeneratedPiece(piece_number="B3", surface_area=100),
            GeneratedPiece(piece_number="B4", surface_area=100),
        ]

        priced = calculator.price_pieces(pieces, batch)

        assert priced[0].selling_price_full == priced[1].selling_price_full == Decimal("10600.00")


class TestRates:
    """Tests for average, suggested and changed rates."""

    def test_average_rates(self, sibling_pieces) -> None:
        assert PriceCalculator.average_rates(sibling_pieces) == (Decimal("106"), Decimal("116"))

    def test_average_rates_empty(self) -> None:
        assert PriceCalculator.average_rates([]) is None

    def test_suggest_rates_rounded(self, calculator: PriceCalculator) -> None:
        pieces = [
            GeneratedPiece(piece_number="B1", surface_area=3, selling_price_full=100, selling_price_installment=110),
        ]

        assert calculator.suggest_rates(pieces) == (Decimal("33.33"), Decimal("36.67"))

    def test_suggest_rates_empty(self, calculator: PriceCalculator) -> None:
        assert calculator.suggest_rates([]) is None

    def test_change_within_tolerance(self, calculator: PriceCalculator) -> None:
        assert not calculator.pricing_changed((100, 110), ("100.005", 110))

    def test_change_beyond_tolerance(self, calculator: PriceCalculator) -> None:
        assert calculator.pricing_changed((100, 110), ("100.02", None))

    def test_missing_new_rates_never_change(self, calculator: PriceCalculator) -> None:
        assert not calculator.pricing_changed((100, 110), (None, None))

    def test_missing_old_rate_always_changes(self, calculator: PriceCalculator) -> None:
        assert calculator.pricing_changed((None, 110), (100, None))


class TestRepricePieces:
    """Tests for reprice_pieces."""

    def test_only_available_repriced(self, calculator: PriceCalculator, sibling_pieces) -> None:
        repriced = calculator.reprice_pieces(sibling_pieces, 150, "160")

        assert repriced[0].selling_price_full == Decimal("60000.00")
        assert repriced[0].selling_price_installment == Decimal("64000.00")
        # B2 is sold: untouched
        assert repriced[1] is sibling_pieces[1]
        assert repriced[1].selling_price_full == Decimal("66000")

    def test_reprice_all(self, calculator: PriceCalculator, sibling_pieces) -> None:
        repriced = calculator.reprice_pieces(sibling_pieces, 150, 160, only_available=False)

        assert repriced[1].selling_price_full == Decimal("90000.00")
        assert repriced[1].status == PieceStatus.SOLD

    def test_rejects_negative_rate(self, calculator: PriceCalculator, sibling_pieces) -> None:
        with pytest.raises(ValidationError):
            calculator.reprice_pieces(sibling_pieces, -1, 160)


class TestOfferPiecePrice:
    """Tests for offer_piece_price."""

    def test_offer_rate_overrides_piece(self, calculator: PriceCalculator, sibling_pieces) -> None:
        offer = PaymentOffer(number_of_months=24, price_per_m2_installment=150)

        assert calculator.offer_piece_price(sibling_pieces[0], offer) == Decimal("60000.00")

    def test_piece_price_without_offer_rate(
        self, calculator: PriceCalculator, sibling_pieces, monthly_offer: PaymentOffer
    ) -> None:
        assert calculator.offer_piece_price(sibling_pieces[0], monthly_offer) == Decimal("44000")
