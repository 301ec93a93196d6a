"""Tests for data models and spec parsing."""

from decimal import Decimal

import pytest

from parcel_engine.exceptions import ValidationError
from parcel_engine.models import (
    AdvancedSpec,
    AutoItem,
    AutoSmartItem,
    AutoSpec,
    Batch,
    CustomFlexibleSpec,
    CustomItem,
    GeneratedPiece,
    GenerationMode,
    MixedSpec,
    PaymentOffer,
    PieceBlueprint,
    PieceStatus,
    SmartItem,
    SmartSpec,
    SmartStrategy,
    SubdivisionPlan,
    UniformSpec,
    spec_from_dict,
)
from parcel_engine.models.base import as_decimal, as_optional_decimal


class TestAsDecimal:
    """Tests for numeric coercion."""

    def test_float_goes_through_str(self) -> None:
        assert as_decimal(0.1) == Decimal("0.1")

    def test_int_and_str(self) -> None:
        assert as_decimal(400) == Decimal("400")
        assert as_decimal(" 400.5 ") == Decimal("400.5")

    def test_blank_is_zero(self) -> None:
        assert as_decimal(None) == Decimal("0")
        assert as_decimal("") == Decimal("0")

    def test_rejects_text(self) -> None:
        with pytest.raises(ValidationError, match="surface"):
            as_decimal("abc", "surface")

    def test_rejects_bool(self) -> None:
        with pytest.raises(ValidationError):
            as_decimal(True)

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), "Infinity"])
    def test_rejects_non_finite(self, value) -> None:
        with pytest.raises(ValidationError):
            as_decimal(value)

    def test_optional_keeps_none(self) -> None:
        assert as_optional_decimal(None) is None
        assert as_optional_decimal("") is None
        assert as_optional_decimal("12.5") == Decimal("12.5")


class TestLandModels:
    """Tests for Batch, GeneratedPiece and plan models."""

    def test_piece_coerces_numbers(self) -> None:
        piece = GeneratedPiece(piece_number="B1", surface_area=400.5, selling_price_full="48060")

        assert piece.surface_area == Decimal("400.5")
        assert piece.selling_price_full == Decimal("48060")
        assert piece.allocated_purchase_cost == Decimal("0")
        assert piece.status == PieceStatus.AVAILABLE

    def test_batch_coerces_numbers(self) -> None:
        batch = Batch(total_surface=1000.5, total_cost="20000", price_per_m2_full="")

        assert batch.total_surface == Decimal("1000.5")
        assert batch.total_cost == Decimal("20000")
        assert batch.price_per_m2_full is None

    def test_batch_has_rates(self) -> None:
        assert Batch(price_per_m2_full=100, price_per_m2_installment=110).has_rates
        assert not Batch(price_per_m2_full=100).has_rates
        assert not Batch(price_per_m2_full=0, price_per_m2_installment=110).has_rates

    def test_batch_piece_numbers_skip_blanks(self) -> None:
        batch = Batch(
            pieces=[
                GeneratedPiece(piece_number="B1", surface_area=400),
                GeneratedPiece(piece_number="", surface_area=400),
            ]
        )

        assert batch.piece_numbers == ["B1"]

    def test_plan_totals(self) -> None:
        plan = SubdivisionPlan(
            blueprints=[
                PieceBlueprint(count=5, surface=Decimal("900"), cost_share=Decimal("9000")),
                PieceBlueprint(count=1, surface=Decimal("400"), cost_share=Decimal("4000")),
            ],
            total_used_surface=Decimal("4900"),
            total_surface=Decimal("5000"),
        )

        assert plan.piece_count == 6
        assert plan.wasted_surface == Decimal("100")
        assert plan.total_allocated_cost == Decimal("49000")
        assert plan.blueprints[0].total_surface == Decimal("4500")

    def test_plan_waste_never_negative(self) -> None:
        plan = SubdivisionPlan([], Decimal("1000.0000001"), Decimal("1000"))

        assert plan.wasted_surface == Decimal("0")


class TestPaymentOffer:
    """Tests for PaymentOffer validation."""

    def test_coerces_values(self) -> None:
        offer = PaymentOffer(company_fee_percentage="2", advance_amount=5000.0, number_of_months="24")

        assert offer.company_fee_percentage == Decimal("2")
        assert offer.advance_amount == Decimal("5000.0")
        assert offer.number_of_months == 24
        assert offer.price_per_m2_installment is None

    def test_whole_float_term_accepted(self) -> None:
        assert PaymentOffer(number_of_months=24.0).number_of_months == 24

    def test_rejects_non_numeric_term(self) -> None:
        with pytest.raises(ValidationError, match="number_of_months"):
            PaymentOffer(number_of_months="abc")

    def test_rejects_fractional_term(self) -> None:
        """A fractional term is refused instead of being truncated."""
        with pytest.raises(ValidationError, match="whole number"):
            PaymentOffer(number_of_months=12.7)

    def test_rejects_both_term_fields(self) -> None:
        with pytest.raises(ValidationError, match="either"):
            PaymentOffer(monthly_payment=2000, number_of_months=24)

    @pytest.mark.parametrize("fee", [-1, 101])
    def test_rejects_fee_out_of_range(self, fee) -> None:
        with pytest.raises(ValidationError, match="company_fee_percentage"):
            PaymentOffer(company_fee_percentage=fee, number_of_months=12)

    def test_rejects_negative_advance(self) -> None:
        with pytest.raises(ValidationError, match="advance_amount"):
            PaymentOffer(advance_amount=-1, number_of_months=12)

    def test_rejects_percentage_advance_over_100(self) -> None:
        with pytest.raises(ValidationError, match="percentage advance"):
            PaymentOffer(advance_amount=120, advance_is_percentage=True, number_of_months=12)

    def test_flat_advance_may_exceed_100(self) -> None:
        offer = PaymentOffer(advance_amount=120, number_of_months=12)

        assert offer.advance_amount == Decimal("120")

    def test_rejects_negative_term(self) -> None:
        with pytest.raises(ValidationError):
            PaymentOffer(monthly_payment=-500)

    def test_rejects_non_positive_offer_rate(self) -> None:
        with pytest.raises(ValidationError, match="price_per_m2_installment"):
            PaymentOffer(number_of_months=12, price_per_m2_installment=0)


class TestSpecFromDict:
    """Tests for spec_from_dict."""

    def test_uniform(self) -> None:
        spec = spec_from_dict({"mode": "uniform", "size": 400})

        assert isinstance(spec, UniformSpec)
        assert spec.size == 400
        assert spec.mode == GenerationMode.UNIFORM

    def test_mixed(self) -> None:
        spec = spec_from_dict(
            {"mode": "mixed", "configs": [{"count": 5, "surface": 900}], "rest_size": 400}
        )

        assert isinstance(spec, MixedSpec)
        assert spec.configs[0].count == 5
        assert spec.configs[0].surface == 900
        assert spec.rest_size == 400

    def test_auto_optional_sizes(self) -> None:
        spec = spec_from_dict({"mode": "auto", "preferred_size": 350})

        assert isinstance(spec, AutoSpec)
        assert spec.min_size is None
        assert spec.preferred_size == 350

    def test_smart_default_strategy(self) -> None:
        spec = spec_from_dict({"mode": "smart"})

        assert isinstance(spec, SmartSpec)
        assert spec.strategy == SmartStrategy.BALANCED

    def test_custom_flexible_items(self) -> None:
        spec = spec_from_dict(
            {
                "mode": "custom_flexible",
                "total_surface": 3000,
                "items": [
                    {"type": "auto", "count": 3, "surface": 400, "start_number": "B01"},
                    {"type": "custom", "piece_number": "X1", "surface": 500},
                    {"type": "auto_smart", "min_size": 200},
                    {"type": "smart", "strategy": "min_waste"},
                ],
            }
        )

        assert isinstance(spec, CustomFlexibleSpec)
        assert spec.total_surface == 3000
        auto, custom, auto_smart, smart = spec.items
        assert auto == AutoItem(count=3, surface=400, start_number="B01")
        assert custom == CustomItem(piece_number="X1", surface=500)
        assert isinstance(auto_smart, AutoSmartItem)
        assert auto_smart.min_size == 200
        assert smart == SmartItem(strategy=SmartStrategy.MIN_WASTE)

    def test_auto_item_default_start_number(self) -> None:
        spec = spec_from_dict({"mode": "custom_flexible", "items": [{"type": "auto", "count": 2, "surface": 300}]})

        assert spec.items[0].start_number == "1"

    def test_advanced_keeps_raw_pattern(self) -> None:
        spec = spec_from_dict({"mode": "advanced", "pattern": "not json"})

        assert isinstance(spec, AdvancedSpec)
        assert spec.pattern == "not json"

    def test_unknown_mode(self) -> None:
        with pytest.raises(ValidationError, match="generation mode"):
            spec_from_dict({"mode": "random"})

    def test_unknown_item_type(self) -> None:
        with pytest.raises(ValidationError, match="item type"):
            spec_from_dict({"mode": "custom_flexible", "items": [{"type": "bulk"}]})

    def test_unknown_strategy(self) -> None:
        with pytest.raises(ValidationError, match="strategy"):
            spec_from_dict({"mode": "smart", "strategy": "greedy"})
