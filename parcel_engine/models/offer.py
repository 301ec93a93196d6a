"""Payment offer and installment resolution models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from parcel_engine.exceptions import ValidationError
from parcel_engine.models.base import ZERO, as_decimal, as_optional_decimal


@dataclass
class PaymentOffer:
    """Installment plan template.

    Exactly one of ``monthly_payment`` and ``number_of_months`` is the known
    quantity when the offer is authored; the other stays 0 until the offer is
    resolved against a parcel price.
    """

    company_fee_percentage: Decimal = ZERO
    advance_amount: Decimal = ZERO
    advance_is_percentage: bool = False
    monthly_payment: Decimal = ZERO
    number_of_months: int = 0
    price_per_m2_installment: Decimal | None = None
    offer_name: str | None = None

    def __post_init__(self) -> None:
        self.company_fee_percentage = as_decimal(
            self.company_fee_percentage, "company_fee_percentage"
        )
        self.advance_amount = as_decimal(self.advance_amount, "advance_amount")
        self.monthly_payment = as_decimal(self.monthly_payment, "monthly_payment")
        months = as_decimal(self.number_of_months, "number_of_months")
        if months != months.to_integral_value():
            raise ValidationError(f"number_of_months must be a whole number, got {months}")
        self.number_of_months = int(months)
        self.price_per_m2_installment = as_optional_decimal(
            self.price_per_m2_installment, "price_per_m2_installment"
        )

        if not ZERO <= self.company_fee_percentage <= 100:
            raise ValidationError(
                f"company_fee_percentage must be between 0 and 100, "
                f"got {self.company_fee_percentage}"
            )
        if self.advance_amount < 0:
            raise ValidationError(f"advance_amount must be >= 0, got {self.advance_amount}")
        if self.advance_is_percentage and self.advance_amount > 100:
            raise ValidationError(
                f"percentage advance must be <= 100, got {self.advance_amount}"
            )
        if self.monthly_payment < 0 or self.number_of_months < 0:
            raise ValidationError("monthly_payment and number_of_months must be >= 0")
        if self.monthly_payment > 0 and self.number_of_months > 0:
            raise ValidationError(
                "An offer specifies either monthly_payment or number_of_months, not both"
            )
        if self.price_per_m2_installment is not None and self.price_per_m2_installment <= 0:
            raise ValidationError(
                f"price_per_m2_installment must be > 0 when set, "
                f"got {self.price_per_m2_installment}"
            )


@dataclass(frozen=True)
class ResolvedInstallment:
    """Offer resolved against one parcel price."""

    company_fee_amount: Decimal
    advance_amount_applied: Decimal
    remaining_balance: Decimal  # Floored at 0
    number_of_months: int
    monthly_amount: Decimal


@dataclass(frozen=True)
class ResolvedFullPayment:
    """Cash sale of one parcel."""

    company_fee_amount: Decimal
    total_payable: Decimal
    amount_due: Decimal  # After the reservation share, floored at 0


@dataclass(frozen=True)
class SaleTerm:
    """Sale-level aggregate over per-parcel resolutions."""

    number_of_months: int
    monthly_installment_amount: Decimal
    total_company_fee: Decimal
    total_advance: Decimal
    total_remaining: Decimal


@dataclass(frozen=True)
class InstallmentDue:
    """One row of an installment schedule (parcela)."""

    installment_number: int  # 1, 2, 3, ...
    due_date: date
    amount_due: Decimal
