"""Installment offer resolution for parcels and multi-parcel sales."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from parcel_engine.config import EngineDefaults
from parcel_engine.engine.rounding import ceil_count, quantize_money
from parcel_engine.exceptions import ValidationError
from parcel_engine.models.base import ZERO, as_decimal
from parcel_engine.models.offer import (
    PaymentOffer,
    ResolvedFullPayment,
    ResolvedInstallment,
    SaleTerm,
)

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def _non_negative(value: Any, name: str) -> Decimal:
    number = as_decimal(value, name)
    if number < 0:
        raise ValidationError(f"{name} must be >= 0, got {number}")
    return number


def _percentage(value: Any, name: str) -> Decimal:
    number = _non_negative(value, name)
    if number > HUNDRED:
        raise ValidationError(f"{name} must be <= 100, got {number}")
    return number


class InstallmentOfferResolver:
    """Resolve a payment offer against one parcel's price.

    All returned money values are rounded to cents; the term length is
    derived from the unrounded balance.
    """

    def __init__(self, defaults: EngineDefaults | None = None) -> None:
        self.defaults = defaults or EngineDefaults()

    def resolve(
        self,
        piece_price: Any,
        offer: PaymentOffer,
        reservation_share: Any = ZERO,
    ) -> ResolvedInstallment:
        """Compute fee, advance, balance and the offer's unknown term field.

        Parameters
        ----------
        piece_price : Any
            Installment price of the parcel (>= 0).
        offer : PaymentOffer
            Offer with either ``monthly_payment`` or ``number_of_months`` set.
        reservation_share : Any
            This parcel's part of the sale-wide reservation already paid.

        Returns
        -------
        ResolvedInstallment
            With ``number_of_months = ceil(balance / monthly_payment)`` for
            monthly-payment offers, or ``monthly_amount = balance / months``
            for fixed-term offers. Both are 0 when the offer sets neither.
        """
        price = _non_negative(piece_price, "piece_price")
        reservation = _non_negative(reservation_share, "reservation_share")

        company_fee = price * offer.company_fee_percentage / HUNDRED
        if offer.advance_is_percentage:
            advance = price * offer.advance_amount / HUNDRED
        else:
            # Flat advances are charged in full on every parcel
            advance = offer.advance_amount

        remaining = max(price + company_fee - reservation - advance, ZERO)

        if offer.monthly_payment > 0:
            months = ceil_count(remaining, offer.monthly_payment)
            monthly_amount = offer.monthly_payment
        elif offer.number_of_months > 0:
            months = offer.number_of_months
            monthly_amount = remaining / months
        else:
            logger.warning("Offer %r sets neither monthly payment nor term", offer.offer_name)
            months, monthly_amount = 0, ZERO

        return ResolvedInstallment(
            company_fee_amount=self._money(company_fee),
            advance_amount_applied=self._money(advance),
            remaining_balance=self._money(remaining),
            number_of_months=months,
            monthly_amount=self._money(monthly_amount),
        )

    def resolve_full_payment(
        self,
        piece_price: Any,
        company_fee_percentage: Any = ZERO,
        reservation_share: Any = ZERO,
    ) -> ResolvedFullPayment:
        """Amounts for a cash sale of one parcel.

        ``amount_due`` is what must still be received after the reservation
        for the sale to complete, floored at 0.
        """
        price = _non_negative(piece_price, "piece_price")
        fee_percentage = _percentage(company_fee_percentage, "company_fee_percentage")
        reservation = _non_negative(reservation_share, "reservation_share")

        company_fee = price * fee_percentage / HUNDRED
        total_payable = price + company_fee
        return ResolvedFullPayment(
            company_fee_amount=self._money(company_fee),
            total_payable=self._money(total_payable),
            amount_due=self._money(max(total_payable - reservation, ZERO)),
        )

    @staticmethod
    def aggregate(resolutions: Iterable[ResolvedInstallment]) -> SaleTerm:
        """Combine per-parcel resolutions into one sale-level term.

        Term length and monthly amount take the maximum across parcels (not
        the sum); fees, advances and balances are summed.
        """
        items = list(resolutions)
        if not items:
            return SaleTerm(0, ZERO, ZERO, ZERO, ZERO)
        return SaleTerm(
            number_of_months=max(r.number_of_months for r in items),
            monthly_installment_amount=max(r.monthly_amount for r in items),
            total_company_fee=sum((r.company_fee_amount for r in items), ZERO),
            total_advance=sum((r.advance_amount_applied for r in items), ZERO),
            total_remaining=sum((r.remaining_balance for r in items), ZERO),
        )

    @staticmethod
    def split_reservation(total: Any, piece_count: int) -> Decimal:
        """Even per-parcel share of a sale-wide reservation (unrounded)."""
        amount = _non_negative(total, "reservation")
        if piece_count <= 0:
            raise ValidationError(f"piece_count must be > 0, got {piece_count}")
        return amount / piece_count

    def _money(self, value: Decimal) -> Decimal:
        return quantize_money(value, self.defaults.money_places)


def resolve_installment(
    piece_price: Any,
    offer: PaymentOffer,
    reservation_share: Any = ZERO,
    defaults: EngineDefaults | None = None,
) -> ResolvedInstallment:
    return InstallmentOfferResolver(defaults).resolve(piece_price, offer, reservation_share)


def aggregate_sale_term(resolutions: Iterable[ResolvedInstallment]) -> SaleTerm:
    return InstallmentOfferResolver.aggregate(resolutions)
