"""Selling price resolution for parcels."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from decimal import Decimal
from typing import Any

from parcel_engine.config import EngineDefaults
from parcel_engine.engine.rounding import quantize_money
from parcel_engine.exceptions import ValidationError
from parcel_engine.models.base import ZERO, as_decimal, as_optional_decimal
from parcel_engine.models.enums import PieceStatus
from parcel_engine.models.land import Batch, GeneratedPiece
from parcel_engine.models.offer import PaymentOffer

logger = logging.getLogger(__name__)


class PriceCalculator:
    """Derive full and installment selling prices from per-m² rates.

    Rates come from the batch when both are set, otherwise from the
    surface-weighted average of the batch's existing pieces, otherwise from
    ``EngineDefaults.fallback_rate_full``/``fallback_rate_installment``.
    """

    def __init__(self, defaults: EngineDefaults | None = None) -> None:
        self.defaults = defaults or EngineDefaults()

    def resolve_rates(self, batch: Batch) -> tuple[Decimal, Decimal]:
        """Per-m² (full, installment) rates for new pieces of ``batch``."""
        if batch.has_rates:
            logger.debug("Pricing from batch rates")
            return batch.price_per_m2_full, batch.price_per_m2_installment

        sibling_rates = self.average_rates(batch.pieces)
        if sibling_rates is not None:
            logger.debug("Pricing from %d existing pieces", len(batch.pieces))
            return sibling_rates

        logger.debug("Pricing from fallback rates")
        return self.defaults.fallback_rate_full, self.defaults.fallback_rate_installment

    def calculate_piece_price(self, batch: Batch, surface: Any) -> tuple[Decimal, Decimal]:
        """Selling prices (full, installment) for a piece of ``surface`` m².

        Raises
        ------
        ValidationError
            If ``surface`` is not positive.
        """
        area = as_decimal(surface, "surface")
        if area <= 0:
            raise ValidationError(f"surface must be > 0, got {area}")
        rate_full, rate_installment = self.resolve_rates(batch)
        return self._money(area * rate_full), self._money(area * rate_installment)

    def price_pieces(self, pieces: Iterable[GeneratedPiece], batch: Batch) -> list[GeneratedPiece]:
        """Return copies of ``pieces`` priced against ``batch``.

        Rates are resolved once from the batch snapshot, so new pieces
        never influence each other's price.
        """
        rate_full, rate_installment = self.resolve_rates(batch)
        return [
            replace(
                piece,
                selling_price_full=self._money(piece.surface_area * rate_full),
                selling_price_installment=self._money(piece.surface_area * rate_installment),
            )
            for piece in pieces
        ]

    @staticmethod
    def average_rates(pieces: Iterable[GeneratedPiece]) -> tuple[Decimal, Decimal] | None:
        """Surface-weighted per-m² rates of ``pieces``; ``None`` without surface."""
        total_full = total_installment = total_surface = ZERO
        for piece in pieces:
            total_full += piece.selling_price_full
            total_installment += piece.selling_price_installment
            total_surface += piece.surface_area
        if total_surface <= 0:
            return None
        return total_full / total_surface, total_installment / total_surface

    def suggest_rates(self, pieces: Iterable[GeneratedPiece]) -> tuple[Decimal, Decimal] | None:
        """Average rates rounded to cents, to prefill a bulk price update."""
        rates = self.average_rates(pieces)
        if rates is None:
            return None
        return self._money(rates[0]), self._money(rates[1])

    def reprice_pieces(
        self,
        pieces: Iterable[GeneratedPiece],
        rate_full: Any,
        rate_installment: Any,
        only_available: bool = True,
    ) -> list[GeneratedPiece]:
        """Apply new per-m² rates to existing pieces.

        Parameters
        ----------
        pieces : Iterable[GeneratedPiece]
            Pieces of one batch.
        rate_full, rate_installment : Any
            New rates (>= 0).
        only_available : bool
            Leave reserved, sold and cancelled pieces at their current price.

        Returns
        -------
        list[GeneratedPiece]
            All pieces, in input order, repriced where applicable.
        """
        full = as_decimal(rate_full, "rate_full")
        installment = as_decimal(rate_installment, "rate_installment")
        if full < 0 or installment < 0:
            raise ValidationError("Rates must be >= 0")

        repriced = []
        for piece in pieces:
            if only_available and piece.status != PieceStatus.AVAILABLE:
                repriced.append(piece)
                continue
            repriced.append(
                replace(
                    piece,
                    selling_price_full=self._money(piece.surface_area * full),
                    selling_price_installment=self._money(piece.surface_area * installment),
                )
            )
        return repriced

    def pricing_changed(
        self,
        old_rates: tuple[Any, Any],
        new_rates: tuple[Any, Any],
    ) -> bool:
        """True when a newly given rate moved beyond the change tolerance.

        A new rate of ``None`` means "not given" and never counts as a
        change; an old rate of ``None`` is always replaced.
        """
        tolerance = self.defaults.price_change_tolerance
        for old, new in zip(old_rates, new_rates):
            old_value = as_optional_decimal(old, "old_rate")
            new_value = as_optional_decimal(new, "new_rate")
            if new_value is None:
                continue
            if old_value is None or abs(old_value - new_value) > tolerance:
                return True
        return False

    def offer_piece_price(self, piece: GeneratedPiece, offer: PaymentOffer) -> Decimal:
        """Installment price of ``piece`` under ``offer``.

        An offer with its own per-m² installment rate overrides the piece's
        stored installment price.
        """
        if offer.price_per_m2_installment:
            return self._money(piece.surface_area * offer.price_per_m2_installment)
        return piece.selling_price_installment

    def _money(self, value: Decimal) -> Decimal:
        return quantize_money(value, self.defaults.money_places)


def calculate_piece_price(
    batch: Batch,
    surface: Any,
    defaults: EngineDefaults | None = None,
) -> tuple[Decimal, Decimal]:
    return PriceCalculator(defaults).calculate_piece_price(batch, surface)
