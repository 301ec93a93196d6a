"""Synthetic batches, offers and generation specs."""

from decimal import Decimal

from parcel_engine.engine.numbering import PieceNumberer
from parcel_engine.generators.base import BaseGenerator
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
    GenerationSpec,
    MixedSpec,
    PaymentOffer,
    PieceConfig,
    PieceStatus,
    SmartItem,
    SmartSpec,
    SmartStrategy,
    UniformSpec,
)


class BatchGenerator(BaseGenerator):
    """Generate land batch snapshots."""

    # Per-m² price ranges in the batch currency
    FULL_RATE_RANGE = (60, 180)
    INSTALLMENT_MARKUP_RANGE = (1.05, 1.25)

    def generate(
        self,
        with_rates: bool | None = None,
        existing_pieces: int = 0,
    ) -> Batch:
        """Generate a batch.

        Parameters
        ----------
        with_rates : bool | None
            Force per-m² rates on or off; random (70% on) when ``None``.
        existing_pieces : int
            Number of already-priced pieces to attach.

        Returns
        -------
        Batch
            Generated batch.
        """
        total_surface = Decimal(self.rng.randint(40, 1000) * 50)
        total_cost = total_surface * Decimal(self.rng.randint(15, 60))

        if with_rates is None:
            with_rates = self.rng.random() < 0.7

        rate_full = rate_installment = None
        if with_rates:
            rate_full = Decimal(self.rng.randint(*self.FULL_RATE_RANGE))
            markup = Decimal(str(round(self.rng.uniform(*self.INSTALLMENT_MARKUP_RANGE), 2)))
            rate_installment = (rate_full * markup).quantize(Decimal("0.01"))

        return Batch(
            total_surface=total_surface,
            total_cost=total_cost,
            price_per_m2_full=rate_full,
            price_per_m2_installment=rate_installment,
            pieces=self._existing_pieces(existing_pieces),
            name=f"Lotissement {self.fake.city()}",
        )

    def _existing_pieces(self, count: int) -> list[GeneratedPiece]:
        if count <= 0:
            return []
        prefix = self.fake.random_uppercase_letter()
        numbers = PieceNumberer.expand_start_number(f"{prefix}1", count)
        pieces = []
        for number in numbers:
            surface = Decimal(self.rng.randint(6, 16) * 50)
            rate = Decimal(self.rng.randint(*self.FULL_RATE_RANGE))
            pieces.append(
                GeneratedPiece(
                    piece_number=number,
                    surface_area=surface,
                    selling_price_full=surface * rate,
                    selling_price_installment=surface * rate * Decimal("1.1"),
                    status=self.rng.choice(list(PieceStatus)),
                )
            )
        return pieces


class OfferGenerator(BaseGenerator):
    """Generate installment offers."""

    def generate(self, by_months: bool | None = None) -> PaymentOffer:
        """Generate an offer fixing either the monthly payment or the term.

        Parameters
        ----------
        by_months : bool | None
            ``True`` fixes ``number_of_months``, ``False`` fixes
            ``monthly_payment``; random when ``None``.
        """
        if by_months is None:
            by_months = self.rng.random() < 0.5

        advance_is_percentage = self.rng.random() < 0.5
        if advance_is_percentage:
            advance = Decimal(self.rng.choice([10, 15, 20, 25, 30]))
        else:
            advance = Decimal(self.rng.randint(1, 20) * 1000)

        return PaymentOffer(
            company_fee_percentage=Decimal(self.rng.choice([0, 1, 2, 3, 5])),
            advance_amount=advance,
            advance_is_percentage=advance_is_percentage,
            monthly_payment=Decimal(0) if by_months else Decimal(self.rng.randint(5, 40) * 100),
            number_of_months=self.rng.choice([12, 24, 36, 48, 60]) if by_months else 0,
            offer_name=f"Offre {self.fake.word().capitalize()}",
        )


class GenerationSpecGenerator(BaseGenerator):
    """Generate valid generation specs for every planning mode."""

    MODES = list(GenerationMode)

    def generate(self, mode: GenerationMode | None = None) -> GenerationSpec:
        """Generate a spec for ``mode`` (random when ``None``)."""
        mode = mode or self.rng.choice(self.MODES)

        if mode == GenerationMode.UNIFORM:
            return UniformSpec(size=self._size())
        if mode == GenerationMode.MIXED:
            configs = [
                PieceConfig(count=self.rng.randint(1, 10), surface=self._size())
                for _ in range(self.rng.randint(1, 3))
            ]
            return MixedSpec(configs=configs, rest_size=self._size())
        if mode == GenerationMode.AUTO:
            return AutoSpec(**self._auto_sizes())
        if mode == GenerationMode.SMART:
            return SmartSpec(strategy=self.rng.choice(list(SmartStrategy)))
        if mode == GenerationMode.CUSTOM_FLEXIBLE:
            return CustomFlexibleSpec(items=self._flexible_items())
        pattern = [
            {"count": self.rng.randint(1, 8), "surface": str(self._size())}
            for _ in range(self.rng.randint(1, 4))
        ]
        return AdvancedSpec(pattern=pattern)

    def _size(self) -> Decimal:
        return Decimal(self.rng.randint(4, 16) * 50)

    def _auto_sizes(self) -> dict[str, Decimal]:
        low = self.rng.randint(2, 5) * 50
        high = low + self.rng.randint(4, 10) * 50
        preferred = self.rng.randrange(low, high + 1, 50)
        return {
            "min_size": Decimal(low),
            "max_size": Decimal(high),
            "preferred_size": Decimal(preferred),
        }

    def _flexible_items(self) -> list:
        prefix = self.fake.random_uppercase_letter()
        items: list = [
            AutoItem(count=self.rng.randint(1, 10), surface=self._size(), start_number=f"{prefix}01"),
            # Doubled prefix keeps custom numbers clear of the auto and fallback ranges
            CustomItem(piece_number=f"{prefix}{prefix}{self.rng.randint(1, 99)}", surface=self._size()),
        ]
        if self.rng.random() < 0.5:
            items.append(AutoSmartItem(**self._auto_sizes()))
        else:
            items.append(SmartItem(strategy=self.rng.choice(list(SmartStrategy))))
        return items
