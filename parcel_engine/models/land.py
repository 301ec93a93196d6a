"""Land batch, blueprint and piece models."""

from dataclasses import dataclass, field
from decimal import Decimal

from parcel_engine.models.base import ZERO, as_decimal, as_optional_decimal
from parcel_engine.models.enums import PieceStatus


@dataclass
class PieceBlueprint:
    """Transient (count, surface, cost) template produced by the planner.

    Exactly one numbering hint applies: ``explicit_numbers`` for custom
    pieces, ``start_number`` for auto-numbered ranges, neither for pieces
    numbered with the fallback convention.
    """

    count: int
    surface: Decimal
    cost_share: Decimal  # Per unit piece, unrounded
    explicit_numbers: list[str] | None = None
    start_number: str | None = None

    @property
    def total_surface(self) -> Decimal:
        return self.surface * self.count

    @property
    def total_cost(self) -> Decimal:
        return self.cost_share * self.count


@dataclass
class SubdivisionPlan:
    """Ordered blueprints plus the surface they consume."""

    blueprints: list[PieceBlueprint]
    total_used_surface: Decimal
    total_surface: Decimal

    @property
    def piece_count(self) -> int:
        return sum(bp.count for bp in self.blueprints)

    @property
    def wasted_surface(self) -> Decimal:
        """Surface left unallocated, never negative."""
        return max(self.total_surface - self.total_used_surface, ZERO)

    @property
    def total_allocated_cost(self) -> Decimal:
        return sum((bp.total_cost for bp in self.blueprints), ZERO)


@dataclass
class GeneratedPiece:
    """A numbered, sellable parcel of a batch."""

    piece_number: str
    surface_area: Decimal
    allocated_purchase_cost: Decimal = ZERO
    selling_price_full: Decimal = ZERO
    selling_price_installment: Decimal = ZERO
    status: PieceStatus = PieceStatus.AVAILABLE

    def __post_init__(self) -> None:
        self.surface_area = as_decimal(self.surface_area, "surface_area")
        self.allocated_purchase_cost = as_decimal(
            self.allocated_purchase_cost, "allocated_purchase_cost"
        )
        self.selling_price_full = as_decimal(self.selling_price_full, "selling_price_full")
        self.selling_price_installment = as_decimal(
            self.selling_price_installment, "selling_price_installment"
        )


@dataclass
class Batch:
    """Read-only snapshot of a land batch as supplied by persistence."""

    total_surface: Decimal = ZERO
    total_cost: Decimal = ZERO
    price_per_m2_full: Decimal | None = None
    price_per_m2_installment: Decimal | None = None
    pieces: list[GeneratedPiece] = field(default_factory=list)
    name: str = ""

    def __post_init__(self) -> None:
        self.total_surface = as_decimal(self.total_surface, "total_surface")
        self.total_cost = as_decimal(self.total_cost, "total_cost")
        self.price_per_m2_full = as_optional_decimal(self.price_per_m2_full, "price_per_m2_full")
        self.price_per_m2_installment = as_optional_decimal(
            self.price_per_m2_installment, "price_per_m2_installment"
        )

    @property
    def piece_numbers(self) -> list[str]:
        return [p.piece_number for p in self.pieces if p.piece_number]

    @property
    def has_rates(self) -> bool:
        """True when both per-m² rates are set and positive."""
        return bool(
            self.price_per_m2_full
            and self.price_per_m2_installment
            and self.price_per_m2_full > 0
            and self.price_per_m2_installment > 0
        )
