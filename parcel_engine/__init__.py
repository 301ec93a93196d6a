"""Parcel subdivision and installment pricing engine."""

from parcel_engine.config import EngineConfig, EngineDefaults
from parcel_engine.engine import (
    InstallmentOfferResolver,
    PieceNumberer,
    PriceCalculator,
    SubdivisionPlanner,
    aggregate_sale_term,
    build_installment_schedule,
    calculate_piece_price,
    expand_bulk_range,
    generate_pieces,
    natural_sort,
    next_piece_number,
    number_pieces,
    plan_subdivision,
    resolve_installment,
)
from parcel_engine.exceptions import (
    ConfigurationError,
    ConflictError,
    ParcelEngineError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ConflictError",
    "EngineConfig",
    "EngineDefaults",
    "InstallmentOfferResolver",
    "ParcelEngineError",
    "PieceNumberer",
    "PriceCalculator",
    "SubdivisionPlanner",
    "ValidationError",
    "__version__",
    "aggregate_sale_term",
    "build_installment_schedule",
    "calculate_piece_price",
    "expand_bulk_range",
    "generate_pieces",
    "natural_sort",
    "next_piece_number",
    "number_pieces",
    "plan_subdivision",
    "resolve_installment",
]
