"""Subdivision planning, numbering, pricing and installment resolution."""

from parcel_engine.engine.installments import (
    InstallmentOfferResolver,
    aggregate_sale_term,
    resolve_installment,
)
from parcel_engine.engine.numbering import (
    PieceNumber,
    PieceNumberer,
    expand_bulk_range,
    natural_sort,
    natural_sort_key,
    next_piece_number,
    number_pieces,
    parse_piece_number,
)
from parcel_engine.engine.pipeline import generate_pieces
from parcel_engine.engine.planner import SubdivisionPlanner, plan_subdivision
from parcel_engine.engine.pricing import PriceCalculator, calculate_piece_price
from parcel_engine.engine.schedule import build_installment_schedule

__all__ = [
    "InstallmentOfferResolver",
    "PieceNumber",
    "PieceNumberer",
    "PriceCalculator",
    "SubdivisionPlanner",
    "aggregate_sale_term",
    "build_installment_schedule",
    "calculate_piece_price",
    "expand_bulk_range",
    "generate_pieces",
    "natural_sort",
    "natural_sort_key",
    "next_piece_number",
    "number_pieces",
    "parse_piece_number",
    "plan_subdivision",
    "resolve_installment",
]
