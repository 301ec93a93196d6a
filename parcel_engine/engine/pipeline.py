"""Plan, number and price pieces in one call."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from parcel_engine.config import EngineDefaults
from parcel_engine.engine.numbering import PieceNumberer
from parcel_engine.engine.planner import SubdivisionPlanner
from parcel_engine.engine.pricing import PriceCalculator
from parcel_engine.models.land import Batch, GeneratedPiece, SubdivisionPlan
from parcel_engine.models.specs import GenerationSpec


def generate_pieces(
    total_surface: Any,
    total_cost: Any,
    spec: GenerationSpec,
    batch: Batch | None = None,
    existing_numbers: Iterable[str] | None = None,
    defaults: EngineDefaults | None = None,
) -> tuple[SubdivisionPlan, list[GeneratedPiece]]:
    """Run the planner, numberer and price calculator in sequence.

    Parameters
    ----------
    total_surface, total_cost : Any
        Batch totals to subdivide.
    spec : GenerationSpec
        Planning mode and its parameters.
    batch : Batch | None
        Snapshot supplying rates and sibling pieces; an empty batch prices
        with the fallback rates.
    existing_numbers : Iterable[str] | None
        Numbers already used in the batch; defaults to ``batch.piece_numbers``.
    defaults : EngineDefaults | None
        Shared by all three components.

    Returns
    -------
    tuple[SubdivisionPlan, list[GeneratedPiece]]
        The plan and its priced pieces, ready to hand to persistence.
    """
    defaults = defaults or EngineDefaults()
    batch = batch or Batch(total_surface=total_surface, total_cost=total_cost)
    if existing_numbers is None:
        existing_numbers = batch.piece_numbers

    plan = SubdivisionPlanner(defaults).plan(total_surface, total_cost, spec)
    pieces = PieceNumberer(defaults).number_pieces(plan.blueprints, existing_numbers)
    return plan, PriceCalculator(defaults).price_pieces(pieces, batch)
