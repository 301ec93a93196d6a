#!/usr/bin/env python3
"""Generate sample subdivision plans and offer resolutions.

Builds random batches and offers, runs them through the engine and writes
the results as JSON, one file per entity type, for manual inspection.
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from parcel_engine.config import EngineConfig
from parcel_engine.engine import (
    InstallmentOfferResolver,
    PriceCalculator,
    build_installment_schedule,
    generate_pieces,
)
from parcel_engine.exceptions import ValidationError
from parcel_engine.generators import BatchGenerator, GenerationSpecGenerator, OfferGenerator
from parcel_engine.logging import get_logger, setup_logging
from parcel_engine.serialization import to_dict, to_json

logger = get_logger(__name__)


def save_json(records: list, filename: str, output_dir: Path) -> None:
    """Save records to a JSON file."""
    filepath = output_dir / filename
    filepath.write_text(to_json(records, pretty=True), encoding="utf-8")
    print(f"Saved {len(records)} records to {filepath}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate sample parcel-engine output")
    parser.add_argument("--batches", type=int, default=5, help="Number of batches (default: 5)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=project_root / "local",
        help="Directory for JSON files (default: ./local)",
    )
    args = parser.parse_args()

    config = EngineConfig.from_env()
    setup_logging(config.log_level, config.log_format)
    defaults = config.defaults

    batch_gen = BatchGenerator(seed=args.seed)
    spec_gen = GenerationSpecGenerator(seed=args.seed)
    offer_gen = OfferGenerator(seed=args.seed)
    calculator = PriceCalculator(defaults)
    resolver = InstallmentOfferResolver(defaults)

    args.output_dir.mkdir(parents=True, exist_ok=True)

    plans, pieces, resolutions, schedules = [], [], [], []
    for index in range(args.batches):
        batch = batch_gen.generate()
        spec = spec_gen.generate()
        try:
            plan, batch_pieces = generate_pieces(
                batch.total_surface, batch.total_cost, spec, batch=batch, defaults=defaults
            )
        except ValidationError as exc:
            logger.warning(
                "Batch %d (%s) skipped: %s",
                index,
                spec.mode.value,
                exc,
                extra={"batch": batch.name, "mode": spec.mode.value},
            )
            continue

        plans.append(
            {
                "batch": batch.name,
                "mode": spec.mode.value,
                "pieces": plan.piece_count,
                "total_surface": plan.total_surface,
                "total_used_surface": plan.total_used_surface,
                "wasted_surface": plan.wasted_surface,
            }
        )
        pieces.extend({"batch": batch.name, **to_dict(p)} for p in batch_pieces)

        if not batch_pieces:
            continue
        offer = offer_gen.generate()
        piece = batch_pieces[0]
        resolution = resolver.resolve(calculator.offer_piece_price(piece, offer), offer)
        resolutions.append({"piece_number": piece.piece_number, **to_dict(resolution)})
        schedules.extend(
            {"piece_number": piece.piece_number, **to_dict(row)}
            for row in build_installment_schedule(resolution, date.today(), defaults.money_places)
        )

    print("\nWriting sample output...")
    save_json(plans, "plans.json", args.output_dir)
    save_json(pieces, "pieces.json", args.output_dir)
    save_json(resolutions, "resolutions.json", args.output_dir)
    save_json(schedules, "schedules.json", args.output_dir)


if __name__ == "__main__":
    main()
