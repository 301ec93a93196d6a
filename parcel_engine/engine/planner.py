"""Subdivision planner: splits a batch surface into piece blueprints."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from functools import reduce
from typing import Any

from parcel_engine.config import EngineDefaults
from parcel_engine.engine.rounding import floor_count
from parcel_engine.exceptions import ValidationError
from parcel_engine.logging import get_logger
from parcel_engine.models.base import ZERO, as_decimal
from parcel_engine.models.enums import SmartStrategy
from parcel_engine.models.land import PieceBlueprint, SubdivisionPlan
from parcel_engine.models.specs import (
    AdvancedSpec,
    AutoItem,
    AutoSmartItem,
    AutoSpec,
    CustomFlexibleSpec,
    CustomItem,
    FlexibleItem,
    GenerationSpec,
    MixedSpec,
    PieceConfig,
    SmartItem,
    SmartSpec,
    UniformSpec,
)

logger = get_logger(__name__)

CostOf = Callable[[Decimal], Decimal]


def _cost_share(base_surface: Decimal, total_cost: Decimal) -> CostOf:
    """Unit cost proportional to surface: ``surface * total_cost / base``."""

    def cost_of(surface: Decimal) -> Decimal:
        if base_surface <= 0:
            return ZERO
        return surface * total_cost / base_surface

    return cost_of


def _as_count(value: Any) -> int:
    """Positive integral count, or 0 when the entry should be skipped."""
    try:
        number = as_decimal(value, "count")
    except ValidationError:
        return 0
    if number <= 0 or number != number.to_integral_value():
        return 0
    return int(number)


def _as_surface(value: Any) -> Decimal:
    """Positive surface, or 0 when the entry should be skipped."""
    try:
        number = as_decimal(value, "surface")
    except ValidationError:
        return ZERO
    return number if number > 0 else ZERO


def _positive(value: Any, name: str) -> Decimal:
    number = as_decimal(value, name)
    if number <= 0:
        raise ValidationError(f"{name} must be > 0, got {number}")
    return number


@dataclass(frozen=True)
class _Pool:
    """Accumulator threaded through a ``custom_flexible`` reduce."""

    used: Decimal
    blueprints: tuple[PieceBlueprint, ...] = ()

    def take(self, blueprints: list[PieceBlueprint], surface: Decimal) -> _Pool:
        return _Pool(used=self.used + surface, blueprints=self.blueprints + tuple(blueprints))


class SubdivisionPlanner:
    """Turn a generation spec plus batch totals into piece blueprints.

    The planner is a pure function of its inputs. Costs are apportioned by
    surface and never rounded here; rounding happens when selling prices
    are computed.

    Parameters
    ----------
    defaults : EngineDefaults | None
        Reference sizes for the smart strategies and fallback auto sizes.
    """

    def __init__(self, defaults: EngineDefaults | None = None) -> None:
        self.defaults = defaults or EngineDefaults()

    def plan(self, total_surface: Any, total_cost: Any, spec: GenerationSpec) -> SubdivisionPlan:
        """Plan a subdivision.

        Parameters
        ----------
        total_surface : Any
            Batch surface in m² (>= 0).
        total_cost : Any
            Batch acquisition cost (>= 0).
        spec : GenerationSpec
            One of the mode dataclasses from ``parcel_engine.models.specs``.

        Returns
        -------
        SubdivisionPlan
            Ordered blueprints and the surface they consume.

        Raises
        ------
        ValidationError
            On negative totals or non-positive sizes the mode requires.
        """
        surface = as_decimal(total_surface, "total_surface")
        cost = as_decimal(total_cost, "total_cost")
        if surface < 0:
            raise ValidationError(f"total_surface must be >= 0, got {surface}")
        if cost < 0:
            raise ValidationError(f"total_cost must be >= 0, got {cost}")

        if isinstance(spec, UniformSpec):
            plan = self._plan_uniform(surface, cost, spec)
        elif isinstance(spec, MixedSpec):
            plan = self._plan_mixed(surface, cost, spec)
        elif isinstance(spec, AutoSpec):
            plan = self._plan_auto(surface, cost, spec)
        elif isinstance(spec, SmartSpec):
            blueprints, used = self._smart_fill(surface, spec.strategy, _cost_share(surface, cost))
            plan = SubdivisionPlan(blueprints, used, surface)
        elif isinstance(spec, CustomFlexibleSpec):
            plan = self._plan_custom_flexible(surface, cost, spec)
        elif isinstance(spec, AdvancedSpec):
            plan = self._plan_advanced(surface, cost, spec)
        else:
            raise ValidationError(f"Unsupported generation spec: {type(spec).__name__}")

        if plan.wasted_surface > 0:
            logger.info(
                "%s plan leaves %s m² unallocated of %s m²",
                spec.mode.value,
                plan.wasted_surface,
                plan.total_surface,
                extra={
                    "mode": spec.mode.value,
                    "piece_count": plan.piece_count,
                    "total_surface": plan.total_surface,
                    "wasted_surface": plan.wasted_surface,
                },
            )
        logger.debug(
            "%s plan: %d pieces in %d blueprints",
            spec.mode.value,
            plan.piece_count,
            len(plan.blueprints),
        )
        return plan

    # --- Modes ---

    def _plan_uniform(self, total_surface: Decimal, total_cost: Decimal, spec: UniformSpec) -> SubdivisionPlan:
        """Equal pieces of ``spec.size``.

        Unlike the other modes, the unit cost is ``total_cost / count`` rather
        than a surface ratio: the whole batch cost is carried by the pieces
        even when a remainder smaller than one piece goes unused.
        """
        size = _positive(spec.size, "size")
        count = floor_count(total_surface, size)
        if count == 0:
            return SubdivisionPlan([], ZERO, total_surface)
        blueprint = PieceBlueprint(count=count, surface=size, cost_share=total_cost / count)
        return SubdivisionPlan([blueprint], size * count, total_surface)

    def _plan_mixed(self, total_surface: Decimal, total_cost: Decimal, spec: MixedSpec) -> SubdivisionPlan:
        rest_size = _positive(spec.rest_size, "rest_size")
        cost_of = _cost_share(total_surface, total_cost)
        blueprints: list[PieceBlueprint] = []
        used = ZERO

        for config in spec.configs:
            count, surface = _as_count(config.count), _as_surface(config.surface)
            if not count or not surface:
                logger.debug("Skipping mixed config %s", config)
                continue
            if used + count * surface > total_surface:
                logger.warning(
                    "Skipping mixed config %d x %s m²: only %s m² remain",
                    count,
                    surface,
                    total_surface - used,
                )
                continue
            blueprints.append(PieceBlueprint(count=count, surface=surface, cost_share=cost_of(surface)))
            used += count * surface

        rest_count = floor_count(total_surface - used, rest_size)
        if rest_count > 0:
            blueprints.append(
                PieceBlueprint(count=rest_count, surface=rest_size, cost_share=cost_of(rest_size))
            )
            used += rest_count * rest_size

        return SubdivisionPlan(blueprints, used, total_surface)

    def _plan_auto(self, total_surface: Decimal, total_cost: Decimal, spec: AutoSpec) -> SubdivisionPlan:
        blueprints, used = self._greedy_fill(
            total_surface,
            spec.min_size,
            spec.max_size,
            spec.preferred_size,
            _cost_share(total_surface, total_cost),
        )
        return SubdivisionPlan(blueprints, used, total_surface)

    def _plan_custom_flexible(
        self, total_surface: Decimal, total_cost: Decimal, spec: CustomFlexibleSpec
    ) -> SubdivisionPlan:
        explicit = as_decimal(spec.total_surface, "total_surface")
        if explicit < 0:
            raise ValidationError(f"total_surface must be >= 0, got {explicit}")
        # A caller override never exceeds a known batch surface
        effective = explicit or total_surface
        if explicit and total_surface:
            effective = min(explicit, total_surface)
        if effective == 0:
            effective = self._infer_surface(spec.items)
            logger.debug("Inferred custom_flexible surface: %s m²", effective)

        cost_of = _cost_share(effective, total_cost)

        def apply(pool: _Pool, item: FlexibleItem) -> _Pool:
            return self._apply_item(pool, item, effective, cost_of)

        pool = reduce(apply, spec.items, _Pool(used=ZERO))
        return SubdivisionPlan(list(pool.blueprints), pool.used, effective)

    def _plan_advanced(self, total_surface: Decimal, total_cost: Decimal, spec: AdvancedSpec) -> SubdivisionPlan:
        pattern = self._parse_pattern(spec.pattern)
        cost_of = _cost_share(total_surface, total_cost)
        blueprints: list[PieceBlueprint] = []
        used = ZERO

        for entry in pattern:
            count, surface = _as_count(entry.count), _as_surface(entry.surface)
            if not count or not surface:
                logger.debug("Skipping advanced entry %s", entry)
                continue
            if used + count * surface > total_surface:
                logger.warning(
                    "Skipping advanced entry %d x %s m²: only %s m² remain",
                    count,
                    surface,
                    total_surface - used,
                )
                continue
            blueprints.append(PieceBlueprint(count=count, surface=surface, cost_share=cost_of(surface)))
            used += count * surface

        return SubdivisionPlan(blueprints, used, total_surface)

    # --- custom_flexible items ---

    @staticmethod
    def _infer_surface(items: list[FlexibleItem]) -> Decimal:
        """Sum the surfaces of items whose size does not depend on the pool."""
        total = ZERO
        for item in items:
            if isinstance(item, AutoItem):
                total += _as_count(item.count) * _as_surface(item.surface)
            elif isinstance(item, CustomItem) and item.piece_number:
                total += _as_surface(item.surface)
        return total

    def _apply_item(
        self, pool: _Pool, item: FlexibleItem, effective: Decimal, cost_of: CostOf
    ) -> _Pool:
        remaining = effective - pool.used

        if isinstance(item, (AutoItem, CustomItem)):
            if isinstance(item, AutoItem):
                count, surface = _as_count(item.count), _as_surface(item.surface)
                blueprint = PieceBlueprint(
                    count=count,
                    surface=surface,
                    cost_share=cost_of(surface),
                    start_number=str(item.start_number or "1"),
                )
            else:
                count, surface = (1 if item.piece_number else 0), _as_surface(item.surface)
                blueprint = PieceBlueprint(
                    count=1,
                    surface=surface,
                    cost_share=cost_of(surface),
                    explicit_numbers=[item.piece_number],
                )
            if not count or not surface:
                logger.debug("Skipping invalid %s item %s", item.kind.value, item)
                return pool
            if count * surface > remaining:
                logger.warning(
                    "Skipping %s item of %s m²: only %s m² remain",
                    item.kind.value,
                    count * surface,
                    remaining,
                )
                return pool
            return pool.take([blueprint], count * surface)

        if remaining <= 0:
            logger.debug("Skipping %s item: surface pool exhausted", item.kind.value)
            return pool

        if isinstance(item, AutoSmartItem):
            blueprints, used = self._greedy_fill(
                remaining, item.min_size, item.max_size, item.preferred_size, cost_of
            )
        elif isinstance(item, SmartItem):
            blueprints, used = self._smart_fill(remaining, item.strategy, cost_of)
        else:
            raise ValidationError(f"Unsupported flexible item: {type(item).__name__}")
        return pool.take(blueprints, used)

    # --- Shared fill algorithms ---

    def _greedy_fill(
        self,
        surface: Decimal,
        min_size: Any,
        max_size: Any,
        preferred_size: Any,
        cost_of: CostOf,
    ) -> tuple[list[PieceBlueprint], Decimal]:
        """Preferred-size pieces first, then one tail piece within bounds."""
        d = self.defaults
        lo = _positive(d.auto_min_size if min_size is None else min_size, "min_size")
        hi = _positive(d.auto_max_size if max_size is None else max_size, "max_size")
        preferred = _positive(
            d.auto_preferred_size if preferred_size is None else preferred_size, "preferred_size"
        )
        if lo > hi:
            raise ValidationError(f"min_size ({lo}) must not exceed max_size ({hi})")

        blueprints: list[PieceBlueprint] = []
        remaining = surface

        def take_preferred() -> None:
            nonlocal remaining
            count = floor_count(remaining, preferred)
            if count > 0:
                blueprints.append(
                    PieceBlueprint(count=count, surface=preferred, cost_share=cost_of(preferred))
                )
                remaining -= count * preferred

        def take_tail() -> None:
            nonlocal remaining
            blueprints.append(PieceBlueprint(count=1, surface=remaining, cost_share=cost_of(remaining)))
            remaining = ZERO

        take_preferred()
        if lo <= remaining <= hi:
            take_tail()
        elif remaining > hi:
            take_preferred()
            if remaining >= lo:
                take_tail()

        return blueprints, surface - remaining

    def _smart_fill(
        self, surface: Decimal, strategy: SmartStrategy, cost_of: CostOf
    ) -> tuple[list[PieceBlueprint], Decimal]:
        d = self.defaults
        strategy = SmartStrategy(strategy)
        blueprints: list[PieceBlueprint] = []

        if strategy == SmartStrategy.MAX_PIECES:
            count = floor_count(surface, d.max_pieces_size)
            if count == 0:
                return [], ZERO
            size = surface / count
            return [PieceBlueprint(count=count, surface=size, cost_share=cost_of(size))], surface

        if strategy == SmartStrategy.MIN_WASTE:
            count = floor_count(surface, d.min_waste_size)
            remaining = surface
            if count > 0:
                blueprints.append(
                    PieceBlueprint(
                        count=count, surface=d.min_waste_size, cost_share=cost_of(d.min_waste_size)
                    )
                )
                remaining -= count * d.min_waste_size
            if remaining > 0:
                blueprints.append(PieceBlueprint(count=1, surface=remaining, cost_share=cost_of(remaining)))
            return blueprints, surface

        # Balanced: large share, then medium share of what is left, then one tail
        remaining = surface
        for size, share in (
            (d.balanced_large_size, d.balanced_large_share),
            (d.balanced_medium_size, d.balanced_medium_share),
        ):
            count = floor_count(remaining * share, size)
            if count > 0:
                blueprints.append(PieceBlueprint(count=count, surface=size, cost_share=cost_of(size)))
                remaining -= count * size
        if remaining > d.balanced_min_tail:
            blueprints.append(PieceBlueprint(count=1, surface=remaining, cost_share=cost_of(remaining)))
            remaining = ZERO
        return blueprints, surface - remaining

    # --- Advanced pattern ---

    @staticmethod
    def _parse_pattern(raw: Any) -> list[PieceConfig]:
        """Decode a caller pattern; anything malformed yields an empty list."""
        if raw is None or raw == "":
            return []
        if isinstance(raw, (str, bytes)):
            try:
                raw = json.loads(raw)
            except (json.JSONDecodeError, UnicodeDecodeError, RecursionError):
                logger.warning("Ignoring advanced pattern: not valid JSON")
                return []
        if not isinstance(raw, list):
            logger.warning("Ignoring advanced pattern: expected a list, got %s", type(raw).__name__)
            return []

        entries: list[PieceConfig] = []
        for entry in raw:
            if isinstance(entry, PieceConfig):
                entries.append(entry)
            elif isinstance(entry, Mapping):
                entries.append(PieceConfig(count=entry.get("count"), surface=entry.get("surface")))
            else:
                logger.warning("Ignoring advanced pattern: entry %r is not an object", entry)
                return []
        return entries


def plan_subdivision(
    total_surface: Any,
    total_cost: Any,
    spec: GenerationSpec,
    defaults: EngineDefaults | None = None,
) -> SubdivisionPlan:
    """Plan a subdivision with a one-off :class:`SubdivisionPlanner`."""
    return SubdivisionPlanner(defaults).plan(total_surface, total_cost, spec)
