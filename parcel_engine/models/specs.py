"""Generation specifications, one dataclass per planning mode."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, ClassVar, Union

from parcel_engine.exceptions import ValidationError
from parcel_engine.models.enums import FlexibleItemType, GenerationMode, SmartStrategy


@dataclass
class PieceConfig:
    """``count`` pieces of ``surface`` m² (mixed and advanced modes)."""

    count: int
    surface: Decimal


@dataclass
class UniformSpec:
    size: Decimal
    mode: ClassVar[GenerationMode] = GenerationMode.UNIFORM


@dataclass
class MixedSpec:
    configs: list[PieceConfig]
    rest_size: Decimal
    mode: ClassVar[GenerationMode] = GenerationMode.MIXED


@dataclass
class AutoSpec:
    """Greedy fill; ``None`` sizes fall back to ``EngineDefaults``."""

    min_size: Decimal | None = None
    max_size: Decimal | None = None
    preferred_size: Decimal | None = None
    mode: ClassVar[GenerationMode] = GenerationMode.AUTO


@dataclass
class SmartSpec:
    strategy: SmartStrategy = SmartStrategy.BALANCED
    mode: ClassVar[GenerationMode] = GenerationMode.SMART


@dataclass
class AutoItem:
    count: int
    surface: Decimal
    start_number: str = "1"
    kind: ClassVar[FlexibleItemType] = FlexibleItemType.AUTO


@dataclass
class CustomItem:
    piece_number: str
    surface: Decimal
    kind: ClassVar[FlexibleItemType] = FlexibleItemType.CUSTOM


@dataclass
class AutoSmartItem:
    min_size: Decimal | None = None
    max_size: Decimal | None = None
    preferred_size: Decimal | None = None
    kind: ClassVar[FlexibleItemType] = FlexibleItemType.AUTO_SMART


@dataclass
class SmartItem:
    strategy: SmartStrategy = SmartStrategy.BALANCED
    kind: ClassVar[FlexibleItemType] = FlexibleItemType.SMART


FlexibleItem = Union[AutoItem, CustomItem, AutoSmartItem, SmartItem]


@dataclass
class CustomFlexibleSpec:
    """Heterogeneous items drawing on one shared surface pool.

    ``total_surface`` overrides the batch total when given and non-zero, but
    is capped at the batch total whenever that is known (non-zero).
    """

    items: list[FlexibleItem] = field(default_factory=list)
    total_surface: Decimal | None = None
    mode: ClassVar[GenerationMode] = GenerationMode.CUSTOM_FLEXIBLE


@dataclass
class AdvancedSpec:
    """Raw caller pattern: a JSON string or a list of ``{count, surface}``."""

    pattern: Any = None
    mode: ClassVar[GenerationMode] = GenerationMode.ADVANCED


GenerationSpec = Union[
    UniformSpec, MixedSpec, AutoSpec, SmartSpec, CustomFlexibleSpec, AdvancedSpec
]


def _enum(enum_cls: type, raw: Any, what: str) -> Any:
    try:
        return enum_cls(raw)
    except ValueError as exc:
        choices = ", ".join(e.value for e in enum_cls)
        raise ValidationError(f"Unknown {what} {raw!r} (expected one of: {choices})") from exc


def _item_from_dict(data: dict[str, Any]) -> FlexibleItem:
    kind = _enum(FlexibleItemType, data.get("type"), "item type")
    if kind == FlexibleItemType.AUTO:
        return AutoItem(
            count=data.get("count") or 0,
            surface=data.get("surface") or 0,
            start_number=str(data.get("start_number") or "1"),
        )
    if kind == FlexibleItemType.CUSTOM:
        return CustomItem(
            piece_number=str(data.get("piece_number") or ""),
            surface=data.get("surface") or 0,
        )
    if kind == FlexibleItemType.AUTO_SMART:
        return AutoSmartItem(
            min_size=data.get("min_size"),
            max_size=data.get("max_size"),
            preferred_size=data.get("preferred_size"),
        )
    return SmartItem(strategy=_enum(SmartStrategy, data.get("strategy", "balanced"), "strategy"))


def spec_from_dict(data: dict[str, Any]) -> GenerationSpec:
    """Build a typed generation spec from a serialized form payload.

    Parameters
    ----------
    data : dict[str, Any]
        Mapping with a ``mode`` key plus the mode's fields, e.g.
        ``{"mode": "uniform", "size": 400}``.

    Returns
    -------
    GenerationSpec
        The matching spec dataclass. Numeric fields are left as given;
        the planner coerces and validates them.

    Raises
    ------
    ValidationError
        If the mode, a flexible item type or a smart strategy is unknown.
    """
    mode = _enum(GenerationMode, data.get("mode"), "generation mode")

    if mode == GenerationMode.UNIFORM:
        return UniformSpec(size=data.get("size"))
    if mode == GenerationMode.MIXED:
        configs = [
            PieceConfig(count=c.get("count") or 0, surface=c.get("surface") or 0)
            for c in data.get("configs") or []
        ]
        return MixedSpec(configs=configs, rest_size=data.get("rest_size"))
    if mode == GenerationMode.AUTO:
        return AutoSpec(
            min_size=data.get("min_size"),
            max_size=data.get("max_size"),
            preferred_size=data.get("preferred_size"),
        )
    if mode == GenerationMode.SMART:
        return SmartSpec(strategy=_enum(SmartStrategy, data.get("strategy", "balanced"), "strategy"))
    if mode == GenerationMode.CUSTOM_FLEXIBLE:
        return CustomFlexibleSpec(
            items=[_item_from_dict(item) for item in data.get("items") or []],
            total_surface=data.get("total_surface"),
        )
    return AdvancedSpec(pattern=data.get("pattern"))
