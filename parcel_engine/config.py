"""Configuration management for parcel-engine."""

from dataclasses import dataclass, field, fields, replace
from decimal import Decimal, InvalidOperation
from typing import Any

from parcel_engine.exceptions import ConfigurationError


@dataclass(frozen=True)
class EngineDefaults:
    """Fixed rates, reference sizes and numbering conventions.

    Passed explicitly into the planner, numberer and calculators so that
    tests can override any of them without touching algorithm code.
    """

    # Price per m² used when neither batch rates nor siblings are available
    fallback_rate_full: Decimal = Decimal("100")
    fallback_rate_installment: Decimal = Decimal("110")

    # Smart strategies
    max_pieces_size: Decimal = Decimal("300")
    min_waste_size: Decimal = Decimal("500")
    balanced_large_size: Decimal = Decimal("600")
    balanced_large_share: Decimal = Decimal("0.3")
    balanced_medium_size: Decimal = Decimal("400")
    balanced_medium_share: Decimal = Decimal("0.5")
    balanced_min_tail: Decimal = Decimal("200")

    # Auto (greedy) sizes when a spec leaves them out
    auto_min_size: Decimal = Decimal("200")
    auto_max_size: Decimal = Decimal("600")
    auto_preferred_size: Decimal = Decimal("400")

    # Numbering
    fallback_prefix: str = "P"
    fallback_width: int = 3
    bulk_range_limit: int = 100

    price_change_tolerance: Decimal = Decimal("0.01")
    money_places: int = 2

    @property
    def money_quantum(self) -> Decimal:
        """Smallest currency step, e.g. ``Decimal("0.01")``."""
        return Decimal(1).scaleb(-self.money_places)

    def override(self, values: dict[str, Any]) -> "EngineDefaults":
        """Return a copy with the given fields replaced.

        Values are coerced to the field's type; unknown names raise
        ``ConfigurationError``.
        """
        known = {f.name: f for f in fields(self)}
        changes: dict[str, Any] = {}
        for name, raw in values.items():
            if name not in known:
                raise ConfigurationError(f"Unknown engine default: {name}")
            changes[name] = _coerce(name, raw, type(getattr(self, name)))
        return replace(self, **changes)


def _coerce(name: str, raw: Any, target: type) -> Any:
    try:
        if target is Decimal:
            return Decimal(str(raw))
        if target is int:
            return int(raw)
        return str(raw)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from exc


@dataclass
class EngineConfig:
    """Main configuration for parcel-engine."""

    defaults: EngineDefaults = field(default_factory=EngineDefaults)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        import json
        import os

        overrides: dict[str, Any] = {}

        defaults_str = os.getenv("ENGINE_DEFAULTS")
        if defaults_str:
            try:
                parsed = json.loads(defaults_str)
            except json.JSONDecodeError as exc:
                raise ConfigurationError("ENGINE_DEFAULTS is not valid JSON") from exc
            if not isinstance(parsed, dict):
                raise ConfigurationError("ENGINE_DEFAULTS must be a JSON object")
            overrides.update(parsed)

        env_fields = {
            "FALLBACK_RATE_FULL": "fallback_rate_full",
            "FALLBACK_RATE_INSTALLMENT": "fallback_rate_installment",
            "FALLBACK_PREFIX": "fallback_prefix",
            "BULK_RANGE_LIMIT": "bulk_range_limit",
        }
        for env_name, field_name in env_fields.items():
            value = os.getenv(env_name)
            if value:
                overrides[field_name] = value

        return cls(
            defaults=EngineDefaults().override(overrides),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
