"""Numeric coercion shared by all models."""

from decimal import Decimal, InvalidOperation
from typing import Any

from parcel_engine.exceptions import ValidationError

ZERO = Decimal("0")


def as_decimal(value: Any, name: str = "value") -> Decimal:
    """Coerce ``int``/``float``/``str``/``Decimal`` to ``Decimal``.

    Floats go through ``str()`` so ``0.1`` becomes ``Decimal("0.1")``.
    ``None`` and empty strings become zero.

    Raises
    ------
    ValidationError
        If the value is not a finite number.
    """
    if value is None or value == "":
        return ZERO
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"{name} must be a number, got {value!r}") from exc
    if not result.is_finite():
        raise ValidationError(f"{name} must be finite, got {value!r}")
    return result


def as_optional_decimal(value: Any, name: str = "value") -> Decimal | None:
    """Like :func:`as_decimal` but keeps ``None`` and blanks as ``None``."""
    if value is None or value == "":
        return None
    return as_decimal(value, name)
