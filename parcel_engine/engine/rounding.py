"""Decimal rounding helpers for surfaces and money."""

from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal


def quantize_money(value: Decimal, places: int = 2) -> Decimal:
    """Round half-up to ``places`` decimals (cents by default)."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def floor_count(numerator: Decimal, denominator: Decimal) -> int:
    """``floor(numerator / denominator)`` as an int; 0 for non-positive inputs."""
    if numerator <= 0 or denominator <= 0:
        return 0
    return int((numerator / denominator).to_integral_value(rounding=ROUND_FLOOR))


def ceil_count(numerator: Decimal, denominator: Decimal) -> int:
    """``ceil(numerator / denominator)`` as an int; 0 for non-positive inputs."""
    if numerator <= 0 or denominator <= 0:
        return 0
    return int((numerator / denominator).to_integral_value(rounding=ROUND_CEILING))
