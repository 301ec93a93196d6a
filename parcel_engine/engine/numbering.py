"""Piece numbering: alphanumeric parsing, natural sort and sequencing."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from parcel_engine.config import EngineDefaults
from parcel_engine.exceptions import ValidationError
from parcel_engine.logging import get_logger
from parcel_engine.models.base import as_decimal
from parcel_engine.models.land import GeneratedPiece, PieceBlueprint

logger = get_logger(__name__)

_ASCII_DIGITS = frozenset("0123456789")


@dataclass(frozen=True)
class PieceNumber:
    """A piece number split into an optional letter prefix and its digits.

    ``digits`` keeps leading zeros so the field width survives increments.
    """

    prefix: str
    digits: str

    @property
    def value(self) -> int:
        return int(self.digits)

    @property
    def width(self) -> int:
        return len(self.digits)

    def shifted(self, offset: int) -> str:
        """Format ``value + offset`` with the same prefix.

        Prefixed numbers keep their zero-padded width (never truncating);
        pure numbers are written without padding.
        """
        number = self.value + offset
        if self.prefix:
            return f"{self.prefix}{str(number).zfill(self.width)}"
        return str(number)


def parse_piece_number(raw: str) -> PieceNumber | None:
    """Split ``raw`` into letters followed by ASCII digits.

    Letters are any alphabetic characters (Latin, Arabic, ...). Returns
    ``None`` when the string is empty, has no digits, or mixes the two in
    any other order.
    """
    text = raw.strip() if isinstance(raw, str) else ""
    split = 0
    while split < len(text) and text[split].isalpha():
        split += 1
    prefix, digits = text[:split], text[split:]
    if not digits or not set(digits) <= _ASCII_DIGITS:
        return None
    return PieceNumber(prefix=prefix, digits=digits)


def natural_sort_key(raw: str) -> tuple:
    """Sort by prefix, then numeric value; unparseable numbers sort last."""
    parsed = parse_piece_number(raw)
    if parsed is None:
        return (1, "", 0, raw)
    return (0, parsed.prefix, parsed.value, parsed.digits)


def natural_sort(numbers: Iterable[str]) -> list[str]:
    """Return piece numbers in natural order (``B2`` before ``B10``)."""
    return sorted(numbers, key=natural_sort_key)


class PieceNumberer:
    """Assign piece numbers to planned blueprints.

    Parameters
    ----------
    defaults : EngineDefaults | None
        Supplies the fallback prefix/width and the bulk range limit.
    """

    def __init__(self, defaults: EngineDefaults | None = None) -> None:
        self.defaults = defaults or EngineDefaults()

    def number_pieces(
        self,
        blueprints: Iterable[PieceBlueprint],
        existing_numbers: Iterable[str] = (),
    ) -> list[GeneratedPiece]:
        """Expand blueprints into numbered pieces, in plan order.

        Blueprints with ``explicit_numbers`` keep them verbatim; those with a
        ``start_number`` count up from it; the rest share one fallback
        counter (``P001``, ``P002``, ...) that continues after the highest
        existing number already using the fallback prefix.
        """
        counter = self._fallback_start(existing_numbers)
        pieces: list[GeneratedPiece] = []

        for blueprint in blueprints:
            if blueprint.count <= 0 or blueprint.surface <= 0:
                continue

            if blueprint.explicit_numbers:
                numbers = list(blueprint.explicit_numbers[: blueprint.count])
            elif blueprint.start_number is not None:
                numbers = self.expand_start_number(blueprint.start_number, blueprint.count)
            else:
                numbers = [self._fallback_number(counter + i) for i in range(blueprint.count)]
                counter += blueprint.count

            pieces.extend(
                GeneratedPiece(
                    piece_number=number,
                    surface_area=blueprint.surface,
                    allocated_purchase_cost=blueprint.cost_share,
                )
                for number in numbers
            )

        return pieces

    @staticmethod
    def expand_start_number(start_number: Any, count: int) -> list[str]:
        """``count`` consecutive numbers from ``start_number`` (``B01, B02, ...``)."""
        start = str(start_number).strip()
        parsed = parse_piece_number(start)
        if parsed is None:
            # Not alphanumeric: suffix the raw value with a counter
            logger.debug("Start number %r is not alphanumeric, suffixing a counter", start)
            return [f"{start}{i if i > 0 else ''}" for i in range(count)]
        return [parsed.shifted(i) for i in range(count)]

    def next_piece_number(self, existing_numbers: Iterable[str]) -> str:
        """Infer the number that follows the batch's existing sequence.

        The naturally-last number is incremented, keeping its prefix and
        zero-padded width. When it cannot be parsed, the result is the
        count of existing numbers plus one. An empty batch starts at ``1``.
        """
        numbers = natural_sort(n for n in existing_numbers if n)
        if not numbers:
            return "1"
        parsed = parse_piece_number(numbers[-1])
        if parsed is None:
            return str(len(numbers) + 1)
        return parsed.shifted(1)

    def expand_bulk_range(self, start: str, end: str, surface: Any) -> list[GeneratedPiece]:
        """Create one piece per number from ``start`` to ``end`` inclusive.

        Parameters
        ----------
        start, end : str
            Range bounds sharing one letter prefix, e.g. ``"B1"``/``"B20"``.
        surface : Any
            Surface of every created piece (> 0).

        Returns
        -------
        list[GeneratedPiece]
            Unpriced pieces, zero-padded to the wider of the two bounds.

        Raises
        ------
        ValidationError
            If a bound is unparseable, the prefixes differ, ``start > end``,
            the range exceeds the bulk limit, or ``surface`` is not positive.
        """
        area = as_decimal(surface, "surface")
        if area <= 0:
            raise ValidationError(f"surface must be > 0, got {area}")

        first, last = parse_piece_number(start), parse_piece_number(end)
        if first is None or last is None:
            raise ValidationError(f"Invalid piece number range: {start!r} to {end!r}")
        if first.prefix != last.prefix:
            raise ValidationError(
                f"Range bounds must share a prefix: {first.prefix!r} != {last.prefix!r}"
            )
        if first.value > last.value:
            raise ValidationError(f"Range start {start!r} is after range end {end!r}")

        count = last.value - first.value + 1
        limit = self.defaults.bulk_range_limit
        if count > limit:
            raise ValidationError(f"Range {start!r} to {end!r} has {count} pieces, limit is {limit}")

        width = max(first.width, last.width)
        return [
            GeneratedPiece(
                piece_number=f"{first.prefix}{str(value).zfill(width)}",
                surface_area=area,
            )
            for value in range(first.value, last.value + 1)
        ]

    # --- Fallback convention ---

    def _fallback_start(self, existing_numbers: Iterable[str]) -> int:
        highest = 0
        for raw in existing_numbers:
            parsed = parse_piece_number(raw)
            if parsed is not None and parsed.prefix == self.defaults.fallback_prefix:
                highest = max(highest, parsed.value)
        return highest + 1

    def _fallback_number(self, value: int) -> str:
        return f"{self.defaults.fallback_prefix}{str(value).zfill(self.defaults.fallback_width)}"


def number_pieces(
    blueprints: Iterable[PieceBlueprint],
    existing_numbers: Iterable[str] = (),
    defaults: EngineDefaults | None = None,
) -> list[GeneratedPiece]:
    return PieceNumberer(defaults).number_pieces(blueprints, existing_numbers)


def next_piece_number(existing_numbers: Iterable[str]) -> str:
    return PieceNumberer().next_piece_number(existing_numbers)


def expand_bulk_range(
    start: str,
    end: str,
    surface: Any,
    defaults: EngineDefaults | None = None,
) -> list[GeneratedPiece]:
    return PieceNumberer(defaults).expand_bulk_range(start, end, surface)
