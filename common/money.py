"""Decimal helpers for monetary quantities.

All money in the engine is ``decimal.Decimal``. Binary floats are only produced
at the presentation boundary.
"""
from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import Any

from common.exceptions import DataError

CENT = Decimal("0.01")
ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: Any, field: str = "value") -> Decimal:
    """Coerce ``value`` to a finite Decimal.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")`` rather than
    its binary expansion. Strings of the form ``"num/denom"`` are accepted.

    Raises:
        DataError: If the value cannot be parsed or is NaN or infinite.
    """
    d = _parse_decimal(value, field)
    if not d.is_finite():
        raise DataError(f"Invalid {field}: {value!r} is not a finite number")
    return d


def _parse_decimal(value: Any, field: str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise DataError(f"Invalid {field}: {value!r}")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(repr(value))
    if isinstance(value, str):
        text = value.strip().replace(",", "").lstrip("$")
        if "/" in text:
            return parse_fraction(text)
        try:
            return Decimal(text)
        except InvalidOperation:
            raise DataError(f"Invalid {field}: {value!r}") from None
    raise DataError(f"Invalid {field}: {value!r}")


def parse_fraction(fraction: str) -> Decimal:
    """Parse a ledger-style ``"numerator/denominator"`` quantity.

    >>> parse_fraction("3/4")
    Decimal('0.75')
    """
    parts = fraction.split("/")
    if len(parts) != 2:
        raise DataError(f"Cannot parse {fraction!r} to a decimal quantity")
    try:
        numerator = Decimal(parts[0])
        denominator = Decimal(parts[1])
    except InvalidOperation:
        raise DataError(f"Cannot parse {fraction!r} to a decimal quantity") from None
    if not (numerator.is_finite() and denominator.is_finite()):
        raise DataError(f"Cannot parse {fraction!r} to a decimal quantity")
    if denominator == 0:
        raise DataError(f"Division by zero in {fraction!r}")
    return numerator / denominator


def quantize_cents(amount: Decimal) -> Decimal:
    """Round to whole cents using banker's rounding."""
    return amount.quantize(CENT, rounding=ROUND_HALF_EVEN)


def format_dollars(amount: Decimal) -> str:
    """Format as ``$1,234.56`` (negative as ``-$1,234.56``)."""
    rounded = quantize_cents(amount)
    if rounded < 0:
        return f"-${-rounded:,.2f}"
    return f"${rounded:,.2f}"


def format_percent(ratio: Decimal | None) -> str:
    """Format a ratio as a percentage with two decimals."""
    if ratio is None:
        return "n/a"
    return f"{float(ratio):.2%}"


def format_signed_percent(ratio: Decimal | None) -> str:
    if ratio is None:
        return "n/a"
    return f"{float(ratio):+.2%}"
