"""Utility helpers for calculator modules."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from hellastax.backend.config.year_config import TaxBracket

_CENT = Decimal("0.01")
_RATE_STEP = Decimal("0.0001")


def format_percentage(value: float) -> str:
    """Return a human-readable percentage label for ``value``."""

    percentage = round(value * 100, 6)
    if float(int(percentage)) == percentage:
        return f"{int(percentage)}%"
    return f"{percentage:.2f}%"


def calculate_progressive_tax(
    amount: float,
    brackets: Sequence[TaxBracket],
    rate_resolver: Callable[[TaxBracket], float] | None = None,
) -> float:
    """Calculate progressive tax for ``amount`` using ``brackets``.

    Each bracket only taxes the slice of income between the previous upper
    bound and its own, so the result is continuous at every boundary.
    ``rate_resolver`` may substitute the marginal rate of a bracket (used for
    youth relief); by default the bracket's own rate applies.
    """

    if amount <= 0:
        return 0.0

    total = 0.0
    lower_bound = 0.0

    for bracket in brackets:
        rate = rate_resolver(bracket) if rate_resolver is not None else bracket.rate
        upper = bracket.upper_bound
        if upper is None or amount < upper:
            total += (amount - lower_bound) * rate
            break

        total += (upper - lower_bound) * rate
        lower_bound = upper

    return total


def non_negative(value: float) -> float:
    """Clamp ``value`` at zero."""

    return value if value > 0 else 0.0


def round_currency(value: float) -> float:
    """Round monetary amounts to cents, halves away from zero."""

    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return float(Decimal(str(value)).quantize(_RATE_STEP, rounding=ROUND_HALF_UP))


__all__ = [
    "calculate_progressive_tax",
    "format_percentage",
    "non_negative",
    "round_currency",
    "round_rate",
]
