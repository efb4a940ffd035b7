"""Dependant-based income tax credit."""

from __future__ import annotations

import math

from hellastax.backend.config.year_config import TaxCreditConfig


def credit_reduction(taxable_income: float, config: TaxCreditConfig) -> float:
    """Return the reduction for every full step of income above the threshold."""

    excess = taxable_income - config.reduction_threshold
    if excess <= 0:
        return 0.0
    steps = math.floor(excess / config.reduction_step)
    return steps * config.reduction_per_step


def compute_tax_credit(
    dependants: int,
    taxable_income: float,
    config: TaxCreditConfig,
    base_tax: float | None = None,
) -> float:
    """Return the tax credit for ``dependants`` at ``taxable_income``.

    The bucket amount is reduced by ``reduction_per_step`` for every full
    ``reduction_step`` above ``reduction_threshold`` and floored at zero. When
    ``base_tax`` is supplied the credit is also capped at the tax otherwise due.
    """

    credit = config.amount_for_dependants(dependants)
    credit -= credit_reduction(taxable_income, config)

    if credit < 0:
        credit = 0.0
    if base_tax is not None:
        credit = min(credit, max(base_tax, 0.0))
    return credit


__all__ = ["compute_tax_credit", "credit_reduction"]
