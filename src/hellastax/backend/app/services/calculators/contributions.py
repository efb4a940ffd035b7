"""Social insurance (EFKA) contribution helpers."""

from __future__ import annotations

from hellastax.backend.app.models import ContributionBreakdown
from hellastax.backend.config.year_config import (
    ContributionRates,
    SelfEmployedContributionConfig,
)

from .utils import non_negative


def compute_contributions(
    monthly_salary: float, rates: ContributionRates
) -> ContributionBreakdown:
    """Return employee and employer contributions for one payment.

    The rates apply to the salary clamped to the statutory monthly ceiling, so
    contributions stop growing once the salary exceeds the cap.
    """

    base = non_negative(monthly_salary)
    cap = rates.monthly_salary_cap
    if cap is not None and cap > 0:
        base = min(base, cap)

    return ContributionBreakdown(
        employee=base * rates.employee_rate,
        employer=base * rates.employer_rate,
        base=base,
    )


def compute_self_employed_contributions(
    annual_income: float,
    config: SelfEmployedContributionConfig,
    months: int = 12,
) -> float:
    """Return annual self-employed insurance for ``annual_income``.

    The insurable income is capped at ``monthly_income_cap * months`` and the
    result never drops below the minimum monthly contribution for the same
    number of months, however low the professional income is.
    """

    base = non_negative(annual_income)
    cap = config.monthly_income_cap
    if cap is not None and cap > 0:
        base = min(base, cap * months)

    contribution = base * config.rate
    floor = config.minimum_monthly_amount * months
    return max(contribution, floor)


__all__ = ["compute_contributions", "compute_self_employed_contributions"]
