"""Unit tests for social insurance contribution helpers."""

from __future__ import annotations

import pytest

from hellastax.backend.app.services.calculators.contributions import (
    compute_contributions,
    compute_self_employed_contributions,
)
from hellastax.backend.config.year_config import (
    ContributionRates,
    load_year_configuration,
)


@pytest.fixture()
def employment_rates() -> ContributionRates:
    return load_year_configuration(2025).employment.contributions


def test_contributions_below_cap(employment_rates: ContributionRates) -> None:
    breakdown = compute_contributions(1_000, employment_rates)

    assert breakdown.base == 1_000
    assert breakdown.employee == pytest.approx(134.0)
    assert breakdown.employer == pytest.approx(217.9)


def test_contributions_are_capped(employment_rates: ContributionRates) -> None:
    cap = employment_rates.monthly_salary_cap

    breakdown = compute_contributions(20_000, employment_rates)

    assert breakdown.base == cap
    assert breakdown.employee == pytest.approx(cap * employment_rates.employee_rate)
    assert breakdown.employer == pytest.approx(cap * employment_rates.employer_rate)


def test_contributions_never_exceed_cap_times_rate(
    employment_rates: ContributionRates,
) -> None:
    ceiling = employment_rates.monthly_salary_cap * employment_rates.employee_rate
    for salary in (0, 500, 7_572.62, 7_572.63, 50_000):
        assert compute_contributions(salary, employment_rates).employee <= ceiling + 1e-9


def test_negative_salary_yields_zero(employment_rates: ContributionRates) -> None:
    breakdown = compute_contributions(-100, employment_rates)

    assert breakdown.employee == 0
    assert breakdown.employer == 0


def test_self_employed_contributions_respect_floor_and_cap() -> None:
    config = load_year_configuration(2025).freelance.contributions

    assert compute_self_employed_contributions(18_000, config) == pytest.approx(4_878.0)
    assert compute_self_employed_contributions(4_000, config) == pytest.approx(
        230.29 * 12
    )
    assert compute_self_employed_contributions(0, config) == pytest.approx(230.29 * 12)
    assert compute_self_employed_contributions(500_000, config) == pytest.approx(
        7_572.62 * 12 * 0.271
    )
