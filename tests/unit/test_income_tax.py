"""Unit tests for the forward income tax calculation."""

from __future__ import annotations

import pytest

from hellastax.backend.app.models import CalculationInput
from hellastax.backend.app.services.calculators.income import calculate_income_tax
from hellastax.backend.config.year_config import YearConfiguration, load_year_configuration


@pytest.fixture()
def config_2025() -> YearConfiguration:
    return load_year_configuration(2025)


def _input(**overrides: object) -> CalculationInput:
    values: dict[str, object] = {
        "year": 2025,
        "gross_income": 14_000,
        "payments_per_year": 14,
    }
    values.update(overrides)
    return CalculationInput(**values)


def test_reference_salary(config_2025: YearConfiguration) -> None:
    result = calculate_income_tax(_input(), config_2025)

    assert result.employee_contributions == pytest.approx(1_876.0)
    assert result.taxable_income == pytest.approx(12_124.0)
    assert result.income_tax == pytest.approx(590.28)
    assert result.net_income == pytest.approx(11_533.72)
    assert result.effective_tax_rate == pytest.approx(0.0422)
    assert result.monthly.gross == pytest.approx(1_000.0)
    assert result.monthly.tax == pytest.approx(590.28 / 12, abs=0.005)
    assert result.monthly.net == pytest.approx(11_533.72 / 14, abs=0.005)


def test_twelve_payments_spread_the_same_salary(config_2025: YearConfiguration) -> None:
    result = calculate_income_tax(_input(payments_per_year=12), config_2025)

    assert result.monthly.gross == pytest.approx(14_000 / 12, abs=0.005)
    assert result.monthly.tax == pytest.approx(result.income_tax / 12, abs=0.005)


def test_zero_income(config_2025: YearConfiguration) -> None:
    result = calculate_income_tax(_input(gross_income=0), config_2025)

    assert result.income_tax == 0
    assert result.net_income == 0
    assert result.effective_tax_rate == 0


def test_dependants_reduce_tax(config_2025: YearConfiguration) -> None:
    without = calculate_income_tax(_input(gross_income=30_000), config_2025)
    with_children = calculate_income_tax(
        _input(gross_income=30_000, dependants=3), config_2025
    )

    assert with_children.tax_credit > without.tax_credit
    assert with_children.income_tax < without.income_tax


def test_credit_cannot_create_negative_tax(config_2025: YearConfiguration) -> None:
    result = calculate_income_tax(_input(gross_income=6_000, dependants=4), config_2025)

    assert result.tax_credit == result.base_tax
    assert result.income_tax == 0


def test_residence_transfer_halves_income_tax(config_2025: YearConfiguration) -> None:
    result = calculate_income_tax(_input(residence_transfer=True), config_2025)

    assert result.income_tax == pytest.approx(295.14)
    assert result.residence_transfer_applied is True


def test_youth_relief_only_applies_when_configured(config_2025: YearConfiguration) -> None:
    result_2025 = calculate_income_tax(_input(age=24), config_2025)
    result_2026 = calculate_income_tax(
        _input(year=2026, age=24), load_year_configuration(2026)
    )

    assert result_2025.youth_band is None
    assert result_2025.income_tax == pytest.approx(590.28)
    assert result_2026.youth_band == "under_25"
    assert result_2026.income_tax == 0


def test_age_25_falls_between_youth_bands() -> None:
    result = calculate_income_tax(
        _input(year=2026, age=25), load_year_configuration(2026)
    )

    assert result.youth_band is None
    assert result.income_tax == pytest.approx(590.28)


def test_pensioner_has_no_contributions(config_2025: YearConfiguration) -> None:
    result = calculate_income_tax(
        _input(gross_income=12_000, payments_per_year=12, category="pensioner"),
        config_2025,
    )

    assert result.employee_contributions == 0
    assert result.employer_contributions == 0
    assert result.income_tax == pytest.approx(563.0)


def test_rental_has_no_credit(config_2025: YearConfiguration) -> None:
    result = calculate_income_tax(
        _input(gross_income=20_000, payments_per_year=12, category="rental", dependants=2),
        config_2025,
    )

    assert result.tax_credit == 0
    assert result.income_tax == pytest.approx(4_600.0)


def test_unknown_category_raises(config_2025: YearConfiguration) -> None:
    with pytest.raises(ValueError):
        calculate_income_tax(_input(category="farming"), config_2025)
