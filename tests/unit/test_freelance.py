"""Unit tests for the freelance calculator."""

from __future__ import annotations

import pytest

from hellastax.backend.app.services.calculators.freelance import (
    calculate_freelance,
    resolve_expenses,
)
from hellastax.backend.config.year_config import YearConfiguration, load_year_configuration


@pytest.fixture()
def config() -> YearConfiguration:
    return load_year_configuration(2025)


def test_engineer_reference_case(config: YearConfiguration) -> None:
    result = calculate_freelance(30_000, config, profession="engineers_architects")

    assert result.expense_rate == pytest.approx(0.40)
    assert result.deductible_expenses == pytest.approx(12_000.0)
    assert result.social_insurance == pytest.approx(4_878.0)
    assert result.taxable_income == pytest.approx(13_122.0)
    assert result.income_tax == pytest.approx(829.84)
    assert result.business_tax == pytest.approx(650.0)
    assert result.net_income == pytest.approx(11_642.16)
    assert result.effective_tax_rate == pytest.approx(0.2119)
    assert result.monthly["gross"] == pytest.approx(2_500.0)


def test_minimum_insurance_applies_to_low_revenue(config: YearConfiguration) -> None:
    result = calculate_freelance(5_000, config)

    assert result.expense_rate == pytest.approx(0.20)
    assert result.social_insurance == pytest.approx(2_763.48)
    assert result.income_tax == 0
    assert result.net_income == pytest.approx(586.52)


def test_major_city_trade_fee(config: YearConfiguration) -> None:
    athens = calculate_freelance(30_000, config, city="Athens")
    patras = calculate_freelance(30_000, config, city="patras")

    assert athens.business_tax == 1_000.0
    assert patras.business_tax == 650.0
    assert athens.net_income == pytest.approx(patras.net_income - 350.0)


def test_zero_revenue_is_all_zero(config: YearConfiguration) -> None:
    result = calculate_freelance(0, config, profession="lawyers")

    assert result.total_tax_and_insurance == 0
    assert result.net_income == 0


def test_net_income_never_negative(config: YearConfiguration) -> None:
    result = calculate_freelance(1_000, config)

    assert result.net_income == 0


@pytest.mark.parametrize(
    ("kwargs", "expected_expenses", "expected_rate"),
    [
        ({"business_expenses": 5_000, "profession": "lawyers"}, 5_000.0, None),
        ({"business_expenses": 50_000}, 20_000.0, None),
        ({"profession": "traders", "custom_expense_rate": 0.5}, 2_000.0, 0.10),
        ({"profession": "astronauts", "custom_expense_rate": 0.25}, 5_000.0, 0.25),
        ({"profession": "astronauts"}, 4_000.0, 0.20),
    ],
)
def test_expense_precedence(
    config: YearConfiguration,
    kwargs: dict[str, object],
    expected_expenses: float,
    expected_rate: float | None,
) -> None:
    expenses, rate = resolve_expenses(20_000, config.freelance, **kwargs)

    assert expenses == pytest.approx(expected_expenses)
    assert rate == (pytest.approx(expected_rate) if expected_rate is not None else None)
