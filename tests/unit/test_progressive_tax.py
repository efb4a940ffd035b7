"""Unit tests for the progressive bracket helpers."""

from __future__ import annotations

import pytest

from hellastax.backend.app.services.calculators.utils import (
    calculate_progressive_tax,
    format_percentage,
    round_currency,
    round_rate,
)
from hellastax.backend.config.year_config import TaxBracket, load_year_configuration


@pytest.fixture()
def employment_brackets() -> tuple[TaxBracket, ...]:
    return tuple(load_year_configuration(2025).employment.brackets)


@pytest.mark.parametrize(
    ("income", "expected"),
    [
        (0, 0.0),
        (-500, 0.0),
        (5_000, 450.0),
        (10_000, 900.0),
        (12_124, 1_367.28),
        (20_000, 3_100.0),
        (40_000, 9_500.0),
        (50_000, 13_900.0),
    ],
)
def test_progressive_tax_on_2025_scale(
    employment_brackets: tuple[TaxBracket, ...], income: float, expected: float
) -> None:
    assert calculate_progressive_tax(income, employment_brackets) == pytest.approx(expected)


def test_progressive_tax_is_continuous_at_boundaries(
    employment_brackets: tuple[TaxBracket, ...],
) -> None:
    assert calculate_progressive_tax(10_000.01, employment_brackets) == pytest.approx(
        900.0022
    )
    for bracket in employment_brackets[:-1]:
        upper = bracket.upper_bound
        below = calculate_progressive_tax(upper - 0.01, employment_brackets)
        above = calculate_progressive_tax(upper + 0.01, employment_brackets)
        assert above - below < 0.01


def test_progressive_tax_is_non_decreasing(
    employment_brackets: tuple[TaxBracket, ...],
) -> None:
    previous = 0.0
    for income in range(0, 60_001, 250):
        tax = calculate_progressive_tax(income, employment_brackets)
        assert tax >= previous
        previous = tax


def test_rate_resolver_substitutes_bracket_rates() -> None:
    brackets = load_year_configuration(2026).employment.brackets

    under_25 = calculate_progressive_tax(
        25_000, brackets, lambda bracket: bracket.rate_for_band("under_25")
    )
    age26_30 = calculate_progressive_tax(
        25_000, brackets, lambda bracket: bracket.rate_for_band("age26_30")
    )

    assert under_25 == pytest.approx(5_000 * 0.28)
    assert age26_30 == pytest.approx(20_000 * 0.09 + 5_000 * 0.28)


def test_rental_scale() -> None:
    brackets = load_year_configuration(2025).rental.brackets

    assert calculate_progressive_tax(12_000, brackets) == pytest.approx(1_800.0)
    assert calculate_progressive_tax(40_000, brackets) == pytest.approx(
        1_800.0 + 23_000 * 0.35 + 5_000 * 0.45
    )


def test_round_currency_rounds_halves_up() -> None:
    assert round_currency(57.1875) == 57.19
    assert round_currency(0.125) == 0.13
    assert round_currency(382.8729) == 382.87


def test_round_rate_and_percentage_labels() -> None:
    assert round_rate(590.28 / 14_000) == 0.0422
    assert format_percentage(0.1) == "10%"
    assert format_percentage(0.075) == "7.50%"
