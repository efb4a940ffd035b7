"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Iterable, Sequence

from .year_config import (
    BONUS_TYPES,
    BonusConfig,
    ContributionRates,
    FreelanceConfig,
    GiftConfig,
    PayrollConfig,
    TaxBracket,
    YearConfiguration,
    YearWarning,
    available_years,
    load_year_configuration,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_payroll(scope: str, payroll: PayrollConfig) -> list[str]:
    errors: list[str] = []
    allowed = list(payroll.allowed_payments_per_year)

    if not allowed:
        errors.append(_format_scope(scope, "no allowed payroll frequencies defined"))
        return errors

    if any(value <= 0 for value in allowed):
        errors.append(
            _format_scope(scope, "allowed payroll frequencies must be positive integers")
        )

    default_frequency = payroll.default_payments_per_year
    if default_frequency not in allowed:
        errors.append(
            _format_scope(
                scope,
                f"default payroll frequency {default_frequency} is not present in the allowed set",
            )
        )

    return errors


def _validate_contributions(scope: str, contributions: ContributionRates) -> list[str]:
    errors: list[str] = []

    for label, value in {
        "employee": contributions.employee_rate,
        "employer": contributions.employer_rate,
    }.items():
        if value < 0 or value > 1:
            errors.append(
                _format_scope(
                    scope,
                    f"{label} contribution rate {value} must be between 0 and 1",
                )
            )

    return errors


def _validate_brackets(scope: str, brackets: Sequence[TaxBracket]) -> list[str]:
    errors: list[str] = []
    previous_rate: float | None = None

    for position, bracket in enumerate(brackets):
        if bracket.rate > 1:
            errors.append(
                _format_scope(scope, f"bracket {position} rate {bracket.rate} exceeds 100%")
            )
        if previous_rate is not None and bracket.rate < previous_rate:
            errors.append(
                _format_scope(scope, f"bracket {position} lowers the marginal rate")
            )
        for band, rate in bracket.youth_rates.items():
            if rate > bracket.rate:
                errors.append(
                    _format_scope(
                        scope,
                        f"bracket {position} youth rate for '{band}' exceeds the base rate",
                    )
                )
        previous_rate = bracket.rate

    return errors


def _validate_freelance(config: FreelanceConfig) -> list[str]:
    errors: list[str] = []
    contributions = config.contributions

    if contributions.rate > 1:
        errors.append(
            _format_scope("freelance.contributions", "rate must be between 0 and 1")
        )
    cap = contributions.monthly_income_cap
    if cap is not None and contributions.minimum_monthly_amount > cap * contributions.rate:
        errors.append(
            _format_scope(
                "freelance.contributions",
                "minimum monthly amount exceeds the capped contribution",
            )
        )

    trade_fee = config.trade_fee
    if trade_fee.major_city_amount is not None:
        if trade_fee.major_city_amount < trade_fee.standard_amount:
            errors.append(
                _format_scope(
                    "freelance.trade_fee",
                    "major city amount cannot be lower than the standard amount",
                )
            )
        if not trade_fee.major_cities:
            errors.append(
                _format_scope(
                    "freelance.trade_fee",
                    "major city amount requires at least one city",
                )
            )

    return errors


def _validate_bonus(config: BonusConfig) -> list[str]:
    errors: list[str] = []

    for name in BONUS_TYPES:
        period = config.periods.get(name)
        if period is None:
            errors.append(_format_scope("bonus.periods", f"missing period for '{name}'"))
            continue
        if period.salary_fraction > 1:
            errors.append(
                _format_scope(
                    f"bonus.periods.{name}",
                    "salary fraction above one month is not supported",
                )
            )

    unknown = sorted(set(config.periods) - set(BONUS_TYPES))
    if unknown:
        errors.append(
            _format_scope("bonus.periods", f"unknown bonus types declared: {unknown}")
        )

    return errors


def _validate_gift(config: GiftConfig) -> list[str]:
    errors: list[str] = []
    ordered = [config.categories[key] for key in sorted(config.categories)]

    for closer, further in zip(ordered, ordered[1:]):
        if further.rate < closer.rate:
            errors.append(
                _format_scope(
                    "gift.categories",
                    "more distant relationship categories should not have lower rates",
                )
            )
            break

    return errors


def _validate_warnings(warnings: Iterable[YearWarning]) -> list[str]:
    errors: list[str] = []
    seen_ids: set[str] = set()

    for warning in warnings:
        if warning.id in seen_ids:
            errors.append(
                _format_scope(
                    "warnings",
                    f"duplicate warning identifier '{warning.id}' detected",
                )
            )
        else:
            seen_ids.add(warning.id)

        for target in warning.applies_to:
            if not target.strip():
                errors.append(
                    _format_scope(
                        f"warnings.{warning.id}",
                        "applies_to entries must be non-empty strings",
                    )
                )

        if warning.documentation_url and not warning.documentation_url.startswith(
            ("http://", "https://")
        ):
            errors.append(
                _format_scope(
                    f"warnings.{warning.id}",
                    "documentation URL must be absolute",
                )
            )

    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues for the provided configuration."""

    errors: list[str] = []

    errors.extend(_validate_payroll("employment.payroll", config.employment.payroll))
    errors.extend(_validate_payroll("pension.payroll", config.pension.payroll))

    errors.extend(
        _validate_contributions("employment.contributions", config.employment.contributions)
    )
    errors.extend(
        _validate_contributions("pension.contributions", config.pension.contributions)
    )

    errors.extend(_validate_brackets("employment.brackets", config.employment.brackets))
    errors.extend(_validate_brackets("rental.brackets", config.rental.brackets))

    errors.extend(_validate_freelance(config.freelance))
    errors.extend(_validate_bonus(config.bonus))
    errors.extend(_validate_gift(config.gift))
    errors.extend(_validate_warnings(config.warnings))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except FileNotFoundError as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
