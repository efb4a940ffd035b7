"""Forward income tax calculation for salaried, pension, business and rental income."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from hellastax.backend.app.models import (
    CalculationInput,
    CalculationResult,
    MonthlyBreakdown,
)
from hellastax.backend.config.year_config import (
    TaxBracket,
    TaxCreditConfig,
    YearConfiguration,
)

from .contributions import compute_contributions, compute_self_employed_contributions
from .credits import compute_tax_credit
from .utils import calculate_progressive_tax, non_negative, round_currency, round_rate

_WITHHOLDING_MONTHS = 12


def youth_rate_resolver(band: str | None) -> Callable[[TaxBracket], float] | None:
    """Return a bracket rate resolver for ``band`` or ``None`` without relief."""

    if band is None:
        return None
    return lambda bracket: bracket.rate_for_band(band)


def _category_tables(
    category: str, config: YearConfiguration
) -> tuple[Sequence[TaxBracket], TaxCreditConfig | None]:
    if category == "employed":
        return config.employment.brackets, config.employment.tax_credit
    if category == "pensioner":
        return config.pension.brackets, config.pension.tax_credit
    if category == "self_employed":
        credit = config.employment.tax_credit if config.freelance.tax_credit_applies else None
        return config.freelance.brackets, credit
    if category == "rental":
        return config.rental.brackets, None
    raise ValueError(f"Unsupported income category '{category}'")


def _annual_contributions(
    payload: CalculationInput, config: YearConfiguration
) -> tuple[float, float]:
    payments = payload.payments_per_year
    if payload.category == "employed":
        breakdown = compute_contributions(
            payload.monthly_gross_income, config.employment.contributions
        )
        return breakdown.employee * payments, breakdown.employer * payments
    if payload.category == "pensioner":
        breakdown = compute_contributions(
            payload.monthly_gross_income, config.pension.contributions
        )
        return breakdown.employee * payments, breakdown.employer * payments
    if payload.category == "self_employed" and payload.gross_income > 0:
        insurance = compute_self_employed_contributions(
            payload.gross_income, config.freelance.contributions
        )
        return insurance, 0.0
    return 0.0, 0.0


def calculate_income_tax(
    payload: CalculationInput, config: YearConfiguration
) -> CalculationResult:
    """Run the forward calculation for ``payload`` against ``config``.

    Employee contributions are deducted before the bracket scale applies, the
    dependant credit is capped at the base tax, and the tax-residence transfer
    relief scales the final income tax. Monetary fields are rounded to cents.
    """

    brackets, credit_config = _category_tables(payload.category, config)
    gross = non_negative(payload.gross_income)

    employee_contributions, employer_contributions = _annual_contributions(payload, config)
    employee_contributions = min(employee_contributions, gross)
    taxable_income = non_negative(gross - employee_contributions)

    band = payload.youth_band if config.youth_bands else None
    base_tax = calculate_progressive_tax(
        taxable_income, brackets, youth_rate_resolver(band)
    )

    tax_credit = 0.0
    if credit_config is not None:
        tax_credit = compute_tax_credit(
            payload.dependants, taxable_income, credit_config, base_tax=base_tax
        )

    income_tax = non_negative(base_tax - tax_credit)
    if payload.residence_transfer:
        income_tax *= config.relief.residence_transfer_factor

    net_income = non_negative(gross - employee_contributions - income_tax)
    effective_rate = income_tax / gross if gross > 0 else 0.0

    payments = payload.payments_per_year
    monthly = MonthlyBreakdown(
        gross=round_currency(gross / payments),
        net=round_currency(net_income / payments),
        employee_contributions=round_currency(employee_contributions / payments),
        employer_contributions=round_currency(employer_contributions / payments),
        tax=round_currency(income_tax / _WITHHOLDING_MONTHS),
    )

    return CalculationResult(
        category=payload.category,
        payments_per_year=payments,
        gross_income=round_currency(gross),
        employee_contributions=round_currency(employee_contributions),
        employer_contributions=round_currency(employer_contributions),
        taxable_income=round_currency(taxable_income),
        base_tax=round_currency(base_tax),
        tax_credit=round_currency(tax_credit),
        income_tax=round_currency(income_tax),
        net_income=round_currency(net_income),
        effective_tax_rate=round_rate(effective_rate),
        monthly=monthly,
        youth_band=band if band in config.youth_bands else None,
        residence_transfer_applied=payload.residence_transfer,
    )


__all__ = ["calculate_income_tax", "youth_rate_resolver"]
