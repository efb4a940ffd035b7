"""Freelancer (self-employed) tax calculation."""

from __future__ import annotations

from hellastax.backend.app.models import FreelanceResult, derive_youth_band
from hellastax.backend.config.year_config import FreelanceConfig, YearConfiguration

from .contributions import compute_self_employed_contributions
from .credits import compute_tax_credit
from .income import youth_rate_resolver
from .utils import calculate_progressive_tax, non_negative, round_currency, round_rate

_MONTHS = 12


def resolve_expenses(
    revenue: float,
    config: FreelanceConfig,
    *,
    profession: str | None = None,
    custom_expense_rate: float | None = None,
    business_expenses: float | None = None,
) -> tuple[float, float | None]:
    """Return deductible expenses and the rate used to derive them.

    An explicit expense amount wins over a profession rate, which wins over a
    custom rate; the configured default rate applies otherwise.
    """

    if business_expenses is not None:
        return min(non_negative(business_expenses), revenue), None

    if profession and profession in config.expense_rates:
        rate = config.expense_rates[profession]
    elif custom_expense_rate is not None:
        rate = custom_expense_rate
    else:
        rate = config.default_expense_rate
    return revenue * rate, rate


def calculate_freelance(
    revenue: float,
    config: YearConfiguration,
    *,
    profession: str | None = None,
    custom_expense_rate: float | None = None,
    business_expenses: float | None = None,
    dependants: int = 0,
    age: int | None = None,
    city: str | None = None,
) -> FreelanceResult:
    """Compute insurance, income tax and the trade fee for freelance revenue."""

    freelance = config.freelance
    revenue = non_negative(revenue)
    if revenue == 0:
        return FreelanceResult(
            revenue=0.0,
            deductible_expenses=0.0,
            expense_rate=None,
            net_professional_income=0.0,
            social_insurance=0.0,
            taxable_income=0.0,
            base_tax=0.0,
            tax_credit=0.0,
            income_tax=0.0,
            business_tax=0.0,
            total_tax_and_insurance=0.0,
            net_income=0.0,
            effective_tax_rate=0.0,
            monthly={"gross": 0.0, "insurance": 0.0, "tax": 0.0, "net": 0.0},
        )

    expenses, expense_rate = resolve_expenses(
        revenue,
        freelance,
        profession=profession,
        custom_expense_rate=custom_expense_rate,
        business_expenses=business_expenses,
    )
    net_professional_income = non_negative(revenue - expenses)

    insurance = compute_self_employed_contributions(
        net_professional_income, freelance.contributions
    )
    taxable_income = non_negative(net_professional_income - insurance)

    band = derive_youth_band(age) if config.youth_bands else None
    base_tax = calculate_progressive_tax(
        taxable_income, freelance.brackets, youth_rate_resolver(band)
    )
    tax_credit = 0.0
    if freelance.tax_credit_applies:
        tax_credit = compute_tax_credit(
            dependants, taxable_income, config.employment.tax_credit, base_tax=base_tax
        )
    income_tax = non_negative(base_tax - tax_credit)
    business_tax = freelance.trade_fee.amount_for_city(city)

    total = insurance + income_tax + business_tax
    net_income = non_negative(net_professional_income - total)

    return FreelanceResult(
        revenue=round_currency(revenue),
        deductible_expenses=round_currency(expenses),
        expense_rate=expense_rate,
        net_professional_income=round_currency(net_professional_income),
        social_insurance=round_currency(insurance),
        taxable_income=round_currency(taxable_income),
        base_tax=round_currency(base_tax),
        tax_credit=round_currency(tax_credit),
        income_tax=round_currency(income_tax),
        business_tax=round_currency(business_tax),
        total_tax_and_insurance=round_currency(total),
        net_income=round_currency(net_income),
        effective_tax_rate=round_rate(total / revenue),
        monthly={
            "gross": round_currency(revenue / _MONTHS),
            "insurance": round_currency(insurance / _MONTHS),
            "tax": round_currency((income_tax + business_tax) / _MONTHS),
            "net": round_currency(net_income / _MONTHS),
        },
    )


__all__ = ["calculate_freelance", "resolve_expenses"]
