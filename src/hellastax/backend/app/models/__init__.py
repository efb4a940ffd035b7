"""Typed request/response models shared across the calculation services.

Request payloads are validated by the Pydantic models in :mod:`.api`. Once
validated they are normalised into the frozen ``CalculationInput`` consumed by
the calculators, and every calculator returns a frozen dataclass so results can
be passed around, compared in tests, and serialised without defensive copies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from .api import (
    AnnualBonusRequest,
    AnnualBonusResponse,
    BonusResponse,
    BonusTotals,
    CalculationResponse,
    DependantCount,
    FreelanceRequest,
    FreelanceResponse,
    GiftTaxRequest,
    GiftTaxResponse,
    GrossFromNetRequest,
    GrossFromNetResponse,
    HolidayBonusRequest,
    IncomeTaxRequest,
    MonthlyBreakdownResponse,
    ResponseMeta,
    WithholdingTaxRequest,
    WithholdingTaxResponse,
    format_validation_error,
    parse_amount,
    parse_dependants,
)

__all__ = [
    "AnnualBonusRequest",
    "AnnualBonusResponse",
    "AnnualBonusSummary",
    "BonusPeriod",
    "BonusResponse",
    "BonusResult",
    "BonusTotals",
    "CalculationInput",
    "CalculationResponse",
    "CalculationResult",
    "ContributionBreakdown",
    "DependantCount",
    "EMPLOYMENT_CATEGORIES",
    "FreelanceRequest",
    "FreelanceResponse",
    "FreelanceResult",
    "GiftTaxRequest",
    "GiftTaxResponse",
    "GiftTaxResult",
    "GrossFromNetRequest",
    "GrossFromNetResponse",
    "HolidayBonusRequest",
    "IncomeTaxRequest",
    "MonthlyBreakdown",
    "MonthlyBreakdownResponse",
    "ResponseMeta",
    "SolverResult",
    "WithholdingTaxRequest",
    "WithholdingTaxResponse",
    "derive_youth_band",
    "format_validation_error",
    "parse_amount",
    "parse_dependants",
]

EMPLOYMENT_CATEGORIES = ("employed", "self_employed", "pensioner", "rental")


def derive_youth_band(age: int | None) -> str | None:
    if age is None:
        return None
    if age < 25:
        return "under_25"
    if 26 <= age <= 30:
        return "age26_30"
    return None


class CalculationInput(BaseModel):
    """Validated and normalised user input for income tax calculations."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    year: int
    gross_income: float = Field(ge=0)
    payments_per_year: int = Field(gt=0)
    dependants: int = Field(default=0, ge=0)
    age: int | None = Field(default=None, ge=0)
    residence_transfer: bool = False
    category: str = "employed"

    @property
    def monthly_gross_income(self) -> float:
        return self.gross_income / self.payments_per_year

    @property
    def youth_band(self) -> str | None:
        return derive_youth_band(self.age)


@dataclass(frozen=True)
class ContributionBreakdown:
    """Contributions for a single payment period."""

    employee: float
    employer: float
    base: float


@dataclass(frozen=True)
class MonthlyBreakdown:
    """Per-payment view of an annual result.

    Gross, net and contributions follow the payment schedule while the tax is
    always spread over twelve calendar months for withholding.
    """

    gross: float
    net: float
    employee_contributions: float
    employer_contributions: float
    tax: float


@dataclass(frozen=True)
class CalculationResult:
    """Outcome of the forward income tax calculation."""

    category: str
    payments_per_year: int
    gross_income: float
    employee_contributions: float
    employer_contributions: float
    taxable_income: float
    base_tax: float
    tax_credit: float
    income_tax: float
    net_income: float
    effective_tax_rate: float
    monthly: MonthlyBreakdown
    youth_band: str | None = None
    residence_transfer_applied: bool = False


@dataclass(frozen=True)
class BonusPeriod:
    """Qualifying period of a holiday bonus in a given year."""

    bonus_type: str
    start: date
    end: date
    total_days: int
    salary_fraction: float


@dataclass(frozen=True)
class BonusResult:
    period: BonusPeriod
    days_worked: int
    full_amount: float
    gross_amount: float
    withholding_rate: float
    tax: float
    net_amount: float


@dataclass(frozen=True)
class AnnualBonusSummary:
    year: int
    bonuses: Mapping[str, BonusResult]
    gross_total: float
    tax_total: float
    net_total: float


@dataclass(frozen=True)
class SolverResult:
    """Best net-to-gross estimate together with convergence information."""

    result: CalculationResult
    target_net_income: float
    iterations: int
    converged: bool

    @property
    def gross_income(self) -> float:
        return self.result.gross_income


@dataclass(frozen=True)
class FreelanceResult:
    revenue: float
    deductible_expenses: float
    expense_rate: float | None
    net_professional_income: float
    social_insurance: float
    taxable_income: float
    base_tax: float
    tax_credit: float
    income_tax: float
    business_tax: float
    total_tax_and_insurance: float
    net_income: float
    effective_tax_rate: float
    monthly: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class GiftTaxResult:
    category: str
    gift_value: float
    previous_gifts: float
    total_gift_value: float
    tax_free_threshold: float
    rate: float
    taxable_amount: float
    total_tax: float
    previous_tax: float
    tax_due: float
