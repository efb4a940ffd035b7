"""Pydantic models describing the public API surface."""

from __future__ import annotations

import math
from datetime import date
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

__all__ = [
    "AnnualBonusRequest",
    "AnnualBonusResponse",
    "BonusResponse",
    "BonusTotals",
    "CalculationResponse",
    "DependantCount",
    "FreelanceRequest",
    "FreelanceResponse",
    "GiftTaxRequest",
    "GiftTaxResponse",
    "GrossFromNetRequest",
    "GrossFromNetResponse",
    "HolidayBonusRequest",
    "IncomeTaxRequest",
    "MonthlyBreakdownResponse",
    "ResponseMeta",
    "WithholdingTaxRequest",
    "WithholdingTaxResponse",
    "format_validation_error",
    "parse_amount",
    "parse_dependants",
]


def parse_amount(value: Any) -> Any:
    """Coerce user supplied amounts to floats, defaulting garbage to zero.

    Form fields arrive as strings; anything that does not parse as a finite
    number is treated as ``0.0``. Negative numbers are passed through so the
    field constraints can reject them.
    """

    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace("€", "").replace(" ", "")
        if "," in text and "." not in text:
            text = text.replace(",", ".")
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def _parse_optional_amount(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_amount(value)


def parse_dependants(value: Any) -> Any:
    """Map the ``"0" .. "4+"`` selector (or a plain integer) to a count."""

    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        text = value.strip().rstrip("+")
        try:
            return int(text)
        except ValueError:
            return 0
    return 0


def _parse_optional_int(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value


def _parse_iso_date(value: Any) -> Any:
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


Amount = Annotated[float, BeforeValidator(parse_amount), Field(ge=0)]
OptionalAmount = Annotated[float | None, BeforeValidator(_parse_optional_amount)]
DependantCount = Annotated[int, BeforeValidator(parse_dependants), Field(ge=0, le=15)]
PaymentsPerYear = Annotated[int | None, BeforeValidator(_parse_optional_int)]
IsoDate = Annotated[date, BeforeValidator(_parse_iso_date)]

_DEPENDANTS_ALIASES = AliasChoices("dependants", "children")
_RESIDENCE_ALIASES = AliasChoices("tax_residence_transfer", "residence_transfer")


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    year: int | None = Field(default=None, ge=1900, le=2100)


class IncomeTaxRequest(_Request):
    """Annual income tax calculation for a single income category."""

    yearly_income: Amount = 0.0
    monthly_income: Amount = 0.0
    payments_per_year: PaymentsPerYear = Field(default=None, gt=0)
    dependants: DependantCount = Field(default=0, validation_alias=_DEPENDANTS_ALIASES)
    age: int | None = Field(default=None, ge=0, le=120)
    tax_residence_transfer: bool = Field(default=False, validation_alias=_RESIDENCE_ALIASES)
    category: Literal["employed", "self_employed", "pensioner", "rental"] = "employed"


class WithholdingTaxRequest(_Request):
    """Monthly payroll withholding derived from a monthly gross salary."""

    monthly_salary: Amount = 0.0
    payments_per_year: PaymentsPerYear = Field(default=None, gt=0)
    dependants: DependantCount = Field(default=0, validation_alias=_DEPENDANTS_ALIASES)
    age: int | None = Field(default=None, ge=0, le=120)
    tax_residence_transfer: bool = Field(default=False, validation_alias=_RESIDENCE_ALIASES)
    category: Literal["employed", "pensioner"] = "employed"


class HolidayBonusRequest(_Request):
    """A single pro-rated holiday bonus."""

    monthly_salary: Amount = 0.0
    start_date: IsoDate
    bonus_type: Literal["christmas", "easter", "summer"]
    payment_year: int | None = Field(default=None, ge=1900, le=2100)
    tax_residence_transfer: bool = Field(default=False, validation_alias=_RESIDENCE_ALIASES)

    @field_validator("bonus_type", mode="before")
    @classmethod
    def _normalise_bonus_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            normalised = value.strip().lower()
            return "summer" if normalised in {"vacation", "holiday"} else normalised
        return value


class AnnualBonusRequest(_Request):
    """All three holiday bonuses for an employment spell within one year."""

    monthly_salary: Amount = 0.0
    start_date: IsoDate
    end_date: IsoDate | None = None
    payment_year: int | None = Field(default=None, ge=1900, le=2100)
    tax_residence_transfer: bool = Field(default=False, validation_alias=_RESIDENCE_ALIASES)

    @model_validator(mode="after")
    def _validate_dates(self) -> "AnnualBonusRequest":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date cannot precede start_date")
        return self


class GrossFromNetRequest(_Request):
    """Reverse calculation from a desired monthly net salary."""

    desired_monthly_net: Amount = 0.0
    payments_per_year: PaymentsPerYear = Field(default=None, gt=0)
    dependants: DependantCount = Field(default=0, validation_alias=_DEPENDANTS_ALIASES)
    age: int | None = Field(default=None, ge=0, le=120)
    tax_residence_transfer: bool = Field(default=False, validation_alias=_RESIDENCE_ALIASES)
    tolerance: float | None = Field(default=None, gt=0)
    max_iterations: int | None = Field(default=None, gt=0, le=1000)


class FreelanceRequest(_Request):
    """Self-employed revenue with profession-based expense deductions."""

    annual_revenue: Amount = 0.0
    profession: str | None = None
    custom_expense_rate: float | None = Field(default=None, ge=0, le=1)
    business_expenses: OptionalAmount = Field(default=None, ge=0)
    dependants: DependantCount = Field(default=0, validation_alias=_DEPENDANTS_ALIASES)
    age: int | None = Field(default=None, ge=0, le=120)
    city: str = "other"

    @field_validator("profession", mode="before")
    @classmethod
    def _normalise_profession(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    @field_validator("city", mode="before")
    @classmethod
    def _normalise_city(cls, value: Any) -> Any:
        if value is None:
            return "other"
        if isinstance(value, str):
            return value.strip().lower() or "other"
        return value


class GiftTaxRequest(_Request):
    """Gift (donation) tax for a donor relationship category."""

    gift_value: Amount = 0.0
    previous_gifts: Amount = 0.0
    relationship: str = "A"
    gift_type: Literal["money", "property", "other"] = "money"

    @field_validator("relationship", mode="before")
    @classmethod
    def _normalise_relationship(cls, value: Any) -> Any:
        if value is None:
            return "A"
        if isinstance(value, str):
            text = value.strip().lower()
            if text.startswith("category"):
                text = text[len("category"):].lstrip("-_ ")
            return text.upper() or "A"
        return value


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    year: int
    youth_relief_category: str | None = None
    residence_transfer_applied: bool | None = None
    warnings: list[str] | None = None


class MonthlyBreakdownResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    gross: float
    net: float
    employee_contributions: float
    employer_contributions: float
    tax: float


class CalculationResponse(BaseModel):
    """Annual income tax result."""

    model_config = ConfigDict(extra="forbid")

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
    monthly: MonthlyBreakdownResponse
    meta: ResponseMeta


class WithholdingTaxResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    payments_per_year: int
    monthly_salary: float
    monthly_net: float
    monthly_tax: float
    monthly_insurance: float
    monthly_employer_contributions: float
    annual_gross: float
    annual_taxable_income: float
    annual_net: float
    annual_tax: float
    annual_insurance: float
    effective_tax_rate: float
    meta: ResponseMeta


class BonusResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    bonus_type: str
    period_start: date
    period_end: date
    days_in_period: int
    days_worked: int
    full_amount: float
    gross_amount: float
    withholding_rate: float
    tax: float
    net_amount: float
    meta: ResponseMeta | None = None


class BonusTotals(BaseModel):
    model_config = ConfigDict(extra="forbid")

    gross: float
    tax: float
    net: float


class AnnualBonusResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    payment_year: int
    bonuses: dict[str, BonusResponse]
    totals: BonusTotals
    meta: ResponseMeta


class GrossFromNetResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    desired_monthly_net: float
    desired_annual_net: float
    gross_income: float
    monthly_gross: float
    iterations: int
    converged: bool
    calculation: CalculationResponse


class FreelanceResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    revenue: float
    deductible_expenses: float
    expense_rate: float | None = None
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
    monthly: dict[str, float]
    meta: ResponseMeta


class GiftTaxResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: str
    gift_type: str
    gift_value: float
    previous_gifts: float
    total_gift_value: float
    tax_free_amount: float
    tax_rate: str
    rate: float
    taxable_gift: float
    total_tax: float
    previous_tax: float
    gift_tax_amount: float
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
