"""Pydantic models describing the tax year configuration schema."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self

YOUTH_BANDS = ("under_25", "age26_30")
BONUS_TYPES = ("christmas", "easter", "summer")


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _coerce_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if value in {0, "0", "false", "False", None}:
        return False
    if value in {1, "1", "true", "True"}:
        return True
    raise ConfigurationError("Boolean flags must be explicit true/false values")


class TaxBracket(ImmutableModel):
    """Represents a single progressive tax bracket.

    Only the upper bound is stored; the lower bound is the previous bracket's
    upper bound, which keeps a bracket sequence contiguous by construction.
    """

    upper_bound: float | None = Field(default=None, alias="upper")
    rate: float
    youth_rates: Mapping[str, float] = Field(default_factory=dict, alias="youth")

    @field_validator("youth_rates", mode="before")
    @classmethod
    def _coerce_youth_rates(cls, value: Any) -> Mapping[str, float]:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return {str(key): float(rate) for key, rate in value.items()}
        raise ConfigurationError("Youth rates must be provided as a mapping")

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        if self.rate < 0:
            raise ConfigurationError("Tax rates must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= 0:
            raise ConfigurationError("Upper bounds must be positive values")
        for band, rate in self.youth_rates.items():
            if band not in YOUTH_BANDS:
                raise ConfigurationError(f"Unknown youth band '{band}'")
            if rate < 0:
                raise ConfigurationError("Youth rates must be non-negative")
        return self

    def rate_for_band(self, band: str | None) -> float:
        if band is not None and band in self.youth_rates:
            return self.youth_rates[band]
        return self.rate


def validate_bracket_sequence(brackets: Sequence[TaxBracket]) -> None:
    """Ensure brackets ascend, end open-ended and never lower the base rate."""

    if not brackets:
        raise ConfigurationError("At least one tax bracket must be defined")
    last_upper: float | None = None
    last_rate: float | None = None
    for position, bracket in enumerate(brackets):
        upper = bracket.upper_bound
        if upper is None and position != len(brackets) - 1:
            raise ConfigurationError("Only the final tax bracket may be open-ended")
        if last_upper is not None and upper is not None and upper <= last_upper:
            raise ConfigurationError("Tax brackets must be in ascending order")
        if last_rate is not None and bracket.rate < last_rate:
            raise ConfigurationError("Tax bracket rates must be non-decreasing")
        last_upper = upper if upper is not None else last_upper
        last_rate = bracket.rate
    if brackets[-1].upper_bound is not None:
        raise ConfigurationError("Final tax bracket must have an open upper bound")


class TaxCreditConfig(ImmutableModel):
    """Dependant-based tax credit with an income-linked reduction."""

    amounts_by_dependants: Mapping[int, float]
    incremental_amount_per_dependant: float = 0.0
    reduction_threshold: float = 12_000.0
    reduction_step: float = 1_000.0
    reduction_per_step: float = 20.0

    @field_validator("amounts_by_dependants", mode="before")
    @classmethod
    def _coerce_amounts(cls, value: Any) -> Mapping[int, float]:
        if isinstance(value, Mapping):
            return {int(key): float(val) for key, val in value.items()}
        raise ConfigurationError("'amounts_by_dependants' must be a mapping")

    @model_validator(mode="after")
    def _validate_values(self) -> TaxCreditConfig:
        if not self.amounts_by_dependants:
            raise ConfigurationError("Tax credit tables require at least one amount")
        for count, amount in self.amounts_by_dependants.items():
            if count < 0:
                raise ConfigurationError("Dependant counts must be non-negative")
            if amount < 0:
                raise ConfigurationError("Tax credit amounts must be non-negative")
        if self.incremental_amount_per_dependant < 0:
            raise ConfigurationError("Incremental amounts must be non-negative")
        if self.reduction_threshold < 0 or self.reduction_per_step < 0:
            raise ConfigurationError("Credit reduction values must be non-negative")
        if self.reduction_step <= 0:
            raise ConfigurationError("'reduction_step' must be a positive amount")
        return self

    def amount_for_dependants(self, dependants: int) -> float:
        if dependants < 0:
            dependants = 0
        if dependants in self.amounts_by_dependants:
            return self.amounts_by_dependants[dependants]
        max_key = max(self.amounts_by_dependants)
        if dependants < max_key:
            smaller = [key for key in self.amounts_by_dependants if key <= dependants]
            key = max(smaller) if smaller else min(self.amounts_by_dependants)
            return self.amounts_by_dependants[key]
        extra = dependants - max_key
        return (
            self.amounts_by_dependants[max_key]
            + extra * self.incremental_amount_per_dependant
        )


class PayrollConfig(ImmutableModel):
    """Supported payroll frequencies for an income category."""

    allowed_payments_per_year: Sequence[int]
    default_payments_per_year: int | None = None

    @field_validator("allowed_payments_per_year", mode="before")
    @classmethod
    def _coerce_allowed(cls, value: Any) -> Sequence[int]:
        if isinstance(value, Iterable):
            return tuple(int(entry) for entry in value)
        raise ConfigurationError(
            "Payroll configuration must define 'allowed_payments_per_year' as an iterable"
        )

    @model_validator(mode="after")
    def _validate_payroll(self) -> PayrollConfig:
        allowed = list(dict.fromkeys(self.allowed_payments_per_year))
        if not allowed:
            raise ConfigurationError("At least one payroll frequency must be provided")
        if any(entry <= 0 for entry in allowed):
            raise ConfigurationError("Allowed payroll frequencies must be positive integers")
        allowed.sort()
        default = self.default_payments_per_year or allowed[-1]
        if default not in allowed:
            raise ConfigurationError(
                "Default payroll frequency must be listed in the allowed set"
            )
        object.__setattr__(self, "allowed_payments_per_year", tuple(allowed))
        object.__setattr__(self, "default_payments_per_year", default)
        return self


class ContributionRates(ImmutableModel):
    """Employee and employer contribution rates for an income category."""

    employee_rate: float = 0.0
    employer_rate: float = 0.0
    monthly_salary_cap: float | None = None

    @model_validator(mode="after")
    def _validate_rates(self) -> ContributionRates:
        if self.employee_rate < 0 or self.employer_rate < 0:
            raise ConfigurationError("Contribution rates must be non-negative")
        if self.monthly_salary_cap is not None and self.monthly_salary_cap < 0:
            raise ConfigurationError("Contribution salary caps must be non-negative")
        return self


class SelfEmployedContributionConfig(ImmutableModel):
    """Social insurance for self-employed income with a floor and a cap."""

    rate: float
    minimum_monthly_amount: float = 0.0
    monthly_income_cap: float | None = None

    @model_validator(mode="after")
    def _validate_values(self) -> SelfEmployedContributionConfig:
        if self.rate < 0:
            raise ConfigurationError("Self-employed contribution rate must be non-negative")
        if self.minimum_monthly_amount < 0:
            raise ConfigurationError("'minimum_monthly_amount' must be non-negative")
        if self.monthly_income_cap is not None and self.monthly_income_cap < 0:
            raise ConfigurationError("'monthly_income_cap' must be non-negative")
        return self


class EmploymentConfig(ImmutableModel):
    """Configuration for salaried income."""

    brackets: Sequence[TaxBracket] = Field(alias="tax_brackets")
    tax_credit: TaxCreditConfig
    payroll: PayrollConfig
    contributions: ContributionRates


class PensionConfig(ImmutableModel):
    """Configuration for pension income."""

    brackets: Sequence[TaxBracket] = Field(alias="tax_brackets")
    tax_credit: TaxCreditConfig
    payroll: PayrollConfig
    contributions: ContributionRates = Field(default_factory=ContributionRates)


class RentalConfig(ImmutableModel):
    """Configuration for rental income (no credit, no contributions)."""

    brackets: Sequence[TaxBracket] = Field(alias="tax_brackets")


class TradeFeeConfig(ImmutableModel):
    """Settings for the business activity fee (τέλος επιτηδεύματος)."""

    standard_amount: float
    major_city_amount: float | None = None
    major_cities: Sequence[str] = Field(default_factory=tuple)

    @field_validator("major_cities", mode="before")
    @classmethod
    def _coerce_cities(cls, value: Any) -> Sequence[str]:
        if value is None:
            return ()
        if isinstance(value, Iterable) and not isinstance(value, str):
            return tuple(str(entry).strip().lower() for entry in value)
        raise ConfigurationError("'major_cities' must be a list of city identifiers")

    @model_validator(mode="after")
    def _validate_amounts(self) -> TradeFeeConfig:
        if self.standard_amount < 0:
            raise ConfigurationError("'standard_amount' must be a non-negative number")
        if self.major_city_amount is not None and self.major_city_amount < 0:
            raise ConfigurationError("'major_city_amount' must be non-negative when provided")
        return self

    def amount_for_city(self, city: str | None) -> float:
        if city and self.major_city_amount is not None:
            if city.strip().lower() in self.major_cities:
                return self.major_city_amount
        return self.standard_amount


class FreelanceConfig(ImmutableModel):
    """Configuration for freelance/business income."""

    brackets: Sequence[TaxBracket] = Field(alias="tax_brackets")
    contributions: SelfEmployedContributionConfig
    expense_rates: Mapping[str, float] = Field(default_factory=dict)
    default_expense_rate: float = 0.20
    trade_fee: TradeFeeConfig
    tax_credit_applies: bool = True

    @field_validator("expense_rates", mode="before")
    @classmethod
    def _coerce_rates(cls, value: Any) -> Mapping[str, float]:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return {str(key): float(rate) for key, rate in value.items()}
        raise ConfigurationError("'expense_rates' must map professions to rates")

    @field_validator("tax_credit_applies", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return _coerce_boolean(value)

    @model_validator(mode="after")
    def _validate_rates(self) -> FreelanceConfig:
        for profession, rate in self.expense_rates.items():
            if not 0 <= rate <= 1:
                raise ConfigurationError(
                    f"Expense rate for '{profession}' must be between 0 and 1"
                )
        if not 0 <= self.default_expense_rate <= 1:
            raise ConfigurationError("'default_expense_rate' must be between 0 and 1")
        return self


class BonusPeriodConfig(ImmutableModel):
    """Qualifying period of a holiday bonus, expressed as month/day pairs."""

    start_month: int = Field(ge=1, le=12)
    start_day: int = Field(ge=1, le=31)
    end_month: int = Field(ge=1, le=12)
    end_day: int = Field(ge=1, le=31)
    salary_fraction: float

    @model_validator(mode="after")
    def _validate_period(self) -> BonusPeriodConfig:
        if (self.start_month, self.start_day) > (self.end_month, self.end_day):
            raise ConfigurationError("Bonus periods must not wrap across years")
        if self.salary_fraction <= 0:
            raise ConfigurationError("Bonus salary fractions must be positive")
        return self


class BonusConfig(ImmutableModel):
    """Holiday bonus entitlement periods and withholding."""

    withholding_rate: float
    periods: Mapping[str, BonusPeriodConfig]

    @model_validator(mode="after")
    def _validate_bonus(self) -> BonusConfig:
        if not 0 <= self.withholding_rate <= 1:
            raise ConfigurationError("Bonus withholding rate must be between 0 and 1")
        missing = [name for name in BONUS_TYPES if name not in self.periods]
        if missing:
            raise ConfigurationError(f"Bonus periods missing for: {', '.join(missing)}")
        return self


class GiftCategoryConfig(ImmutableModel):
    """Tax-free threshold and flat rate for a gift relationship category."""

    tax_free_threshold: float
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> GiftCategoryConfig:
        if self.tax_free_threshold < 0:
            raise ConfigurationError("Gift tax-free thresholds must be non-negative")
        if not 0 <= self.rate <= 1:
            raise ConfigurationError("Gift tax rates must be between 0 and 1")
        return self


class GiftConfig(ImmutableModel):
    """Gift tax categories keyed by relationship (A/B/C)."""

    categories: Mapping[str, GiftCategoryConfig]

    @field_validator("categories", mode="before")
    @classmethod
    def _normalise_keys(cls, value: Any) -> Mapping[str, Any]:
        if isinstance(value, Mapping) and value:
            return {str(key).strip().upper(): entry for key, entry in value.items()}
        raise ConfigurationError("Gift configuration requires at least one category")


class ReliefConfig(ImmutableModel):
    """Multipliers applied by tax reliefs."""

    residence_transfer_factor: float = 0.5

    @model_validator(mode="after")
    def _validate_factor(self) -> ReliefConfig:
        if not 0 <= self.residence_transfer_factor <= 1:
            raise ConfigurationError("'residence_transfer_factor' must be between 0 and 1")
        return self


class SolverConfig(ImmutableModel):
    """Defaults for the net-to-gross bisection solver."""

    tolerance: float = 0.01
    max_iterations: int = 100
    upper_bound_multiplier: float = 3.0

    @model_validator(mode="after")
    def _validate_solver(self) -> SolverConfig:
        if self.tolerance <= 0:
            raise ConfigurationError("Solver tolerance must be positive")
        if self.max_iterations <= 0:
            raise ConfigurationError("Solver iteration cap must be positive")
        if self.upper_bound_multiplier <= 1:
            raise ConfigurationError("Solver upper bound multiplier must exceed 1")
        return self


class YearWarning(ImmutableModel):
    """Structured warning surfaced for a configured tax year."""

    id: str
    message: str
    severity: str = "info"
    applies_to: Sequence[str] = Field(default_factory=tuple)
    documentation_url: str | None = None

    @field_validator("applies_to", mode="before")
    @classmethod
    def _coerce_applies_to(cls, value: Any) -> Sequence[str]:
        if value is None:
            return ()
        if isinstance(value, Iterable):
            return tuple(str(entry) for entry in value)
        raise ConfigurationError("Warning 'applies_to' must be an iterable when provided")

    @model_validator(mode="after")
    def _validate_severity(self) -> Self:
        if self.severity not in {"info", "warning", "error"}:
            raise ConfigurationError("Warning 'severity' must be one of: info, warning, error")
        return self


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year configuration."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    employment: EmploymentConfig
    pension: PensionConfig
    freelance: FreelanceConfig
    rental: RentalConfig
    bonus: BonusConfig
    gift: GiftConfig
    relief: ReliefConfig = Field(default_factory=ReliefConfig)
    solver: SolverConfig = Field(default_factory=SolverConfig)
    warnings: Sequence[YearWarning] = Field(default_factory=tuple)

    @model_validator(mode="before")
    @classmethod
    def _flatten_income(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        income = prepared.pop("income", None)
        if not isinstance(income, Mapping):
            raise ConfigurationError("Configuration must include an 'income' section")

        sections: dict[str, dict[str, Any]] = {}
        for section in ("employment", "pension", "freelance", "rental"):
            payload = income.get(section)
            if not isinstance(payload, Mapping):
                raise ConfigurationError(
                    f"Income configuration requires a '{section}' section"
                )
            sections[section] = dict(payload)

        employment = sections["employment"]
        # Pensions and freelancers share the employment scale unless overridden.
        for section in ("pension", "freelance"):
            if "tax_brackets" not in sections[section] and "tax_brackets" in employment:
                sections[section]["tax_brackets"] = employment["tax_brackets"]
        if "tax_credit" not in sections["pension"] and "tax_credit" in employment:
            sections["pension"]["tax_credit"] = employment["tax_credit"]

        prepared.update(sections)

        if prepared.get("warnings") is None:
            prepared["warnings"] = []

        return prepared

    @model_validator(mode="after")
    def _validate_year(self) -> YearConfiguration:
        for brackets in (
            self.employment.brackets,
            self.pension.brackets,
            self.freelance.brackets,
            self.rental.brackets,
        ):
            validate_bracket_sequence(brackets)
        return self

    @property
    def youth_bands(self) -> tuple[str, ...]:
        bands: set[str] = set()
        for bracket in self.employment.brackets:
            bands.update(bracket.youth_rates)
        return tuple(sorted(bands))


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "BONUS_TYPES",
    "BonusConfig",
    "BonusPeriodConfig",
    "ConfigurationError",
    "ContributionRates",
    "EmploymentConfig",
    "FreelanceConfig",
    "GiftCategoryConfig",
    "GiftConfig",
    "ImmutableModel",
    "PayrollConfig",
    "PensionConfig",
    "ReliefConfig",
    "RentalConfig",
    "SelfEmployedContributionConfig",
    "SolverConfig",
    "TaxBracket",
    "TaxCreditConfig",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "TradeFeeConfig",
    "ValidationError",
    "YOUTH_BANDS",
    "YearConfiguration",
    "YearWarning",
    "validate_bracket_sequence",
]
