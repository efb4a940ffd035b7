"""Orchestrate request validation, normalisation, and tax calculations.

Every public function accepts a raw JSON mapping (or an already validated
request model), resolves the tax year configuration, hands normalised values to
the calculators and validates the outgoing payload against the response
models. Profiling hooks and defensive validation live here so the calculators
can stay pure arithmetic.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import asdict
from time import perf_counter
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from hellastax.backend.app.models import (
    AnnualBonusRequest,
    AnnualBonusResponse,
    BonusResponse,
    BonusResult,
    CalculationInput,
    CalculationResponse,
    CalculationResult,
    FreelanceRequest,
    FreelanceResponse,
    GiftTaxRequest,
    GiftTaxResponse,
    GrossFromNetRequest,
    GrossFromNetResponse,
    HolidayBonusRequest,
    IncomeTaxRequest,
    WithholdingTaxRequest,
    WithholdingTaxResponse,
    derive_youth_band,
    format_validation_error,
)
from hellastax.backend.config.year_config import (
    PayrollConfig,
    YearConfiguration,
    available_years,
    resolve_year_configuration,
)

from .calculators import (
    calculate_freelance,
    calculate_gift_tax,
    calculate_income_tax,
    compute_annual_bonuses,
    compute_bonus,
    format_percentage,
    round_currency,
    solve_gross_from_net,
)

_LOGGER = logging.getLogger(__name__)

_RequestT = TypeVar("_RequestT", bound=BaseModel)

_DEFAULT_PAYMENTS = 12

_WARNING_SECTIONS = {
    "employed": "employment",
    "pensioner": "pension",
    "self_employed": "freelance",
    "rental": "rental",
}


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("HELLASTAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _log_timings(operation: str, timings: dict[str, float] | None) -> None:
    if timings is None:
        return
    _LOGGER.debug(
        "%s timings (ms): %s",
        operation,
        {name: round(duration * 1000, 3) for name, duration in timings.items()},
    )


def _validate_request(
    model: type[_RequestT], payload: Mapping[str, Any] | _RequestT
) -> _RequestT:
    if isinstance(payload, model):
        return payload
    if not isinstance(payload, Mapping):
        raise ValueError("Payload must be a mapping")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def _validate_payments(
    value: int | None, payroll: PayrollConfig | None, field_name: str
) -> int:
    if value is None:
        if payroll is None:
            return _DEFAULT_PAYMENTS
        return payroll.default_payments_per_year or _DEFAULT_PAYMENTS

    if value <= 0:
        raise ValueError(f"Field '{field_name}' must be a positive integer")

    if payroll is not None and value not in payroll.allowed_payments_per_year:
        allowed = ", ".join(str(entry) for entry in payroll.allowed_payments_per_year)
        raise ValueError(
            f"Field '{field_name}' must match an allowed payroll frequency ({allowed})"
        )
    return value


def _payroll_for(category: str, config: YearConfiguration) -> PayrollConfig | None:
    if category == "employed":
        return config.employment.payroll
    if category == "pensioner":
        return config.pension.payroll
    return None


def _warnings_for(config: YearConfiguration, section: str) -> list[str] | None:
    messages = [
        warning.message
        for warning in config.warnings
        if not warning.applies_to or section in warning.applies_to
    ]
    return messages or None


def _meta(
    config: YearConfiguration,
    section: str,
    *,
    youth_band: str | None = None,
    residence_transfer: bool = False,
) -> dict[str, Any]:
    meta: dict[str, Any] = {"year": config.year}
    if youth_band:
        meta["youth_relief_category"] = youth_band
    if residence_transfer:
        meta["residence_transfer_applied"] = True
    warnings = _warnings_for(config, section)
    if warnings:
        meta["warnings"] = warnings
    return meta


def _calculation_payload(
    result: CalculationResult, config: YearConfiguration
) -> dict[str, Any]:
    payload = asdict(result)
    payload.pop("youth_band")
    payload.pop("residence_transfer_applied")
    payload["meta"] = _meta(
        config,
        _WARNING_SECTIONS[result.category],
        youth_band=result.youth_band,
        residence_transfer=result.residence_transfer_applied,
    )
    return payload


def _dump(model: type[BaseModel], payload: Mapping[str, Any]) -> dict[str, Any]:
    return model.model_validate(payload).model_dump(mode="json", exclude_none=True)


def calculate_tax(payload: Mapping[str, Any] | IncomeTaxRequest) -> dict[str, Any]:
    """Compute the annual income tax for a single income category."""

    request = _validate_request(IncomeTaxRequest, payload)
    timings: dict[str, float] | None = {} if _profiling_enabled() else None

    config = resolve_year_configuration(request.year)
    payments = _validate_payments(
        request.payments_per_year,
        _payroll_for(request.category, config),
        "payments_per_year",
    )

    gross_income = request.yearly_income
    if gross_income <= 0:
        gross_income = request.monthly_income * payments

    with _profile_section("income_tax", timings):
        result = calculate_income_tax(
            CalculationInput(
                year=config.year,
                gross_income=gross_income,
                payments_per_year=payments,
                dependants=request.dependants,
                age=request.age,
                residence_transfer=request.tax_residence_transfer,
                category=request.category,
            ),
            config,
        )
    _log_timings("calculate_tax", timings)

    return _dump(CalculationResponse, _calculation_payload(result, config))


def calculate_withholding(
    payload: Mapping[str, Any] | WithholdingTaxRequest,
) -> dict[str, Any]:
    """Return the per-payment withholding view for a monthly salary."""

    request = _validate_request(WithholdingTaxRequest, payload)
    config = resolve_year_configuration(request.year)
    payments = _validate_payments(
        request.payments_per_year,
        _payroll_for(request.category, config),
        "payments_per_year",
    )

    result = calculate_income_tax(
        CalculationInput(
            year=config.year,
            gross_income=request.monthly_salary * payments,
            payments_per_year=payments,
            dependants=request.dependants,
            age=request.age,
            residence_transfer=request.tax_residence_transfer,
            category=request.category,
        ),
        config,
    )

    response = {
        "payments_per_year": payments,
        "monthly_salary": result.monthly.gross,
        "monthly_net": result.monthly.net,
        "monthly_tax": result.monthly.tax,
        "monthly_insurance": result.monthly.employee_contributions,
        "monthly_employer_contributions": result.monthly.employer_contributions,
        "annual_gross": result.gross_income,
        "annual_taxable_income": result.taxable_income,
        "annual_net": result.net_income,
        "annual_tax": result.income_tax,
        "annual_insurance": result.employee_contributions,
        "effective_tax_rate": result.effective_tax_rate,
        "meta": _meta(
            config,
            _WARNING_SECTIONS[request.category],
            youth_band=result.youth_band,
            residence_transfer=request.tax_residence_transfer,
        ),
    }
    return _dump(WithholdingTaxResponse, response)


def _bonus_configuration(year: int | None, payment_year: int) -> YearConfiguration:
    if year is None and payment_year in available_years():
        year = payment_year
    return resolve_year_configuration(year)


def _bonus_payload(result: BonusResult) -> dict[str, Any]:
    return {
        "bonus_type": result.period.bonus_type,
        "period_start": result.period.start.isoformat(),
        "period_end": result.period.end.isoformat(),
        "days_in_period": result.period.total_days,
        "days_worked": result.days_worked,
        "full_amount": result.full_amount,
        "gross_amount": result.gross_amount,
        "withholding_rate": result.withholding_rate,
        "tax": result.tax,
        "net_amount": result.net_amount,
    }


def calculate_holiday_bonus(
    payload: Mapping[str, Any] | HolidayBonusRequest,
) -> dict[str, Any]:
    """Pro-rate a single holiday bonus.

    The payment year defaults to the year employment started; the matching
    configuration is used when that year is declared.
    """

    request = _validate_request(HolidayBonusRequest, payload)
    payment_year = request.payment_year or request.start_date.year
    config = _bonus_configuration(request.year, payment_year)

    result = compute_bonus(
        request.monthly_salary,
        request.start_date,
        request.bonus_type,
        payment_year,
        config.bonus,
        residence_transfer=request.tax_residence_transfer,
        residence_transfer_factor=config.relief.residence_transfer_factor,
    )

    response = _bonus_payload(result)
    response["meta"] = _meta(
        config, "bonus", residence_transfer=request.tax_residence_transfer
    )
    return _dump(BonusResponse, response)


def calculate_holiday_bonuses(
    payload: Mapping[str, Any] | AnnualBonusRequest,
) -> dict[str, Any]:
    """Return the Christmas, Easter and summer bonuses of one payment year."""

    request = _validate_request(AnnualBonusRequest, payload)
    payment_year = request.payment_year or request.start_date.year
    config = _bonus_configuration(request.year, payment_year)

    summary = compute_annual_bonuses(
        request.monthly_salary,
        request.start_date,
        payment_year,
        config.bonus,
        residence_transfer=request.tax_residence_transfer,
        employment_end=request.end_date,
        residence_transfer_factor=config.relief.residence_transfer_factor,
    )

    response = {
        "payment_year": summary.year,
        "bonuses": {
            bonus_type: _bonus_payload(result)
            for bonus_type, result in summary.bonuses.items()
        },
        "totals": {
            "gross": summary.gross_total,
            "tax": summary.tax_total,
            "net": summary.net_total,
        },
        "meta": _meta(config, "bonus", residence_transfer=request.tax_residence_transfer),
    }
    return _dump(AnnualBonusResponse, response)


def calculate_gross_from_net(
    payload: Mapping[str, Any] | GrossFromNetRequest,
) -> dict[str, Any]:
    """Estimate the gross salary that yields the requested monthly net."""

    request = _validate_request(GrossFromNetRequest, payload)
    timings: dict[str, float] | None = {} if _profiling_enabled() else None

    config = resolve_year_configuration(request.year)
    payments = _validate_payments(
        request.payments_per_year, config.employment.payroll, "payments_per_year"
    )

    with _profile_section("solver", timings):
        solution = solve_gross_from_net(
            request.desired_monthly_net,
            request.dependants,
            payments,
            config=config,
            tolerance=request.tolerance,
            max_iterations=request.max_iterations,
            age=request.age,
            residence_transfer=request.tax_residence_transfer,
        )
    _log_timings("calculate_gross_from_net", timings)

    response = {
        "desired_monthly_net": round_currency(request.desired_monthly_net),
        "desired_annual_net": round_currency(solution.target_net_income),
        "gross_income": solution.gross_income,
        "monthly_gross": solution.result.monthly.gross,
        "iterations": solution.iterations,
        "converged": solution.converged,
        "calculation": _calculation_payload(solution.result, config),
    }
    return _dump(GrossFromNetResponse, response)


def calculate_freelance_tax(
    payload: Mapping[str, Any] | FreelanceRequest,
) -> dict[str, Any]:
    """Compute insurance, income tax and trade fee for freelance revenue."""

    request = _validate_request(FreelanceRequest, payload)
    config = resolve_year_configuration(request.year)

    result = calculate_freelance(
        request.annual_revenue,
        config,
        profession=request.profession,
        custom_expense_rate=request.custom_expense_rate,
        business_expenses=request.business_expenses,
        dependants=request.dependants,
        age=request.age,
        city=request.city,
    )

    response = asdict(result)
    youth_band = derive_youth_band(request.age) if config.youth_bands else None
    response["meta"] = _meta(config, "freelance", youth_band=youth_band)
    return _dump(FreelanceResponse, response)


def calculate_gift(payload: Mapping[str, Any] | GiftTaxRequest) -> dict[str, Any]:
    """Compute gift tax for the donor relationship category."""

    request = _validate_request(GiftTaxRequest, payload)
    config = resolve_year_configuration(request.year)

    result = calculate_gift_tax(
        request.gift_value, request.previous_gifts, request.relationship, config.gift
    )

    response = {
        "category": result.category,
        "gift_type": request.gift_type,
        "gift_value": result.gift_value,
        "previous_gifts": result.previous_gifts,
        "total_gift_value": result.total_gift_value,
        "tax_free_amount": result.tax_free_threshold,
        "tax_rate": format_percentage(result.rate),
        "rate": result.rate,
        "taxable_gift": result.taxable_amount,
        "total_tax": result.total_tax,
        "previous_tax": result.previous_tax,
        "gift_tax_amount": result.tax_due,
        "meta": _meta(config, "gift"),
    }
    return _dump(GiftTaxResponse, response)


__all__ = [
    "calculate_freelance_tax",
    "calculate_gift",
    "calculate_gross_from_net",
    "calculate_holiday_bonus",
    "calculate_holiday_bonuses",
    "calculate_tax",
    "calculate_withholding",
]
