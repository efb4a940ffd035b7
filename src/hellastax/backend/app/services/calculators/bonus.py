"""Pro-rated holiday bonus (Christmas, Easter, summer) calculations."""

from __future__ import annotations

import calendar
from datetime import date

from hellastax.backend.app.models import AnnualBonusSummary, BonusPeriod, BonusResult
from hellastax.backend.config.year_config import BONUS_TYPES, BonusConfig

from .utils import non_negative, round_currency


def _clamped_date(year: int, month: int, day: int) -> date:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last_day))


def bonus_period(bonus_type: str, payment_year: int, rules: BonusConfig) -> BonusPeriod:
    """Return the qualifying period of ``bonus_type`` within ``payment_year``."""

    try:
        period_config = rules.periods[bonus_type]
    except KeyError as exc:
        raise ValueError(f"Unknown bonus type '{bonus_type}'") from exc

    start = _clamped_date(payment_year, period_config.start_month, period_config.start_day)
    end = _clamped_date(payment_year, period_config.end_month, period_config.end_day)
    return BonusPeriod(
        bonus_type=bonus_type,
        start=start,
        end=end,
        total_days=(end - start).days + 1,
        salary_fraction=period_config.salary_fraction,
    )


def days_worked_in_period(
    period: BonusPeriod, employment_start: date, employment_end: date | None = None
) -> int:
    """Count the inclusive days of ``period`` covered by the employment spell."""

    effective_start = max(employment_start, period.start)
    effective_end = period.end if employment_end is None else min(employment_end, period.end)
    return max(0, (effective_end - effective_start).days + 1)


def compute_bonus(
    monthly_salary: float,
    employment_start: date,
    bonus_type: str,
    payment_year: int,
    rules: BonusConfig,
    residence_transfer: bool = False,
    employment_end: date | None = None,
    residence_transfer_factor: float = 0.5,
) -> BonusResult:
    """Pro-rate a holiday bonus by the days worked in its qualifying period.

    The full entitlement is ``monthly_salary`` times the period's salary
    fraction. The pro-rated gross and the flat withholding are each rounded to
    cents before the net amount is derived, so ``gross == tax + net`` holds
    exactly on the reported figures.
    """

    period = bonus_period(bonus_type, payment_year, rules)
    days_worked = days_worked_in_period(period, employment_start, employment_end)

    full_amount = non_negative(monthly_salary) * period.salary_fraction
    gross_amount = round_currency(days_worked * full_amount / period.total_days)

    withholding_rate = rules.withholding_rate
    if residence_transfer:
        withholding_rate *= residence_transfer_factor

    tax = round_currency(gross_amount * withholding_rate)
    net_amount = round_currency(gross_amount - tax)

    return BonusResult(
        period=period,
        days_worked=days_worked,
        full_amount=round_currency(full_amount),
        gross_amount=gross_amount,
        withholding_rate=withholding_rate,
        tax=tax,
        net_amount=net_amount,
    )


def compute_annual_bonuses(
    monthly_salary: float,
    employment_start: date,
    payment_year: int,
    rules: BonusConfig,
    residence_transfer: bool = False,
    employment_end: date | None = None,
    residence_transfer_factor: float = 0.5,
) -> AnnualBonusSummary:
    """Return every holiday bonus of ``payment_year`` together with totals."""

    bonuses = {
        bonus_type: compute_bonus(
            monthly_salary,
            employment_start,
            bonus_type,
            payment_year,
            rules,
            residence_transfer=residence_transfer,
            employment_end=employment_end,
            residence_transfer_factor=residence_transfer_factor,
        )
        for bonus_type in BONUS_TYPES
    }

    return AnnualBonusSummary(
        year=payment_year,
        bonuses=bonuses,
        gross_total=round_currency(sum(item.gross_amount for item in bonuses.values())),
        tax_total=round_currency(sum(item.tax for item in bonuses.values())),
        net_total=round_currency(sum(item.net_amount for item in bonuses.values())),
    )


__all__ = [
    "bonus_period",
    "compute_annual_bonuses",
    "compute_bonus",
    "days_worked_in_period",
]
