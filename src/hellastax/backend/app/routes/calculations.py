"""REST endpoints for tax calculations."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from flask import Blueprint, request

from hellastax.backend.app.services.calculation_service import (
    calculate_freelance_tax,
    calculate_gift,
    calculate_gross_from_net,
    calculate_holiday_bonus,
    calculate_holiday_bonuses,
    calculate_tax,
    calculate_withholding,
)
from hellastax.backend.services import (
    build_calculation_response,
    parse_calculation_payload,
)

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1/calculations")


def _respond(
    calculator: Callable[[Mapping[str, Any]], dict[str, Any]],
) -> tuple[Any, int]:
    payload = parse_calculation_payload(request)
    return build_calculation_response(calculator(payload))


@blueprint.post("/income-tax")
def create_income_tax_calculation() -> tuple[Any, int]:
    """Annual income tax for employment, pension, business or rental income."""

    return _respond(calculate_tax)


@blueprint.post("/withholding-tax")
def create_withholding_calculation() -> tuple[Any, int]:
    """Monthly payroll withholding for a gross monthly salary."""

    return _respond(calculate_withholding)


@blueprint.post("/holiday-bonus")
def create_holiday_bonus_calculation() -> tuple[Any, int]:
    return _respond(calculate_holiday_bonus)


@blueprint.post("/holiday-bonuses")
def create_holiday_bonuses_calculation() -> tuple[Any, int]:
    return _respond(calculate_holiday_bonuses)


@blueprint.post("/gross-from-net")
def create_gross_from_net_calculation() -> tuple[Any, int]:
    """Estimate the gross salary behind a desired monthly net amount."""

    return _respond(calculate_gross_from_net)


@blueprint.post("/freelance")
def create_freelance_calculation() -> tuple[Any, int]:
    return _respond(calculate_freelance_tax)


@blueprint.post("/gift-tax")
def create_gift_tax_calculation() -> tuple[Any, int]:
    return _respond(calculate_gift)
