"""Expose the YAML-backed tax tables and application metadata.

Clients use these endpoints to discover the supported years, the allowed payroll
frequencies and the rates behind each calculator without duplicating business
rules.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from flask import Blueprint, jsonify

from hellastax.backend.app.http import problem_response
from hellastax.backend.config.year_config import (
    TaxBracket,
    YearConfiguration,
    available_years,
    load_manifest,
    load_year_configuration,
)
from hellastax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    supported_years = list(manifest.supported_years)
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


def _serialise_brackets(brackets: Sequence[TaxBracket]) -> list[dict[str, Any]]:
    serialised: list[dict[str, Any]] = []
    lower = 0.0
    for bracket in brackets:
        entry: dict[str, Any] = {
            "lower": lower,
            "upper": bracket.upper_bound,
            "rate": bracket.rate,
        }
        if bracket.youth_rates:
            entry["youth"] = dict(bracket.youth_rates)
        serialised.append(entry)
        if bracket.upper_bound is not None:
            lower = bracket.upper_bound
    return serialised


def _serialise_year(config: YearConfiguration) -> dict[str, Any]:
    manifest_entry = load_manifest().get_entry(config.year)
    employment = config.employment
    freelance = config.freelance

    return {
        "year": config.year,
        "status": manifest_entry.status,
        "meta": dict(config.meta),
        "employment": {
            "payroll": employment.payroll.model_dump(mode="json"),
            "contributions": employment.contributions.model_dump(mode="json"),
            "tax_credit": employment.tax_credit.model_dump(mode="json"),
            "brackets": _serialise_brackets(employment.brackets),
            "youth": {"bands": list(config.youth_bands)},
        },
        "pension": {
            "payroll": config.pension.payroll.model_dump(mode="json"),
            "brackets": _serialise_brackets(config.pension.brackets),
        },
        "freelance": {
            "contributions": freelance.contributions.model_dump(mode="json"),
            "expense_rates": dict(freelance.expense_rates),
            "default_expense_rate": freelance.default_expense_rate,
            "trade_fee": freelance.trade_fee.model_dump(mode="json"),
            "tax_credit_applies": freelance.tax_credit_applies,
            "brackets": _serialise_brackets(freelance.brackets),
        },
        "rental": {"brackets": _serialise_brackets(config.rental.brackets)},
        "bonus": config.bonus.model_dump(mode="json"),
        "gift": config.gift.model_dump(mode="json"),
        "relief": config.relief.model_dump(mode="json"),
        "solver": config.solver.model_dump(mode="json"),
        "warnings": [
            warning.model_dump(mode="json", exclude_none=True)
            for warning in config.warnings
        ],
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return all configured years with their tax tables."""

    years = [_serialise_year(load_year_configuration(year)) for year in available_years()]
    metadata = get_configuration_metadata()
    payload = {
        "years": years,
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>")
def get_year(year: int) -> tuple[Any, int]:
    """Return the tax tables of a single configured year."""

    try:
        configuration = load_year_configuration(year)
    except FileNotFoundError as exc:
        return problem_response("not_found", status=404, message=str(exc)).to_response()

    return jsonify(_serialise_year(configuration)), 200
