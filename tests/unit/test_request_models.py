"""Unit tests for request parsing and normalisation models."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from hellastax.backend.app.models import (
    FreelanceRequest,
    GiftTaxRequest,
    HolidayBonusRequest,
    IncomeTaxRequest,
    derive_youth_band,
    format_validation_error,
    parse_amount,
    parse_dependants,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (1_200, 1_200.0),
        ("1200", 1_200.0),
        ("€ 1 200", 1_200.0),
        ("12,5", 12.5),
        ("abc", 0.0),
        ("", 0.0),
        (None, 0.0),
        ("nan", 0.0),
        (True, 0.0),
    ],
)
def test_parse_amount(raw: object, expected: float) -> None:
    assert parse_amount(raw) == expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("0", 0), ("3", 3), ("4+", 4), (2, 2), ("many", 0), (None, 0)],
)
def test_parse_dependants(raw: object, expected: int) -> None:
    assert parse_dependants(raw) == expected


@pytest.mark.parametrize(
    ("age", "band"),
    [(None, None), (18, "under_25"), (24, "under_25"), (25, None), (26, "age26_30"), (30, "age26_30"), (31, None)],
)
def test_derive_youth_band(age: int | None, band: str | None) -> None:
    assert derive_youth_band(age) == band


def test_income_request_aliases() -> None:
    request = IncomeTaxRequest.model_validate(
        {"yearly_income": "20000", "children": "2", "residence_transfer": True}
    )

    assert request.yearly_income == 20_000.0
    assert request.dependants == 2
    assert request.tax_residence_transfer is True
    assert request.year is None


def test_income_request_rejects_unknown_category() -> None:
    with pytest.raises(ValidationError):
        IncomeTaxRequest.model_validate({"yearly_income": 1_000, "category": "farmer"})


def test_bonus_request_normalises_inputs() -> None:
    request = HolidayBonusRequest.model_validate(
        {"start_date": "2025-03-01T12:00:00", "bonus_type": " Holiday "}
    )

    assert request.start_date == date(2025, 3, 1)
    assert request.bonus_type == "summer"


def test_freelance_request_defaults_city() -> None:
    request = FreelanceRequest.model_validate(
        {"annual_revenue": 10_000, "city": "", "profession": " Lawyers "}
    )

    assert request.city == "other"
    assert request.profession == "lawyers"
    assert request.business_expenses is None


def test_gift_request_relationship_labels() -> None:
    assert GiftTaxRequest.model_validate({"relationship": "category-b"}).relationship == "B"
    assert GiftTaxRequest.model_validate({"relationship": "c"}).relationship == "C"
    assert GiftTaxRequest.model_validate({}).relationship == "A"


def test_format_validation_error_is_concise() -> None:
    with pytest.raises(ValidationError) as excinfo:
        IncomeTaxRequest.model_validate({"yearly_income": -5})

    message = format_validation_error(excinfo.value)

    assert message.startswith("Invalid calculation payload:")
    assert "yearly_income: value cannot be negative" in message
