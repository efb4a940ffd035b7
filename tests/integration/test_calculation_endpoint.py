"""Integration tests for the calculation endpoints."""

from __future__ import annotations

from http import HTTPStatus

import pytest
from flask.testing import FlaskClient

BASE = "/api/v1/calculations"


def test_income_tax_endpoint(client: FlaskClient) -> None:
    response = client.post(
        f"{BASE}/income-tax",
        json={"year": 2025, "yearly_income": 14_000, "payments_per_year": 14},
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["employee_contributions"] == pytest.approx(1_876.0)
    assert payload["income_tax"] == pytest.approx(590.28)
    assert payload["net_income"] == pytest.approx(11_533.72)
    assert payload["monthly"]["net"] == pytest.approx(823.84)
    assert payload["meta"]["year"] == 2025
    assert response.headers["Cache-Control"] == "no-store"


def test_income_tax_year_from_query_string(client: FlaskClient) -> None:
    response = client.post(f"{BASE}/income-tax?year=2025", json={"yearly_income": 14_000})

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["meta"]["year"] == 2025


def test_withholding_endpoint(client: FlaskClient) -> None:
    response = client.post(
        f"{BASE}/withholding-tax",
        json={"year": 2025, "monthly_salary": "1000", "payments_per_year": 14},
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["monthly_tax"] == pytest.approx(49.19)
    assert payload["monthly_net"] == pytest.approx(823.84)


def test_holiday_bonus_endpoint(client: FlaskClient) -> None:
    response = client.post(
        f"{BASE}/holiday-bonus",
        json={
            "monthly_salary": 1_500,
            "start_date": "2025-03-01",
            "bonus_type": "easter",
            "payment_year": 2025,
        },
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["days_worked"] == 61
    assert payload["days_in_period"] == 120
    assert payload["tax"] == pytest.approx(57.19)
    assert payload["net_amount"] == pytest.approx(324.06)


def test_holiday_bonuses_endpoint(client: FlaskClient) -> None:
    response = client.post(
        f"{BASE}/holiday-bonuses",
        json={"monthly_salary": 1_200, "start_date": "2025-05-01", "payment_year": 2025},
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["bonuses"]["christmas"]["gross_amount"] == pytest.approx(1_200.0)
    assert payload["bonuses"]["easter"]["gross_amount"] == 0
    assert payload["bonuses"]["summer"]["days_worked"] == 61
    assert payload["totals"]["net"] == pytest.approx(1_020.0 + 171.88)


def test_gross_from_net_endpoint(client: FlaskClient) -> None:
    response = client.post(
        f"{BASE}/gross-from-net",
        json={"year": 2025, "desired_monthly_net": 700, "payments_per_year": 14},
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["converged"] is True
    assert payload["calculation"]["net_income"] == pytest.approx(9_800.0, abs=0.01)


def test_freelance_endpoint(client: FlaskClient) -> None:
    response = client.post(
        f"{BASE}/freelance",
        json={
            "year": 2025,
            "annual_revenue": 30_000,
            "profession": "engineers_architects",
            "city": "athens",
        },
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["business_tax"] == pytest.approx(1_000.0)
    assert payload["net_income"] == pytest.approx(11_292.16)


def test_gift_tax_endpoint(client: FlaskClient) -> None:
    response = client.post(
        f"{BASE}/gift-tax",
        json={"year": 2025, "gift_value": 50_000, "previous_gifts": 10_000, "relationship": "B"},
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["gift_tax_amount"] == pytest.approx(6_000.0)
    assert payload["tax_rate"] == "20%"


def test_invalid_json_returns_bad_request(client: FlaskClient) -> None:
    response = client.post(
        f"{BASE}/income-tax", data="{broken", content_type="application/json"
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "bad_request"
    assert response.mimetype == "application/problem+json"


def test_validation_error_returns_problem_response(client: FlaskClient) -> None:
    response = client.post(
        f"{BASE}/income-tax", json={"year": 2025, "yearly_income": -10}
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "cannot be negative" in payload["message"]


def test_unknown_year_returns_not_found(client: FlaskClient) -> None:
    response = client.post(f"{BASE}/income-tax", json={"year": 1999, "yearly_income": 1})

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.get_json()["error"] == "not_found"


def test_get_is_not_allowed(client: FlaskClient) -> None:
    response = client.get(f"{BASE}/income-tax")

    assert response.status_code == HTTPStatus.METHOD_NOT_ALLOWED
