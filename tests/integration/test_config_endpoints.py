"""Integration tests for the configuration endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask.testing import FlaskClient

from hellastax.backend.config.year_config import available_years
from hellastax.backend.version import get_project_version


def test_meta_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/meta")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["version"] == get_project_version()
    assert payload["supported_years"] == list(available_years())


def test_years_endpoint_lists_every_year(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/years")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert [entry["year"] for entry in payload["years"]] == list(available_years())
    assert payload["default_year"] == payload["supported_years"][-1]


def test_single_year_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/2025")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    brackets = payload["employment"]["brackets"]
    assert brackets[0] == {"lower": 0.0, "upper": 10_000.0, "rate": 0.09}
    assert brackets[-1]["upper"] is None
    assert all(set(entry) == {"lower", "upper", "rate"} for entry in brackets)
    assert payload["employment"]["payroll"]["allowed_payments_per_year"] == [12, 14]
    assert payload["freelance"]["trade_fee"]["major_city_amount"] == 1_000.0
    assert set(payload["bonus"]["periods"]) == {"christmas", "easter", "summer"}
    assert payload["status"] == "active"


def test_2026_exposes_youth_bands(client: FlaskClient) -> None:
    payload = client.get("/api/v1/config/2026").get_json()

    assert payload["employment"]["youth"]["bands"] == ["age26_30", "under_25"]
    assert payload["employment"]["brackets"][0]["youth"] == {
        "under_25": 0.0,
        "age26_30": 0.09,
    }
    assert any(warning["severity"] == "warning" for warning in payload["warnings"])


def test_unknown_year_returns_not_found(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/1999")

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.get_json()["error"] == "not_found"
