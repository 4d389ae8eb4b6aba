"""Integration tests for the Box 1 calculation endpoint."""

from __future__ import annotations

from http import HTTPStatus

import pytest
from flask.testing import FlaskClient

from conftest import SAMPLE_FIGURES, FakePaycheckEngine
from dutchtax.backend.services.calculation_service import Box1Calculator
from dutchtax.backend.services.paycheck import PaycheckEngineError


def test_calculation_endpoint_returns_breakdown(
    client: FlaskClient, stub_calculator: Box1Calculator
) -> None:
    response = client.post(
        "/api/v1/calculations",
        json={
            "grossIncome": 60_000,
            "period": "yearly",
            "socialSecurity": True,
            "ruling30Enabled": False,
            "year": 2025,
        },
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    summary = payload["summary"]
    assert payload["meta"] == {"year": 2025, "locale": "en"}
    assert summary["ok"] is True
    assert summary["breakdown"][0]["description"] == "Gross annual income"
    assert summary["breakdown"][0]["amount"] == pytest.approx(60_000)
    assert summary["breakdown"][-1]["description"] == "Net annual income"
    assert summary["breakdown"][-1]["amount"] == pytest.approx(SAMPLE_FIGURES["netYear"])
    assert summary["estimated_tax"] == pytest.approx(abs(SAMPLE_FIGURES["incomeTax"]))
    assert len(summary["details"]) == 23


def test_calculation_endpoint_accepts_empty_form(
    client: FlaskClient, stub_calculator: Box1Calculator, fake_engine: FakePaycheckEngine
) -> None:
    response = client.post(
        "/api/v1/calculations",
        json={
            "grossIncome": "",
            "period": "yearly",
            "hoursPerWeek": 40,
            "holidayAllowanceIncluded": True,
            "older": False,
            "ruling30Enabled": False,
            "ruling30Category": "other",
            "socialSecurity": True,
        },
    )

    assert response.status_code == HTTPStatus.OK
    summary = response.get_json()["summary"]
    assert summary["breakdown"] == []
    assert summary["details"] is None
    assert summary["taxable_base"] == 0
    assert fake_engine.calls == []


def test_calculation_endpoint_uses_accept_language_header(
    client: FlaskClient, stub_calculator: Box1Calculator
) -> None:
    response = client.post(
        "/api/v1/calculations",
        json={"grossIncome": 4_000, "period": "monthly"},
        headers={"Accept-Language": "nl"},
    )

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["meta"]["locale"] == "nl"
    assert payload["summary"]["breakdown"][0]["description"] == "Bruto jaarinkomen"


def test_calculation_endpoint_reports_engine_failure_in_summary(
    client: FlaskClient,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    from dutchtax.backend.services import calculation_service

    failing = Box1Calculator(FakePaycheckEngine(error=PaycheckEngineError("engine offline")))
    monkeypatch.setattr(calculation_service, "get_default_calculator", lambda: failing)

    response = client.post("/api/v1/calculations", json={"grossIncome": 60_000})

    assert response.status_code == HTTPStatus.OK
    summary = response.get_json()["summary"]
    assert summary["ok"] is False
    assert summary["error"] == "engine offline"
    assert summary["breakdown"] == []
    assert summary["details"] is None


def test_calculation_endpoint_rejects_malformed_json(client: FlaskClient) -> None:
    response = client.post(
        "/api/v1/calculations",
        data="not-json",
        content_type="text/plain",
    )

    assert response.status_code == HTTPStatus.BAD_REQUEST
    payload = response.get_json()
    assert payload["error"] == "bad_request"
    assert "JSON" in payload["message"]


@pytest.mark.parametrize(
    "body",
    [
        {"grossIncome": 60_000, "year": 2018},
        {"grossIncome": 60_000, "hoursPerWeek": 200},
        {"grossIncome": "lots"},
        {"grossIncome": 60_000, "bonus": 1_000},
        {"grossIncome": "inf"},
        {"grossIncome": "NaN"},
        {"grossIncome": 60_000, "hoursPerWeek": "nan"},
    ],
)
def test_calculation_endpoint_rejects_invalid_payloads(
    client: FlaskClient, stub_calculator: Box1Calculator, body: dict[str, object]
) -> None:
    response = client.post("/api/v1/calculations", json=body)

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["error"] == "validation_error"


def test_calculation_endpoint_rejects_non_object_json(client: FlaskClient) -> None:
    response = client.post("/api/v1/calculations", json=[60_000, "yearly"])

    assert response.status_code == HTTPStatus.BAD_REQUEST
    assert response.get_json()["message"] == "Request JSON must be an object"


@pytest.mark.parametrize(
    ("query", "body_locale", "accept_language", "expected"),
    [
        ("", None, "nl-NL,nl;q=0.9,en;q=0.8", "nl"),
        ("?locale=en", None, "nl", "en"),
        ("?locale=en", "NL", None, "nl"),
        ("", "fr", None, "en"),
        ("", None, None, "en"),
    ],
)
def test_calculation_endpoint_locale_precedence(
    client: FlaskClient,
    stub_calculator: Box1Calculator,
    query: str,
    body_locale: str | None,
    accept_language: str | None,
    expected: str,
) -> None:
    body: dict[str, object] = {"grossIncome": 60_000}
    if body_locale is not None:
        body["locale"] = body_locale
    headers = {"Accept-Language": accept_language} if accept_language else {}

    response = client.post(f"/api/v1/calculations{query}", json=body, headers=headers)

    assert response.status_code == HTTPStatus.OK
    assert response.get_json()["meta"]["locale"] == expected
