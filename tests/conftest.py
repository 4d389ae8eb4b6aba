"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path
from typing import Any, Mapping

# Make ``src`` importable when pytest runs without an editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from dutchtax.backend.app import create_app  # noqa: E402
from dutchtax.backend.services import calculation_service  # noqa: E402
from dutchtax.backend.services.calculation_service import Box1Calculator  # noqa: E402
from dutchtax.backend.services.paycheck import PaycheckParameters  # noqa: E402

# Figures shaped like ``SalaryPaycheck`` output for a 60k yearly salary that
# includes holiday allowance.
SAMPLE_FIGURES: dict[str, float] = {
    "grossYear": 60000.0,
    "grossMonth": 4629.63,
    "grossWeek": 1068.38,
    "grossDay": 213.68,
    "grossHour": 26.71,
    "grossAllowance": 4444.44,
    "taxableYear": 55555.56,
    "taxFree": 0.0,
    "payrollTax": -7658.0,
    "socialTax": -10234.0,
    "generalCredit": 2112.0,
    "labourCredit": 5052.0,
    "incomeTax": -10728.0,
    "incomeTaxMonth": -894.0,
    "netYear": 49272.0,
    "netMonth": 3797.33,
    "netWeek": 876.31,
    "netDay": 175.26,
    "netHour": 21.91,
    "netAllowance": 3010.0,
}


class FakePaycheckEngine:
    """Paycheck engine double that records every call it receives."""

    def __init__(self, figures: Mapping[str, Any] | None = None, error: Exception | None = None):
        self.figures = dict(SAMPLE_FIGURES if figures is None else figures)
        self.error = error
        self.calls: list[PaycheckParameters] = []

    def calculate(self, parameters: PaycheckParameters) -> Mapping[str, Any]:
        self.calls.append(parameters)
        if self.error is not None:
            raise self.error
        return dict(self.figures)


@pytest.fixture()
def fake_engine() -> FakePaycheckEngine:
    return FakePaycheckEngine()


@pytest.fixture()
def calculator(fake_engine: FakePaycheckEngine) -> Box1Calculator:
    return Box1Calculator(fake_engine)


@pytest.fixture()
def stub_calculator(
    monkeypatch: pytest.MonkeyPatch, calculator: Box1Calculator
) -> Box1Calculator:
    """Route ``calculate_box1`` through the fake engine instead of Node.js."""

    monkeypatch.setattr(calculation_service, "get_default_calculator", lambda: calculator)
    return calculator


@pytest.fixture()
def app() -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()
