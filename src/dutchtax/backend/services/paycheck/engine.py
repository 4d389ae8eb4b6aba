"""Boundary between the Box 1 calculator and the external paycheck engine.

The actual wage-tax arithmetic (brackets, credits, the 30% ruling) belongs to
the ``dutch-tax-income-calculator`` package. This module describes the
arguments that package's ``SalaryPaycheck`` constructor takes, the figures we
read back from it, and how an engine implementation is located at runtime.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import import_module
from types import MappingProxyType
from typing import Any, Mapping, Protocol, runtime_checkable

from dutchtax.backend.config.box1_config import ConfigurationError, EngineSettings

ENGINE_PATH_ENV = "DUTCHTAX_PAYCHECK_ENGINE"

# Detail field name -> attribute exposed by ``SalaryPaycheck``.
PAYCHECK_FIGURES: Mapping[str, str] = MappingProxyType(
    {
        "gross_year": "grossYear",
        "gross_month": "grossMonth",
        "gross_week": "grossWeek",
        "gross_day": "grossDay",
        "gross_hour": "grossHour",
        "gross_allowance": "grossAllowance",
        "taxable_year": "taxableYear",
        "tax_free": "taxFree",
        "payroll_tax": "payrollTax",
        "social_tax": "socialTax",
        "general_credit": "generalCredit",
        "labour_credit": "labourCredit",
        "income_tax": "incomeTax",
        "income_tax_month": "incomeTaxMonth",
        "net_year": "netYear",
        "net_month": "netMonth",
        "net_week": "netWeek",
        "net_day": "netDay",
        "net_hour": "netHour",
        "net_allowance": "netAllowance",
    }
)


class PaycheckEngineError(RuntimeError):
    """Raised when the paycheck engine cannot produce a result."""


@dataclass(frozen=True)
class SalaryInput:
    income: float
    allowance: bool
    social_security: bool
    older: bool
    hours: float

    def to_payload(self) -> dict[str, Any]:
        return {
            "income": self.income,
            "allowance": self.allowance,
            "socialSecurity": self.social_security,
            "older": self.older,
            "hours": self.hours,
        }


@dataclass(frozen=True)
class RulingSelection:
    checked: bool
    choice: str

    def to_payload(self) -> dict[str, Any]:
        return {"checked": self.checked, "choice": self.choice}


@dataclass(frozen=True)
class PaycheckParameters:
    """Arguments for a single ``SalaryPaycheck`` construction."""

    salary: SalaryInput
    start_from: str
    year: int
    ruling: RulingSelection

    def to_payload(self) -> dict[str, Any]:
        return {
            "salary": self.salary.to_payload(),
            "startFrom": self.start_from,
            "year": self.year,
            "ruling": self.ruling.to_payload(),
        }


@runtime_checkable
class PaycheckEngine(Protocol):
    """Anything that turns :class:`PaycheckParameters` into paycheck figures.

    The result may be a mapping or an object with attributes; figures are
    looked up by the names in :data:`PAYCHECK_FIGURES` and missing ones are
    treated as zero by the caller.
    """

    def calculate(self, parameters: PaycheckParameters) -> Mapping[str, Any] | Any:
        ...


def resolve_engine_path(settings: EngineSettings) -> str:
    """Return the engine path, letting the environment override the YAML value."""

    override = os.getenv(ENGINE_PATH_ENV, "").strip()
    return override or settings.path


def load_engine(settings: EngineSettings, path: str | None = None) -> PaycheckEngine:
    """Import and build the engine named by ``module:attribute``.

    Classes exposing ``from_settings`` are built from ``settings``; other
    classes are instantiated without arguments and plain objects are used as
    they are.
    """

    target_path = path or resolve_engine_path(settings)
    module_name, _, attribute = target_path.partition(":")
    if not module_name or not attribute:
        raise ConfigurationError(
            f"Engine path '{target_path}' must use the 'module:attribute' form"
        )

    try:
        module = import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Unable to import paycheck engine module '{module_name}'") from exc

    try:
        target = getattr(module, attribute)
    except AttributeError as exc:
        raise ConfigurationError(
            f"Paycheck engine '{attribute}' not found in module '{module_name}'"
        ) from exc

    if hasattr(target, "from_settings"):
        engine = target.from_settings(settings)
    elif isinstance(target, type):
        engine = target()
    else:
        engine = target

    if not isinstance(engine, PaycheckEngine):
        raise ConfigurationError(f"'{target_path}' does not provide a calculate() method")
    return engine


__all__ = [
    "ENGINE_PATH_ENV",
    "PAYCHECK_FIGURES",
    "PaycheckEngine",
    "PaycheckEngineError",
    "PaycheckParameters",
    "RulingSelection",
    "SalaryInput",
    "load_engine",
    "resolve_engine_path",
]
