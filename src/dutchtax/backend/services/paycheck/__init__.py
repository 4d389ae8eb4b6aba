"""Paycheck engines that perform the underlying wage-tax computation."""

from .engine import (
    PAYCHECK_FIGURES,
    PaycheckEngine,
    PaycheckEngineError,
    PaycheckParameters,
    RulingSelection,
    SalaryInput,
    load_engine,
)
from .node import NodePaycheckEngine

__all__ = [
    "NodePaycheckEngine",
    "PAYCHECK_FIGURES",
    "PaycheckEngine",
    "PaycheckEngineError",
    "PaycheckParameters",
    "RulingSelection",
    "SalaryInput",
    "load_engine",
]
