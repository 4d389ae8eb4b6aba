"""Typed request/response models shared across the calculation services.

Inputs are validated Pydantic models that double as cache keys, and the
derived :class:`TaxSummary` is a frozen value: a calculation either fills it
in or returns the empty summary carrying an ``error`` message.
"""

from __future__ import annotations

from .api import (
    Box1Details,
    BreakdownRow,
    CalculationInputs,
    CalculationRequest,
    CalculationResponse,
    ResponseMeta,
    TaxSummary,
    format_validation_error,
)

__all__ = [
    "Box1Details",
    "BreakdownRow",
    "CalculationInputs",
    "CalculationRequest",
    "CalculationResponse",
    "ResponseMeta",
    "TaxSummary",
    "format_validation_error",
]
