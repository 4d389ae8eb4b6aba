"""Pydantic models describing the public API surface."""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
)

__all__ = [
    "CalculationInputs",
    "CalculationRequest",
    "BreakdownRow",
    "Box1Details",
    "TaxSummary",
    "ResponseMeta",
    "CalculationResponse",
    "format_validation_error",
]


class CalculationInputs(BaseModel):
    """Box 1 calculator form values.

    Field names follow Python conventions; the camelCase names used by the
    browser form are accepted as aliases. Instances are frozen and hashable so
    that identical inputs can share a cached summary.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    gross_income: float = Field(default=0.0, alias="grossIncome", allow_inf_nan=False)
    period: str = Field(default="yearly")
    hours_per_week: float = Field(
        default=40.0, ge=0, le=168, alias="hoursPerWeek", allow_inf_nan=False
    )
    holiday_allowance_included: bool = Field(default=True, alias="holidayAllowanceIncluded")
    older: bool = False
    ruling30_enabled: bool = Field(default=False, alias="ruling30Enabled")
    ruling30_category: str = Field(default="other", alias="ruling30Category")
    social_security: bool = Field(default=True, alias="socialSecurity")

    @field_validator("gross_income", mode="before")
    @classmethod
    def _coerce_blank_income(cls, value: Any) -> Any:
        # The empty form submits "" until the user types an amount.
        if value is None:
            return 0.0
        if isinstance(value, str) and not value.strip():
            return 0.0
        return value

    @field_validator("hours_per_week", mode="before")
    @classmethod
    def _coerce_blank_hours(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return 40.0
        return value

    @field_validator("period", "ruling30_category", mode="before")
    @classmethod
    def _strip_identifiers(cls, value: Any) -> Any:
        if value is None:
            return value
        return str(value).strip()


class CalculationRequest(CalculationInputs):
    """Complete payload accepted by the calculation endpoint."""

    year: int | None = Field(default=None, ge=0)
    locale: str = Field(default="en")

    @field_validator("locale", mode="before")
    @classmethod
    def _normalise_locale(cls, value: Any) -> str:
        if value is None:
            return "en"
        text = str(value).strip()
        return text or "en"

    def to_inputs(self) -> CalculationInputs:
        """Return the form values without the request envelope."""

        return CalculationInputs.model_validate(
            self.model_dump(exclude={"year", "locale"})
        )


class BreakdownRow(BaseModel):
    """A single labelled amount in the display breakdown."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str
    description: str
    amount: float


class Box1Details(BaseModel):
    """Named figures read back from the paycheck engine."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    input_income: float
    input_period: str
    yearly_input_income: float
    gross_year: float = 0.0
    gross_month: float = 0.0
    gross_week: float = 0.0
    gross_day: float = 0.0
    gross_hour: float = 0.0
    gross_allowance: float = 0.0
    taxable_year: float = 0.0
    tax_free: float = 0.0
    payroll_tax: float = 0.0
    social_tax: float = 0.0
    general_credit: float = 0.0
    labour_credit: float = 0.0
    income_tax: float = 0.0
    income_tax_month: float = 0.0
    net_year: float = 0.0
    net_month: float = 0.0
    net_week: float = 0.0
    net_day: float = 0.0
    net_hour: float = 0.0
    net_allowance: float = 0.0


class TaxSummary(BaseModel):
    """Display-ready Box 1 estimate, or the empty value with an error."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    taxable_base: float = 0.0
    estimated_tax: float = 0.0
    net_income: float = 0.0
    breakdown: tuple[BreakdownRow, ...] = ()
    details: Box1Details | None = None
    error: str | None = None

    @computed_field
    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def empty(cls, error: str | None = None) -> TaxSummary:
        return cls(error=error)


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    year: int
    locale: str


class CalculationResponse(BaseModel):
    """Full response payload produced by the calculation service."""

    model_config = ConfigDict(extra="forbid")

    summary: TaxSummary
    meta: ResponseMeta


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
