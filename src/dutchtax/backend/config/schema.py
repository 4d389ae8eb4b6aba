"""Pydantic models describing the Box 1 calculator configuration schema."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class PeriodOption(ImmutableModel):
    """An income period the UI may submit, with its annualisation factor."""

    id: str
    label_key: str
    start_from: str
    multiplier: float | None = None

    @model_validator(mode="after")
    def _validate_multiplier(self) -> PeriodOption:
        if self.multiplier is not None and self.multiplier <= 0:
            raise ConfigurationError("Period multipliers must be positive when provided")
        if not self.start_from.strip():
            raise ConfigurationError("Periods must declare an external 'start_from' selector")
        return self

    @property
    def is_hourly(self) -> bool:
        return self.multiplier is None


class RulingCategoryOption(ImmutableModel):
    """A 30% ruling category and the matching external choice value."""

    id: str
    label_key: str
    choice: str


class EngineSettings(ImmutableModel):
    """Where the paycheck engine lives and how long it may take."""

    path: str
    package: str = "dutch-tax-income-calculator"
    node_binary: str = "node"
    working_directory: str | None = None
    timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("path")
    @classmethod
    def _require_attribute(cls, value: str) -> str:
        module, _, attribute = value.partition(":")
        if not module or not attribute:
            raise ConfigurationError("Engine path must use the 'module:attribute' form")
        return value


class FormDefaults(ImmutableModel):
    """Values the UI uses for an empty calculator form."""

    gross_income: float | str = ""
    period: str = "yearly"
    hours_per_week: float = 40
    holiday_allowance_included: bool = True
    older: bool = False
    ruling30_enabled: bool = False
    ruling30_category: str = "other"
    social_security: bool = True


class Box1Configuration(ImmutableModel):
    """Structured representation of ``box1.yaml``."""

    meta: Mapping[str, Any] = Field(default_factory=dict)
    weeks_per_year: int = 52
    periods: Sequence[PeriodOption]
    fallback_period: str = "yearly"
    ruling_categories: Sequence[RulingCategoryOption]
    fallback_ruling_category: str = "other"
    form_defaults: FormDefaults = Field(default_factory=FormDefaults)
    engine: EngineSettings

    @field_validator("periods", "ruling_categories", mode="before")
    @classmethod
    def _coerce_sequence(cls, value: Any) -> Any:
        if value is None:
            return ()
        return value

    @model_validator(mode="after")
    def _validate_tables(self) -> Box1Configuration:
        if self.weeks_per_year <= 0:
            raise ConfigurationError("'weeks_per_year' must be a positive integer")
        if not self.periods:
            raise ConfigurationError("At least one income period must be configured")
        if not self.ruling_categories:
            raise ConfigurationError("At least one ruling category must be configured")
        if self.fallback_period not in {period.id for period in self.periods}:
            raise ConfigurationError(
                f"Fallback period '{self.fallback_period}' is not a configured period"
            )
        if self.fallback_ruling_category not in {
            category.id for category in self.ruling_categories
        }:
            raise ConfigurationError(
                "Fallback ruling category "
                f"'{self.fallback_ruling_category}' is not a configured category"
            )
        return self

    def find_period(self, period_id: str | None) -> PeriodOption | None:
        for period in self.periods:
            if period.id == period_id:
                return period
        return None

    def find_ruling_category(self, category_id: str | None) -> RulingCategoryOption | None:
        for category in self.ruling_categories:
            if category.id == category_id:
                return category
        return None

    @property
    def default_period(self) -> PeriodOption:
        period = self.find_period(self.fallback_period)
        assert period is not None  # guaranteed by _validate_tables
        return period

    @property
    def default_ruling_category(self) -> RulingCategoryOption:
        category = self.find_ruling_category(self.fallback_ruling_category)
        assert category is not None  # guaranteed by _validate_tables
        return category


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    status: str = "active"
    notes_url: str | None = None


class TaxYearManifest(ImmutableModel):
    """Manifest describing the tax years the paycheck engine supports."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "Box1Configuration",
    "ConfigurationError",
    "EngineSettings",
    "FormDefaults",
    "ImmutableModel",
    "PeriodOption",
    "RulingCategoryOption",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
]
