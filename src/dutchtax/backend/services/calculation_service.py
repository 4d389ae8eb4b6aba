"""Shape paycheck engine output into a display-ready Box 1 summary.

The calculation service maps form values onto the paycheck engine's
vocabulary, reads the named figures back and assembles the ordered breakdown
shown by the UI. Failures inside the engine never propagate: they are logged
and turned into an empty summary carrying an ``error`` message.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from contextlib import contextmanager
from functools import lru_cache
from numbers import Real
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from dutchtax.backend.app.localization import Translator, get_translator, normalise_locale
from dutchtax.backend.app.models import (
    Box1Details,
    BreakdownRow,
    CalculationInputs,
    CalculationRequest,
    CalculationResponse,
    ResponseMeta,
    TaxSummary,
    format_validation_error,
)
from dutchtax.backend.config.box1_config import (
    Box1Configuration,
    PeriodOption,
    RulingCategoryOption,
    default_year,
    ensure_supported_year,
    load_box1_configuration,
)

from .income import annualise_income, resolve_period
from .paycheck import (
    PAYCHECK_FIGURES,
    PaycheckEngine,
    PaycheckParameters,
    RulingSelection,
    SalaryInput,
    load_engine,
)

_LOGGER = logging.getLogger(__name__)

_PROFILE_ENV = "DUTCHTAX_PROFILE_CALCULATIONS"
_CACHE_SIZE_ENV = "DUTCHTAX_SUMMARY_CACHE_SIZE"
_DEFAULT_CACHE_SIZE = 128


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv(_PROFILE_ENV, "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _cache_size() -> int:
    raw = os.getenv(_CACHE_SIZE_ENV, "").strip()
    if not raw:
        return _DEFAULT_CACHE_SIZE
    try:
        size = int(raw)
    except ValueError:
        _LOGGER.warning("Ignoring non-integer %s=%r", _CACHE_SIZE_ENV, raw)
        return _DEFAULT_CACHE_SIZE
    return max(size, 0)


def read_figure(result: Any, name: str) -> float:
    """Return figure ``name`` from ``result``, or ``0.0`` when it is unusable."""

    if isinstance(result, Mapping):
        value = result.get(name)
    else:
        value = getattr(result, name, None)

    if isinstance(value, bool) or not isinstance(value, Real):
        return 0.0
    number = float(value)
    return number if math.isfinite(number) else 0.0


def build_breakdown(
    details: Box1Details, *, social_security: bool, translator: Translator
) -> tuple[BreakdownRow, ...]:
    """Return the ordered display rows for ``details``."""

    def row(key: str, amount: float) -> BreakdownRow:
        return BreakdownRow(key=key, description=translator(f"breakdown.{key}"), amount=amount)

    rows = [row("gross_annual_income", details.gross_year)]
    if details.gross_allowance > 0:
        rows.append(row("holiday_allowance", details.gross_allowance))
    if details.tax_free > 0:
        rows.append(row("ruling30_tax_free", details.tax_free))
    rows.append(row("taxable_income", details.taxable_year))
    rows.append(row("payroll_tax", details.payroll_tax))
    if social_security:
        rows.append(row("social_security", details.social_tax))
    rows.append(row("general_credit", details.general_credit))
    rows.append(row("labour_credit", details.labour_credit))
    rows.append(row("income_tax", details.income_tax))
    rows.append(row("net_annual_income", details.net_year))
    return tuple(rows)


class Box1Calculator:
    """Memoised facade over a :class:`PaycheckEngine`.

    Summaries are cached on value equality of ``(inputs, year, locale)``, so
    recomputation only happens when one of them changes. Failed calculations
    are never cached: the next identical request asks the engine again.
    """

    def __init__(
        self,
        engine: PaycheckEngine,
        configuration: Box1Configuration | None = None,
        *,
        cache_size: int = _DEFAULT_CACHE_SIZE,
    ) -> None:
        self.engine = engine
        self.configuration = configuration or load_box1_configuration()
        self._cached_summary = lru_cache(maxsize=cache_size)(self._summarise)

    def summarise(
        self, inputs: CalculationInputs, year: int, locale: str | None = None
    ) -> TaxSummary:
        """Return the Box 1 summary for ``inputs`` in tax ``year``.

        Any exception raised while calculating is logged and returned as the
        empty summary carrying an ``error`` message.
        """

        locale = normalise_locale(locale)
        try:
            return self._cached_summary(inputs, year, locale)
        except Exception as exc:  # noqa: BLE001 - every failure becomes an error summary
            _LOGGER.exception("Box 1 calculation failed for year %s", year)
            message = str(exc) or get_translator(locale)("errors.calculation_failed")
            return TaxSummary.empty(error=message)

    def cache_clear(self) -> None:
        self._cached_summary.cache_clear()

    def cache_info(self):
        return self._cached_summary.cache_info()

    def resolve_ruling_category(self, category: str | None) -> RulingCategoryOption:
        option = self.configuration.find_ruling_category(category)
        if option is None:
            fallback = self.configuration.default_ruling_category
            _LOGGER.warning(
                "Unknown 30%% ruling category %r; falling back to %r", category, fallback.id
            )
            return fallback
        return option

    def build_parameters(
        self,
        inputs: CalculationInputs,
        year: int,
        period: PeriodOption | None = None,
    ) -> PaycheckParameters:
        """Translate form values into the paycheck engine's arguments."""

        if period is None:
            period = resolve_period(inputs.period, self.configuration)
        ruling = self.resolve_ruling_category(inputs.ruling30_category)

        return PaycheckParameters(
            salary=SalaryInput(
                income=float(inputs.gross_income),
                # A gross figure that includes holiday allowance tells the
                # engine to split the allowance out again.
                allowance=inputs.holiday_allowance_included,
                social_security=inputs.social_security,
                older=inputs.older,
                hours=inputs.hours_per_week,
            ),
            start_from=period.start_from,
            year=year,
            ruling=RulingSelection(checked=inputs.ruling30_enabled, choice=ruling.choice),
        )

    def _read_details(
        self, inputs: CalculationInputs, result: Any, period: PeriodOption
    ) -> Box1Details:
        figures = {
            field: read_figure(result, engine_name)
            for field, engine_name in PAYCHECK_FIGURES.items()
        }
        return Box1Details(
            input_income=float(inputs.gross_income),
            input_period=inputs.period,
            yearly_input_income=annualise_income(
                inputs.gross_income,
                period,
                inputs.hours_per_week,
                self.configuration.weeks_per_year,
            ),
            **figures,
        )

    def _summarise(self, inputs: CalculationInputs, year: int, locale: str) -> TaxSummary:
        # Raises on failure so that lru_cache keeps only successful summaries.
        if not inputs.gross_income or inputs.gross_income <= 0:
            return TaxSummary.empty()

        timings: dict[str, float] | None = {} if _profiling_enabled() else None

        with _profile_section("parameters", timings):
            period = resolve_period(inputs.period, self.configuration)
            parameters = self.build_parameters(inputs, year, period)
        with _profile_section("engine", timings):
            result = self.engine.calculate(parameters)
        with _profile_section("shape", timings):
            details = self._read_details(inputs, result, period)
            breakdown = build_breakdown(
                details,
                social_security=inputs.social_security,
                translator=get_translator(locale),
            )

        if timings is not None:
            _LOGGER.debug(
                "Box 1 summary timings (ms): %s",
                {name: round(duration * 1000, 3) for name, duration in timings.items()},
            )

        return TaxSummary(
            taxable_base=details.taxable_year,
            estimated_tax=abs(details.income_tax),
            net_income=details.net_year,
            breakdown=breakdown,
            details=details,
        )


@lru_cache(maxsize=1)
def get_default_calculator() -> Box1Calculator:
    """Return the process-wide calculator built from ``box1.yaml``."""

    configuration = load_box1_configuration()
    engine = load_engine(configuration.engine)
    _LOGGER.info("Using paycheck engine %s", type(engine).__name__)
    return Box1Calculator(engine, configuration, cache_size=_cache_size())


def _validate_request(payload: Mapping[str, Any] | CalculationRequest) -> CalculationRequest:
    if isinstance(payload, CalculationRequest):
        return payload
    if not isinstance(payload, Mapping):
        raise ValueError("Payload must be a mapping")
    try:
        return CalculationRequest.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def calculate_box1(
    payload: Mapping[str, Any] | CalculationRequest,
    calculator: Box1Calculator | None = None,
) -> dict[str, Any]:
    """Compute the Box 1 summary for ``payload`` and return the response body.

    Invalid payloads and unsupported years raise ``ValueError``; engine
    failures are reported through ``summary.error`` instead.
    """

    request_model = _validate_request(payload)

    year = request_model.year
    if year is None:
        year = default_year()
        if year is None:
            raise ValueError("No supported tax years are configured")
    ensure_supported_year(year)

    locale = normalise_locale(request_model.locale)
    active = calculator or get_default_calculator()
    summary = active.summarise(request_model.to_inputs(), year, locale)

    response_model = CalculationResponse(
        summary=summary,
        meta=ResponseMeta(year=year, locale=locale),
    )
    return response_model.model_dump(mode="json")


__all__ = [
    "Box1Calculator",
    "build_breakdown",
    "calculate_box1",
    "get_default_calculator",
    "read_figure",
]
