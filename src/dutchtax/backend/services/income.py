"""Annualise user-entered income amounts."""

from __future__ import annotations

import logging

from dutchtax.backend.config.box1_config import (
    Box1Configuration,
    PeriodOption,
    load_box1_configuration,
)

_LOGGER = logging.getLogger(__name__)


def resolve_period(period: str | None, configuration: Box1Configuration) -> PeriodOption:
    """Return the configured period for ``period``, or the fallback period."""

    option = configuration.find_period(period)
    if option is None:
        fallback = configuration.default_period
        _LOGGER.warning(
            "Unknown income period %r; falling back to %r", period, fallback.id
        )
        return fallback
    return option


def annualise_income(
    income: float | None,
    option: PeriodOption,
    hours_per_week: float,
    weeks_per_year: int,
) -> float:
    """Scale ``income`` earned per ``option`` to a yearly amount."""

    if not income or income <= 0:
        return 0.0
    if option.is_hourly:
        return float(income) * float(hours_per_week) * weeks_per_year
    return float(income) * float(option.multiplier)


def convert_to_yearly_income(
    income: float | None,
    period: str | None,
    hours_per_week: float,
    configuration: Box1Configuration | None = None,
) -> float:
    """Convert ``income`` earned per ``period`` into an annual amount.

    Hourly income is multiplied by ``hours_per_week`` and the configured number
    of weeks per year; every other period uses its fixed multiplier. Missing
    or non-positive income yields ``0``.
    """

    if not income or income <= 0:
        return 0.0

    config = configuration or load_box1_configuration()
    return annualise_income(
        income, resolve_period(period, config), hours_per_week, config.weeks_per_year
    )


__all__ = ["annualise_income", "convert_to_yearly_income", "resolve_period"]
