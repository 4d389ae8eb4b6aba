"""Utilities for validating calculator configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from collections import Counter
from typing import Iterable, Sequence

from .box1_config import (
    Box1Configuration,
    ConfigurationError,
    FormDefaults,
    PeriodOption,
    RulingCategoryOption,
    TaxYearManifest,
    load_box1_configuration,
    load_manifest,
)

# ``startFrom`` values understood by the paycheck engine.
KNOWN_START_FROM = frozenset({"Year", "Month", "Week", "Day", "Hour"})
KNOWN_RULING_CHOICES = frozenset({"normal", "young", "research"})


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _duplicates(values: Iterable[str]) -> list[str]:
    return sorted(value for value, count in Counter(values).items() if count > 1)


def _validate_periods(periods: Sequence[PeriodOption]) -> list[str]:
    errors: list[str] = []

    duplicates = _duplicates(period.id for period in periods)
    if duplicates:
        errors.append(_format_scope("periods", f"duplicate period ids detected: {duplicates}"))

    hourly = [period.id for period in periods if period.is_hourly]
    if len(hourly) > 1:
        errors.append(
            _format_scope(
                "periods",
                f"only one period may omit its multiplier, found {sorted(hourly)}",
            )
        )

    for period in periods:
        if period.start_from not in KNOWN_START_FROM:
            errors.append(
                _format_scope(
                    f"periods.{period.id}",
                    f"unknown start_from selector '{period.start_from}'",
                )
            )

    return errors


def _validate_ruling_categories(categories: Sequence[RulingCategoryOption]) -> list[str]:
    errors: list[str] = []

    duplicates = _duplicates(category.id for category in categories)
    if duplicates:
        errors.append(
            _format_scope("ruling_categories", f"duplicate category ids detected: {duplicates}")
        )

    for category in categories:
        if category.choice not in KNOWN_RULING_CHOICES:
            errors.append(
                _format_scope(
                    f"ruling_categories.{category.id}",
                    f"unknown ruling choice '{category.choice}'",
                )
            )

    return errors


def _validate_form_defaults(config: Box1Configuration, defaults: FormDefaults) -> list[str]:
    errors: list[str] = []

    if config.find_period(defaults.period) is None:
        errors.append(
            _format_scope("form_defaults", f"period '{defaults.period}' is not configured")
        )
    if config.find_ruling_category(defaults.ruling30_category) is None:
        errors.append(
            _format_scope(
                "form_defaults",
                f"ruling category '{defaults.ruling30_category}' is not configured",
            )
        )
    if defaults.hours_per_week < 0:
        errors.append(_format_scope("form_defaults", "hours_per_week cannot be negative"))

    return errors


def _validate_manifest(manifest: TaxYearManifest) -> list[str]:
    if not manifest.years:
        return [_format_scope("manifest", "no supported tax years declared")]

    errors: list[str] = []
    for entry in manifest.years:
        if entry.year < 2019:
            errors.append(
                _format_scope(
                    f"manifest.{entry.year}",
                    "the paycheck engine has no data before 2019",
                )
            )
    return errors


def validate_box1_configuration(config: Box1Configuration) -> list[str]:
    """Return human-readable validation issues for ``config``."""

    errors: list[str] = []
    errors.extend(_validate_periods(config.periods))
    errors.extend(_validate_ruling_categories(config.ruling_categories))
    errors.extend(_validate_form_defaults(config, config.form_defaults))
    return errors


def validate_all() -> list[str]:
    """Validate the manifest and the Box 1 tables together."""

    errors = _validate_manifest(load_manifest())
    errors.extend(validate_box1_configuration(load_box1_configuration()))
    return errors


def _build_argument_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        description=(
            "Validate the calculator configuration and report issues helpful to contributors."
        )
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    parser.parse_args(argv)

    try:
        issues = validate_all()
    except (ConfigurationError, FileNotFoundError) as error:
        print(f"failed to load configuration: {error}")
        return 1

    if issues:
        print(f"{len(issues)} issue(s) detected:")
        for issue in issues:
            print(f"  - {issue}")
        return 1

    supported = ", ".join(str(year) for year in load_manifest().supported_years)
    print(f"OK (years: {supported})")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
