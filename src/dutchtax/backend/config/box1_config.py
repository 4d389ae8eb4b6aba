"""Configuration loader wrapping the shared schema models."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    Box1Configuration,
    ConfigurationError,
    EngineSettings,
    FormDefaults,
    PeriodOption,
    RulingCategoryOption,
    TaxYearManifest,
    TaxYearManifestEntry,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"
BOX1_FILE = CONFIG_DIRECTORY / "box1.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> TaxYearManifest:
    """Load and cache the configuration manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return TaxYearManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[TaxYearManifestEntry]:
    """Expose the configured manifest entries."""

    return load_manifest().years


@lru_cache(maxsize=1)
def load_box1_configuration() -> Box1Configuration:
    """Load the period, ruling and engine tables from ``box1.yaml``."""

    if not BOX1_FILE.exists():
        raise FileNotFoundError(f"Box 1 configuration missing: {BOX1_FILE.name}")

    raw_config = _load_yaml(BOX1_FILE)

    try:
        return Box1Configuration.model_validate(raw_config)
    except ValidationError as error:
        raise ConfigurationError(f"Box 1 configuration validation failed: {error}") from error


def available_years() -> Sequence[int]:
    """Return the tax years declared in the manifest."""

    return load_manifest().supported_years


def default_year() -> int | None:
    """Return the most recent supported year, if any are declared."""

    years = available_years()
    return years[-1] if years else None


def ensure_supported_year(year: int) -> int:
    """Return ``year`` unchanged or raise ``ValueError`` when it is unsupported."""

    try:
        load_manifest().get_entry(year)
    except KeyError as exc:
        supported = ", ".join(str(entry) for entry in available_years())
        raise ValueError(
            f"Tax year {year} is not supported (supported years: {supported})"
        ) from exc
    return year


__all__ = [
    "BOX1_FILE",
    "Box1Configuration",
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "EngineSettings",
    "FormDefaults",
    "MANIFEST_FILE",
    "PeriodOption",
    "RulingCategoryOption",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "available_years",
    "default_year",
    "ensure_supported_year",
    "load_box1_configuration",
    "load_manifest",
    "manifest_entries",
]
