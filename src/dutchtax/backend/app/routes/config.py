"""Expose configuration metadata consumed by the calculator front-end.

The form's period and 30% ruling dropdowns, its empty state and the list of
selectable tax years all come from the YAML configuration, so the UI does not
need its own copy of those tables.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify, request

from dutchtax.backend.app.localization import get_translator
from dutchtax.backend.config.box1_config import (
    load_box1_configuration,
    load_manifest,
)
from dutchtax.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    supported_years = list(manifest.supported_years)
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return all configured years with their manifest status."""

    manifest = load_manifest()
    metadata = get_configuration_metadata()
    years = [
        entry.model_dump(mode="json", exclude_none=True)
        for entry in sorted(manifest.years, key=lambda item: item.year)
    ]
    payload = {
        "years": years,
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
    }
    return jsonify(payload), 200


@blueprint.get("/options")
def get_form_options() -> tuple[Any, int]:
    """Return localised dropdown options and the empty form state."""

    translator = get_translator(request.args.get("locale"))
    configuration = load_box1_configuration()
    metadata = get_configuration_metadata()

    periods = [
        {
            "id": period.id,
            "label": translator.option_label(period.label_key),
            "multiplier": period.multiplier,
            "requires_hours": period.is_hourly,
        }
        for period in configuration.periods
    ]
    ruling_categories = [
        {"id": category.id, "label": translator.option_label(category.label_key)}
        for category in configuration.ruling_categories
    ]

    payload = {
        "locale": translator.locale,
        "periods": periods,
        "ruling30_categories": ruling_categories,
        "form_defaults": configuration.form_defaults.model_dump(mode="json"),
        "weeks_per_year": configuration.weeks_per_year,
        "supported_years": metadata["supported_years"],
        "default_year": metadata["default_year"],
    }
    return jsonify(payload), 200
