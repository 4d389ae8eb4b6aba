"""Tests for the localisation catalogue helpers."""

from __future__ import annotations

import json
from pathlib import Path

from dutchtax.backend.app.localization import get_translator, load_translations, normalise_locale

TRANSLATIONS_ROOT = Path(__file__).resolve().parents[2] / "src" / "dutchtax" / "translations"


def _read_backend_value(locale: str, key: str) -> str:
    payload = json.loads(TRANSLATIONS_ROOT.joinpath(f"{locale}.json").read_text(encoding="utf-8"))
    return str(payload["backend"][key])


def test_catalogues_share_backend_keys() -> None:
    en = json.loads(TRANSLATIONS_ROOT.joinpath("en.json").read_text(encoding="utf-8"))
    nl = json.loads(TRANSLATIONS_ROOT.joinpath("nl.json").read_text(encoding="utf-8"))

    assert set(en["backend"]) == set(nl["backend"])


def test_get_translator_loads_shared_catalogue() -> None:
    translator = get_translator("nl")

    expected = _read_backend_value("nl", "breakdown.payroll_tax")
    assert translator("breakdown.payroll_tax") == expected


def test_get_translator_falls_back_to_default_locale() -> None:
    translator = get_translator("fr")

    assert translator.locale == "en"
    assert translator("breakdown.net_annual_income") == "Net annual income"


def test_unknown_keys_fall_back_to_the_key() -> None:
    translator = get_translator("nl")

    assert translator("breakdown.unknown") == "breakdown.unknown"
    assert translator.option_label("period.fortnightly") == "period.fortnightly"


def test_option_labels_resolve_nested_frontend_keys() -> None:
    assert get_translator("en").option_label("period.monthly") == "Monthly"
    assert get_translator("nl").option_label("ruling30.other") == "Overig"


def test_normalise_locale_handles_regions_and_blanks() -> None:
    assert normalise_locale("nl-NL") == "nl"
    assert normalise_locale("NL_be") == "nl"
    assert normalise_locale("") == "en"
    assert normalise_locale(None) == "en"
    assert normalise_locale("de") == "en"


def test_load_translations_exposes_catalogue_payload() -> None:
    payload = load_translations("nl")

    assert payload["locale"] == "nl"
    assert set(payload["available_locales"]) >= {"en", "nl"}
    assert payload["backend"]["breakdown.income_tax"] == _read_backend_value(
        "nl", "breakdown.income_tax"
    )
    assert payload["frontend"]["calculator"]["heading"] == "Inkomstenbelasting box 1"
    assert payload["fallback"]["locale"] == "en"
