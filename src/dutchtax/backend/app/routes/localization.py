"""Serve the translation catalogues used by the calculator form."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from dutchtax.backend.app.localization import load_translations
from dutchtax.backend.app.localization.negotiation import request_locale

blueprint = Blueprint("translations", __name__, url_prefix="/api/v1/translations")


@blueprint.get("/", defaults={"locale": None})
@blueprint.get("/<locale>")
def get_translations(locale: str | None) -> tuple[Any, int]:
    """Return a catalogue with its English fallback.

    Without a path segment the locale comes from ``?locale=`` or the
    ``Accept-Language`` header; unknown locales resolve to English.
    """

    return jsonify(load_translations(request_locale(locale))), 200
