"""REST endpoint for Box 1 tax estimates."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Blueprint, jsonify, request
from werkzeug.exceptions import BadRequest

from dutchtax.backend.app.localization.negotiation import request_locale
from dutchtax.backend.services.calculation_service import calculate_box1

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1")


@blueprint.post("/calculations")
def create_calculation() -> tuple[Any, int]:
    """Estimate Box 1 tax for the submitted form values.

    The response is 200 whenever the form values are valid, including when
    the paycheck engine fails; that failure is carried in ``summary.error``.
    """

    body = request.get_json(silent=True)
    if body is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(body, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = {**body, "locale": request_locale(body.get("locale"))}
    return jsonify(calculate_box1(payload)), 200
