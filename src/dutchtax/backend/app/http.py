"""JSON error bodies for every failure the API reports to clients.

Clients receive ``{"error": <code>, "status": <int>, "message": <text>}``.
Calculation failures inside the paycheck engine are not errors at this level:
they travel inside a normal 200 response as ``summary.error``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any

from flask import Flask, jsonify
from werkzeug.exceptions import BadRequest

from dutchtax.backend.config.schema import ConfigurationError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProblemResponse:
    """Machine-readable error ``code`` with the HTTP status it is sent with."""

    code: str
    status: HTTPStatus
    message: str

    def to_response(self) -> tuple[Any, int]:
        body = {"error": self.code, "status": int(self.status), "message": self.message}
        return jsonify(body), int(self.status)


def register_error_handlers(app: Flask) -> None:
    """Map request, validation and configuration failures onto problem bodies."""

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        message = error.description or "Invalid request"
        return ProblemResponse("bad_request", HTTPStatus.BAD_REQUEST, message).to_response()

    # Flask resolves handlers along the MRO, so this wins over ValueError.
    @app.errorhandler(ConfigurationError)
    def handle_configuration_error(error: ConfigurationError):
        _LOGGER.error("Configuration error: %s", error)
        return ProblemResponse(
            "configuration_error", HTTPStatus.INTERNAL_SERVER_ERROR, str(error)
        ).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        return ProblemResponse(
            "validation_error", HTTPStatus.BAD_REQUEST, str(error)
        ).to_response()


__all__ = ["ProblemResponse", "register_error_handlers"]
