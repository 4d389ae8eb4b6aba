"""Application factory for the dutchtax backend."""

import os

from flask import Flask
from flask_cors import CORS

from .http import register_error_handlers

ALLOWED_ORIGINS_ENV = "DUTCHTAX_ALLOWED_ORIGINS"


def _parse_allowed_origins(raw: str | None) -> list[str]:
    """Split the comma separated allow-list, dropping blanks and duplicates."""

    if not raw:
        return []
    return sorted({origin.strip() for origin in raw.split(",") if origin.strip()})


def create_app() -> Flask:
    """Create and configure the Flask application instance."""

    # Routes import the service layer, which imports this package's models.
    from .routes import register_routes

    app = Flask(__name__)

    # An empty allow-list leaves every cross-origin request without headers.
    CORS(
        app,
        resources={r"/api/*": {"origins": _parse_allowed_origins(os.getenv(ALLOWED_ORIGINS_ENV))}},
        methods=["GET", "OPTIONS", "POST"],
        allow_headers=["Content-Type"],
        supports_credentials=False,
    )

    register_routes(app)
    register_error_handlers(app)
    return app
