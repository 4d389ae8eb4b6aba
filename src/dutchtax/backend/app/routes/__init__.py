"""Blueprint registrations for application routes."""

from flask import Blueprint, Flask, jsonify

from .calculations import blueprint as calculations_blueprint
from .config import blueprint as config_blueprint
from .config import get_configuration_metadata
from .localization import blueprint as translations_blueprint

health_blueprint = Blueprint("health", __name__)


@health_blueprint.get("/health")
def health_check():
    """Report liveness together with the configured tax years."""

    return jsonify({"status": "ok", **get_configuration_metadata()})


BLUEPRINTS = (
    health_blueprint,
    calculations_blueprint,
    config_blueprint,
    translations_blueprint,
)


def register_routes(app: Flask) -> None:
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
