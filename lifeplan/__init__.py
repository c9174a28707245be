"""Life Plan Simulator Flask Application Factory."""

import logging
from typing import Optional

from flask import Flask

from lifeplan.config import get_global_settings


def configure_logging(level: str) -> None:
    """Set the root log level and a plain one-line format."""
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    logging.getLogger().setLevel(level)


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_name: Configuration name (development, testing, production);
            overrides APP_ENV when given

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configuration from Pydantic Settings
    settings = get_global_settings()
    app_env = config_name or settings.app_env
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["ENV"] = settings.flask_env
    app.config["DEBUG"] = app_env == "development"
    app.config["TESTING"] = app_env == "testing"
    app.config["MAX_HORIZON_YEARS"] = settings.max_horizon_years
    app.config["CSV_INCLUDE_BOM"] = settings.csv_include_bom
    app.json.ensure_ascii = False

    configure_logging(settings.log_level)

    # Register blueprints
    from lifeplan.blueprints.health import health_bp
    from lifeplan.blueprints.projections import projections_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(projections_bp)

    return app
