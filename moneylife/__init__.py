"""MoneyLife Flask Application Factory."""

import logging
from typing import Optional

from flask import Flask

from moneylife.config import get_global_settings


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_name: Configuration name (development, testing, production)

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configuration from Pydantic Settings
    settings = get_global_settings()
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["APP_ENV"] = config_name or settings.app_env
    app.config["DEBUG"] = app.config["APP_ENV"] == "development"
    app.config["LEGAL_YEAR"] = settings.legal_year
    app.config["LEGAL_DATA_DIR"] = settings.legal_data_dir

    logging.basicConfig(level=settings.log_level)
    app.logger.setLevel(settings.log_level)

    # Register blueprints
    from moneylife.blueprints.health import health_bp
    from moneylife.blueprints.prestations import prestations_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(prestations_bp)

    return app
