"""
EVC Track - Flask Application

JSON API for a personal EV charging and vehicle expense tracker. Guests keep
their data in local storage; signed-in users (identity from the auth proxy)
keep it in the remote store.
"""

import logging
from typing import Optional

from flask import Flask, jsonify

import database
from calculations.constants import SUPPORTED_CURRENCIES
from config import Config
from exceptions import ConfigurationError, EVCTrackError
from extensions import init_cache, limiter
from routes import register_blueprints
from services.app_state import LOCAL_STORAGE_KEY, build_state
from services.local_storage import LocalStorage
from utils.error_codes import StructuredError
from utils.wide_events import configure_logging

logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(EVCTrackError)
    def handle_app_error(error: EVCTrackError):
        structured_error = StructuredError(error.error_code, error.message, exception=error, **error.details)
        if error.status_code >= 500:
            logger.error(str(structured_error), extra={"structured_error": structured_error.to_dict()})
        else:
            logger.info(str(structured_error))
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(429)
    def handle_rate_limited(error):
        return jsonify({"error": "Rate limit exceeded", "details": {"limit": str(error.description)}}), 429


def check_config(config) -> None:
    """Fail fast on settings the app cannot start without."""
    for key in ("DATABASE_URL", "LOCAL_STORAGE_PATH", "AUTH_USER_HEADER"):
        if not config.get(key):
            raise ConfigurationError(f"{key} must be set", config_key=key)
    if config.get("DEFAULT_CURRENCY") not in SUPPORTED_CURRENCIES:
        raise ConfigurationError(
            f"DEFAULT_CURRENCY must be one of: {', '.join(SUPPORTED_CURRENCIES)}",
            config_key="DEFAULT_CURRENCY",
        )


def create_app(config_overrides: Optional[dict] = None) -> Flask:
    """
    Build the application.

    Args:
        config_overrides: Values applied on top of ``Config`` (tests use this
            for an in-memory database and a temporary local storage file)
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)
    check_config(app.config)

    logging.basicConfig(
        level=getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    configure_logging()

    database.init_app(app)
    app.extensions[LOCAL_STORAGE_KEY] = LocalStorage(app.config["LOCAL_STORAGE_PATH"])

    limiter.init_app(app)
    init_cache(app)

    @app.before_request
    def load_state():
        build_state()

    register_error_handlers(app)
    register_blueprints(app)

    logger.info(f"EVC Track ready (local storage: {app.config['LOCAL_STORAGE_PATH']})")
    return app


if __name__ == '__main__':
    application = create_app()
    application.run(
        host=Config.FLASK_HOST,
        port=Config.FLASK_PORT,
        debug=Config.DEBUG
    )
