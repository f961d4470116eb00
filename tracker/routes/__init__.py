"""
Routes module for EVC Track Flask blueprints.

This module contains Flask blueprints that handle different areas of the API.
"""

from routes.analytics import analytics_bp
from routes.charging import charging_bp
from routes.dashboard import dashboard_bp
from routes.expenses import expenses_bp
from routes.export import export_bp
from routes.settings import settings_bp

__all__ = [
    "dashboard_bp",
    "charging_bp",
    "expenses_bp",
    "settings_bp",
    "analytics_bp",
    "export_bp",
]


def register_blueprints(app):
    """Register all blueprints with the Flask app."""
    app.register_blueprint(dashboard_bp, url_prefix="/api")
    app.register_blueprint(charging_bp, url_prefix="/api")
    app.register_blueprint(expenses_bp, url_prefix="/api")
    app.register_blueprint(settings_bp, url_prefix="/api")
    app.register_blueprint(analytics_bp, url_prefix="/api")
    app.register_blueprint(export_bp, url_prefix="/api")
