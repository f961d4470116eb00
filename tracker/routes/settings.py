"""
Settings and vehicle catalogue routes for EVC Track.

Settings are the owner's profile: battery capacity, home electricity rate
and preferred currency.
"""

import logging

from flask import Blueprint, jsonify, request

from extensions import RateLimits, cache, limiter
from services import profile_service
from services.app_state import get_state
from services.vehicle_catalog import EV_DATABASE, grouped_by_make
from utils.validation import validate_profile
from utils.wide_events import track_operation

logger = logging.getLogger(__name__)

settings_bp = Blueprint("settings", __name__)


@settings_bp.route("/settings", methods=["GET"])
def get_settings():
    """Get the effective settings (defaults when nothing is saved)."""
    state = get_state()
    return jsonify({"mode": state.mode, **profile_service.get_settings(state.store)})


@settings_bp.route("/settings", methods=["PUT"])
@limiter.limit(RateLimits.WRITE_MODERATE)
def save_settings():
    """
    Save settings.

    Request body (all optional, empty values clear a setting):
        battery_capacity: Usable battery capacity in kWh (> 0)
        home_rate: Home electricity cost per kWh (>= 0)
        currency: JPY, USD, EUR or GBP
    """
    state = get_state()
    fields = validate_profile(request.get_json(silent=True))

    with track_operation("profile_save", mode=state.mode, trace_id=state.identity) as event:
        settings = profile_service.save_settings(state.store, fields)
        event.add_business_metric("profile_saved", True)

    return jsonify({"mode": state.mode, **settings})


@settings_bp.route("/vehicles", methods=["GET"])
@cache.cached()
def get_vehicles():
    """EV catalogue, flat and grouped by make."""
    makes = [{"make": make, "models": models} for make, models in grouped_by_make().items()]
    return jsonify({"models": EV_DATABASE, "makes": makes})
