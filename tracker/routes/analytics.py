"""
Analytics Routes - monthly and yearly totals, cost by charge type, cost
trend and the EV-vs-gasoline ROI estimate.

All totals are per currency; nothing is converted.
"""

import logging

from flask import Blueprint, jsonify, request

from extensions import RateLimits, limiter
from services import analytics_service
from services.app_state import get_state
from utils.validation import optional_number, parse_bool

logger = logging.getLogger(__name__)

analytics_bp = Blueprint("analytics", __name__)

MAX_TREND_MONTHS = 60


@analytics_bp.route("/analytics/monthly", methods=["GET"])
@limiter.limit(RateLimits.READ_HEAVY)
def get_monthly():
    """
    Monthly buckets, newest first.

    Query params:
        kind: 'charging' (default) or 'expenses'
        records: If true, include each month's records
    """
    state = get_state()
    kind = request.args.get("kind", "charging")
    include_records = parse_bool(request.args.get("records"))
    return jsonify(analytics_service.monthly(state.store, kind, include_records=include_records))


@analytics_bp.route("/analytics/yearly", methods=["GET"])
@limiter.limit(RateLimits.READ_HEAVY)
def get_yearly():
    """
    Per-currency totals for one calendar year.

    Query params:
        kind: 'charging' (default) or 'expenses'
        year: Calendar year (default: current year)
    """
    state = get_state()
    kind = request.args.get("kind", "charging")
    year = optional_number(request.args, "year", minimum=1970, maximum=9999)
    return jsonify(analytics_service.yearly(state.store, kind, int(year) if year else None))


@analytics_bp.route("/analytics/by-type", methods=["GET"])
@limiter.limit(RateLimits.READ_HEAVY)
def get_by_type():
    """Charging cost split between fast and standard charging, plus per-type detail."""
    state = get_state()
    return jsonify(analytics_service.by_type(state.store))


@analytics_bp.route("/analytics/trend", methods=["GET"])
@limiter.limit(RateLimits.READ_HEAVY)
def get_trend():
    """Last N months of charging cost, oldest first (months=6 by default)."""
    state = get_state()
    months = optional_number(request.args, "months", minimum=1, maximum=MAX_TREND_MONTHS)
    return jsonify(analytics_service.trend(state.store, int(months) if months else None))


@analytics_bp.route("/analytics/roi", methods=["GET"])
@limiter.limit(RateLimits.READ_HEAVY)
def get_roi():
    """
    Estimate annual savings against a gasoline vehicle.

    Query params:
        gas_price: Fuel price per unit (litre/gallon)
        gas_efficiency: Gas vehicle distance per fuel unit
        ev_efficiency: EV distance per kWh
        annual_distance: Distance driven per year

    ``estimate`` is null when any input is missing or zero, or when no
    recorded session carries a cost.
    """
    state = get_state()
    params = {
        name: optional_number(request.args, name, minimum=0)
        for name in ("gas_price", "gas_efficiency", "ev_efficiency", "annual_distance")
    }
    return jsonify(analytics_service.roi(state.store, **params))
