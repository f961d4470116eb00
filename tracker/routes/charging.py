"""
Charging routes for EVC Track.

Handles charging session CRUD, the active-session lifecycle and the
charging summary. Every handler works against the store selected for the
current request, so guest and signed-in users hit the same code.
"""

import logging

from flask import Blueprint, jsonify, request

from extensions import RateLimits, limiter
from services import analytics_service, charging_service
from services.app_state import get_state
from utils.validation import ensure_payload, parse_bool, validate_session
from utils.wide_events import track_operation

logger = logging.getLogger(__name__)

charging_bp = Blueprint("charging", __name__)


@charging_bp.route("/charging/history", methods=["GET"])
@limiter.limit(RateLimits.READ_HEAVY)
def get_charging_history():
    """Get charging session history, newest first."""
    state = get_state()
    return jsonify(state.store.list_sessions())


@charging_bp.route("/charging/add", methods=["POST"])
@limiter.limit(RateLimits.WRITE_MODERATE)
def add_charging_session():
    """
    Manually add a charging session.

    Request body:
        start_percent: Battery % before charging (required)
        end_percent: Battery % after charging
        cost: Total cost
        kwh: Energy added (derived from the percents when omitted)
        charged_at: ISO datetime (defaults to now)
        charge_type: fast, standard, level1, level2, chademo, ccs, tesla, type2
        odometer: Odometer reading
        currency: JPY, USD, EUR or GBP (defaults to the profile currency)
        is_home_charge: Derive cost from the home rate
    """
    state = get_state()
    data = request.get_json(silent=True)
    fields = validate_session(data)
    is_home_charge = parse_bool(data.get("is_home_charge"))

    with track_operation("charging_add", mode=state.mode, trace_id=state.identity) as event:
        session = charging_service.add_session(state.store, fields, is_home_charge=is_home_charge)
        event.add_context(charging_session_id=session["id"])
        event.add_business_metric("kwh", session.get("kwh"))

    return jsonify(session), 201


@charging_bp.route("/charging/start", methods=["POST"])
@limiter.limit(RateLimits.WRITE_MODERATE)
def start_charging_session():
    """
    Start an active session.

    Request body:
        start_percent: Battery % at plug-in (required)
        charge_type, odometer, currency, charged_at: optional
    """
    state = get_state()
    fields = validate_session(request.get_json(silent=True))

    with track_operation("charging_start", mode=state.mode, trace_id=state.identity) as event:
        session = charging_service.start_session(state.store, fields)
        event.add_context(charging_session_id=session["id"])
        event.add_business_metric("session_started", True)

    return jsonify(session), 201


@charging_bp.route("/charging/active", methods=["GET"])
def get_active_charging_session():
    """Get the active session with its elapsed time (HH:MM:SS)."""
    state = get_state()
    active = charging_service.get_active_session(state.store)
    if active is None:
        return jsonify({"active": False, "session": None, "elapsed": None})
    return jsonify({"active": True, **active})


@charging_bp.route("/charging/<session_id>/complete", methods=["POST"])
@limiter.limit(RateLimits.WRITE_MODERATE)
def complete_charging_session(session_id):
    """
    Complete an active session.

    Request body:
        end_percent: Battery % at unplug (required)
        cost, kwh, odometer: optional
        is_home_charge: Derive cost from the home rate
    """
    state = get_state()
    data = ensure_payload(request.get_json(silent=True))
    fields = validate_session(data, partial=True)
    is_home_charge = parse_bool(data.get("is_home_charge"))

    with track_operation(
        "charging_complete", mode=state.mode, trace_id=state.identity, charging_session_id=session_id
    ) as event:
        session = charging_service.complete_session(state.store, session_id, fields, is_home_charge=is_home_charge)
        event.add_business_metric("session_completed", True)
        event.add_business_metric("kwh", session.get("kwh"))

    return jsonify(session)


@charging_bp.route("/charging/<session_id>", methods=["GET"])
def get_charging_session(session_id):
    """Get details of a specific charging session."""
    state = get_state()
    return jsonify(state.store.get_session(session_id))


@charging_bp.route("/charging/<session_id>", methods=["PATCH"])
@limiter.limit(RateLimits.WRITE_MODERATE)
def update_charging_session(session_id):
    """Update a charging session. Only the fields sent are changed."""
    state = get_state()
    data = request.get_json(silent=True)
    fields = validate_session(data, partial=True)
    is_home_charge = parse_bool(data.get("is_home_charge"))

    with track_operation("charging_edit", mode=state.mode, trace_id=state.identity, charging_session_id=session_id):
        session = charging_service.edit_session(state.store, session_id, fields, is_home_charge=is_home_charge)

    return jsonify(session)


@charging_bp.route("/charging/<session_id>", methods=["DELETE"])
@limiter.limit(RateLimits.WRITE_MODERATE)
def delete_charging_session(session_id):
    """Delete a charging session."""
    state = get_state()

    with track_operation(
        "charging_delete", mode=state.mode, trace_id=state.identity, charging_session_id=session_id
    ) as event:
        charging_service.delete_session(state.store, session_id)
        event.add_business_metric("record_deleted", True)

    return jsonify({"message": f"Charging session {session_id} deleted successfully"})


@charging_bp.route("/charging/summary", methods=["GET"])
@limiter.limit(RateLimits.READ_HEAVY)
def get_charging_summary():
    """Get charging statistics summary."""
    state = get_state()
    return jsonify(analytics_service.summary(state.store))
