"""
Export routes for EVC Track.

Handles CSV/JSON export of charging sessions and the full JSON backup.
"""

import logging

from flask import Blueprint, Response, jsonify, request

from extensions import RateLimits, limiter
from services import profile_service
from services.app_state import get_state
from utils.csv_export import export_filename, sessions_to_csv
from utils.time_utils import format_datetime_iso, utc_now
from utils.wide_events import track_operation

logger = logging.getLogger(__name__)

export_bp = Blueprint('export', __name__)


@export_bp.route('/export/sessions', methods=['GET'])
@limiter.limit(RateLimits.EXPENSIVE)
def export_sessions() -> Response:
    """
    Export charging sessions as CSV or JSON.

    Query params:
        format: 'csv' (default) or 'json'
    """
    state = get_state()
    export_format = request.args.get('format', 'csv').lower()

    with track_operation('export_sessions', mode=state.mode, trace_id=state.identity, format=export_format) as event:
        sessions = state.store.list_sessions()
        event.add_business_metric('records_exported', len(sessions))

        if export_format == 'json':
            return jsonify(sessions)

        currency = profile_service.preferred_currency(state.store)
        content = sessions_to_csv(sessions, currency)

    return Response(
        content,
        mimetype='text/csv',
        headers={'Content-Disposition': f'attachment; filename={export_filename()}'}
    )


@export_bp.route('/export/all', methods=['GET'])
@limiter.limit(RateLimits.EXPENSIVE)
def export_all():
    """
    Export all data as JSON for backup.

    Returns sessions, expenses, the profile and record counts.
    """
    state = get_state()

    sessions = state.store.list_sessions()
    expenses = state.store.list_expenses()

    logger.info(f"Exported {state.mode} backup: {len(sessions)} sessions, {len(expenses)} expenses")
    return jsonify({
        'export_date': format_datetime_iso(utc_now()),
        'mode': state.mode,
        'profile': profile_service.get_settings(state.store),
        'charging_sessions': sessions,
        'vehicle_expenses': expenses,
        'counts': {
            'charging_sessions': len(sessions),
            'vehicle_expenses': len(expenses),
        },
    })
