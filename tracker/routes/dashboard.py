"""
Status routes for EVC Track.
"""

from flask import Blueprint, Response, current_app, jsonify

from database import EXTENSION_KEY
from services.app_state import get_state

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('/status', methods=['GET'])
def get_status() -> Response:
    """Get the storage mode for this request and which store serves it."""
    state = get_state()

    if state.is_authenticated:
        engine = current_app.extensions[EXTENSION_KEY]['engine']
        store = {'kind': 'remote', 'backend': engine.url.get_backend_name()}
    else:
        store = {'kind': 'local', 'path': current_app.config['LOCAL_STORAGE_PATH']}

    return jsonify({
        'status': 'online',
        'mode': state.mode,
        'authenticated': state.is_authenticated,
        'store': store,
    })
