"""
Settings blueprint.
App settings, onboarding flag, review prompt handshake, CSV export and
the full data reset.
"""

from flask import Blueprint, Response, current_app, jsonify, request

from app.exceptions import ValidationError
from app.middleware import require_premium
from app.services.export_service import export_to_csv_data
from app.services.settings_service import (
    get_app_settings, has_seen_onboarding, reset_all_data, reset_onboarding,
    set_onboarding_complete, update_app_settings
)
from app.services.storage_service import get_storage
from app.utils.validators import require_json

settings_bp = Blueprint('settings', __name__, url_prefix='/settings')


@settings_bp.route('', methods=['GET'])
def get_settings():
    return jsonify({'settings': get_app_settings(get_storage())})


@settings_bp.route('', methods=['PATCH', 'PUT'])
def update_settings():
    payload = require_json(request.get_json(silent=True))

    updates = {}
    if 'low_stock_threshold' in payload:
        value = payload['low_stock_threshold']
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValidationError('low_stock_threshold must be a non-negative whole number')
        updates['low_stock_threshold'] = value

    return jsonify({'settings': update_app_settings(get_storage(), updates)})


@settings_bp.route('/onboarding', methods=['GET'])
def onboarding():
    return jsonify({'has_seen_onboarding': has_seen_onboarding(get_storage())})


@settings_bp.route('/onboarding', methods=['POST'])
def complete_onboarding():
    storage = get_storage()
    set_onboarding_complete(storage)
    return jsonify({'has_seen_onboarding': has_seen_onboarding(storage)})


@settings_bp.route('/onboarding', methods=['DELETE'])
def clear_onboarding():
    storage = get_storage()
    reset_onboarding(storage)
    return jsonify({'has_seen_onboarding': has_seen_onboarding(storage)})


@settings_bp.route('/review-prompt', methods=['GET'])
def review_prompt():
    """Whether the client should show the native review sheet now."""
    requester = current_app.extensions['review_requester']
    return jsonify({'pending': requester.is_pending()})


@settings_bp.route('/review-prompt', methods=['DELETE'])
def acknowledge_review_prompt():
    requester = current_app.extensions['review_requester']
    requester.acknowledge()
    return jsonify({'pending': requester.is_pending()})


@settings_bp.route('/export.csv', methods=['GET'])
@require_premium('csv_export')
def export_csv():
    csv_data = export_to_csv_data(get_storage())
    return Response(
        csv_data,
        mimetype='text/csv',
        headers={'Content-Disposition': 'attachment; filename=vendstats_export.csv'}
    )


@settings_bp.route('/reset', methods=['POST'])
def reset_data():
    """Wipe every stored key. Requires {"confirm": true}."""
    payload = require_json(request.get_json(silent=True))
    if payload.get('confirm') is not True:
        raise ValidationError('Pass {"confirm": true} to erase all data')

    reset_all_data(get_storage())
    return jsonify({'status': 'reset'})
