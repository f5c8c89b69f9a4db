"""
Subscription blueprint.
Trial management, paywall checks and in-app purchase sync.

The store SDK runs on the device; these endpoints receive what it reports
and keep the local subscription record in line with it.
"""

from flask import Blueprint, current_app, jsonify, request

from app.exceptions import ValidationError
from app.services.event_service import get_events_count, has_created_first_event
from app.services.purchase_service import (
    apply_customer_info, handle_purchase_result, handle_restore_result
)
from app.services.storage_service import get_storage
from app.services.subscription_service import (
    get_subscription_status, should_show_event_paywall, should_show_paywall, start_free_trial
)
from app.utils.validators import require_json

subscription_bp = Blueprint('subscription', __name__, url_prefix='/subscription')


def _entitlement_id():
    return current_app.config.get('PREMIUM_ENTITLEMENT_ID', 'pro')


def _active_entitlements(payload):
    entitlements = payload.get('active_entitlements', [])
    if not isinstance(entitlements, list):
        raise ValidationError('active_entitlements must be a list')
    return entitlements


@subscription_bp.route('', methods=['GET'])
def status():
    """Subscription state with trial countdown and feature flags."""
    return jsonify(get_subscription_status(get_storage()))


@subscription_bp.route('/trial', methods=['POST'])
def start_trial():
    storage = get_storage()
    start_free_trial(storage, trial_days=current_app.config.get('TRIAL_DURATION_DAYS', 7))
    return jsonify(get_subscription_status(storage)), 201


@subscription_bp.route('/paywall', methods=['GET'])
def paywall():
    """Whether the client should show the paywall screen."""
    storage = get_storage()
    max_free = current_app.config.get('FREE_TIER_MAX_EVENTS', 1)
    return jsonify({
        'show_paywall': should_show_paywall(storage, has_created_first_event(storage)),
        'show_event_paywall': should_show_event_paywall(
            storage, get_events_count(storage), max_free_events=max_free
        ),
    })


@subscription_bp.route('/customer-info', methods=['POST'])
def customer_info():
    """Sync with the store's customer info (active entitlements)."""
    payload = require_json(request.get_json(silent=True))
    state = apply_customer_info(get_storage(), _active_entitlements(payload), _entitlement_id())
    return jsonify({'state': state})


@subscription_bp.route('/purchase', methods=['POST'])
def purchase():
    """
    Apply a purchase outcome.

    A cancelled purchase sheet is not an error: it returns 200 with
    success false so the client can close the paywall quietly.
    """
    payload = require_json(request.get_json(silent=True))
    _active_entitlements(payload)
    result = handle_purchase_result(get_storage(), payload, _entitlement_id())
    return jsonify(result)


@subscription_bp.route('/restore', methods=['POST'])
def restore():
    payload = require_json(request.get_json(silent=True))
    result = handle_restore_result(get_storage(), _active_entitlements(payload), _entitlement_id())
    return jsonify(result)
