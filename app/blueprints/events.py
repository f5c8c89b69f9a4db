"""
Events blueprint.
CRUD for vendor events plus per-event stats, sales and available products.
"""

from flask import Blueprint, jsonify, request

from app.exceptions import NotFoundError
from app.middleware import require_event_slot
from app.services.event_service import (
    create_event, delete_event_with_sales, get_event_by_id,
    get_events_sorted_by_date, update_event
)
from app.services.product_service import get_items_for_event
from app.services.sale_service import get_sales_by_event_id
from app.services.stats_service import calculate_event_stats
from app.services.storage_service import get_storage
from app.utils.validators import (
    clean_text, parse_amount, parse_date, parse_id_list, require_json
)

events_bp = Blueprint('events', __name__, url_prefix='/events')


def _load_event(storage, event_id):
    event = get_event_by_id(storage, event_id)
    if event is None:
        raise NotFoundError(f'Event {event_id} not found')
    return event


@events_bp.route('', methods=['GET'])
def list_events():
    """List events, newest date first."""
    events = get_events_sorted_by_date(get_storage())
    return jsonify({'events': events, 'count': len(events)})


@events_bp.route('', methods=['POST'])
@require_event_slot
def create():
    """Create an event (free tier allows one)."""
    payload = require_json(request.get_json(silent=True))

    data = {
        'name': clean_text(payload, 'name'),
        'date': parse_date(payload, 'date'),
        'booth_fee': parse_amount(payload, 'booth_fee', default=0.0),
        'travel_cost': parse_amount(payload, 'travel_cost', default=0.0),
        'notes': clean_text(payload, 'notes', required=False) or '',
        'product_ids': parse_id_list(payload, 'product_ids'),
    }

    event = create_event(get_storage(), data)
    return jsonify({'event': event}), 201


@events_bp.route('/<event_id>', methods=['GET'])
def detail(event_id):
    """Event with its sales and stats."""
    storage = get_storage()
    event = _load_event(storage, event_id)
    sales = get_sales_by_event_id(storage, event_id)

    return jsonify({
        'event': event,
        'sales': sales,
        'stats': calculate_event_stats(event, sales),
    })


@events_bp.route('/<event_id>', methods=['PATCH', 'PUT'])
def update(event_id):
    payload = require_json(request.get_json(silent=True))

    changes = {}
    if 'name' in payload:
        changes['name'] = clean_text(payload, 'name')
    if 'date' in payload:
        changes['date'] = parse_date(payload, 'date')
    if 'booth_fee' in payload:
        changes['booth_fee'] = parse_amount(payload, 'booth_fee')
    if 'travel_cost' in payload:
        changes['travel_cost'] = parse_amount(payload, 'travel_cost')
    if 'notes' in payload:
        changes['notes'] = clean_text(payload, 'notes', required=False) or ''
    if 'product_ids' in payload:
        changes['product_ids'] = parse_id_list(payload, 'product_ids') or []

    event = update_event(get_storage(), event_id, changes)
    if event is None:
        raise NotFoundError(f'Event {event_id} not found')
    return jsonify({'event': event})


@events_bp.route('/<event_id>', methods=['DELETE'])
def delete(event_id):
    """Delete an event and cascade to its sales."""
    deleted, sales_removed = delete_event_with_sales(get_storage(), event_id)
    if not deleted:
        raise NotFoundError(f'Event {event_id} not found')
    return jsonify({'status': 'deleted', 'sales_removed': sales_removed})


@events_bp.route('/<event_id>/sales', methods=['GET'])
def event_sales(event_id):
    storage = get_storage()
    _load_event(storage, event_id)
    return jsonify({'sales': get_sales_by_event_id(storage, event_id)})


@events_bp.route('/<event_id>/products', methods=['GET'])
def event_products(event_id):
    """Catalog items available for quick sale at this event."""
    storage = get_storage()
    event = _load_event(storage, event_id)
    return jsonify({'products': get_items_for_event(storage, event)})
