"""
Sales blueprint.
Records sales against events, including 1-tap quick sales from the catalog.
"""

from flask import Blueprint, current_app, jsonify, request

from app.exceptions import NotFoundError
from app.services.event_service import get_event_by_id
from app.services.product_service import get_quick_sale_item_by_id
from app.services.review_service import track_event_completed_for_review
from app.services.sale_service import (
    create_sale, delete_sale, get_all_sales, get_sale_by_id, quick_create_sale, update_sale
)
from app.services.storage_service import get_storage
from app.utils.validators import clean_text, parse_amount, parse_quantity, require_json

sales_bp = Blueprint('sales', __name__, url_prefix='/sales')


def _require_event(storage, event_id):
    if not event_id or get_event_by_id(storage, event_id) is None:
        raise NotFoundError(f'Event {event_id} not found')


def _track_for_review(storage):
    """Count the recorded sale towards the store review prompt."""
    track_event_completed_for_review(
        storage,
        current_app.extensions['review_requester'],
        delay=current_app.config.get('REVIEW_REQUEST_DELAY_SECONDS', 2)
    )


@sales_bp.route('', methods=['GET'])
def list_sales():
    return jsonify({'sales': get_all_sales(get_storage())})


@sales_bp.route('', methods=['POST'])
def create():
    """Record a sale; prices are per unit."""
    payload = require_json(request.get_json(silent=True))
    storage = get_storage()

    event_id = clean_text(payload, 'event_id')
    _require_event(storage, event_id)

    sale = create_sale(storage, {
        'event_id': event_id,
        'item_name': clean_text(payload, 'item_name'),
        'quantity': parse_quantity(payload),
        'sale_price': parse_amount(payload, 'sale_price'),
        'cost_per_item': parse_amount(payload, 'cost_per_item', default=0.0),
    })
    _track_for_review(storage)

    return jsonify({'sale': sale}), 201


@sales_bp.route('/quick', methods=['POST'])
def quick_create():
    """
    Quick sale from a catalog item.

    The item's name, default price and default cost are copied onto the
    sale. Stock is not decremented.
    """
    payload = require_json(request.get_json(silent=True))
    storage = get_storage()

    event_id = clean_text(payload, 'event_id')
    _require_event(storage, event_id)

    product_id = clean_text(payload, 'product_id')
    item = get_quick_sale_item_by_id(storage, product_id)
    if item is None:
        raise NotFoundError(f'Product {product_id} not found')

    sale = quick_create_sale(
        storage,
        event_id,
        item['item_name'],
        item.get('default_price', 0),
        item.get('default_cost', 0),
        quantity=parse_quantity(payload, default=1)
    )
    _track_for_review(storage)

    return jsonify({'sale': sale}), 201


@sales_bp.route('/<sale_id>', methods=['GET'])
def detail(sale_id):
    sale = get_sale_by_id(get_storage(), sale_id)
    if sale is None:
        raise NotFoundError(f'Sale {sale_id} not found')
    return jsonify({'sale': sale})


@sales_bp.route('/<sale_id>', methods=['PATCH', 'PUT'])
def update(sale_id):
    payload = require_json(request.get_json(silent=True))

    changes = {}
    if 'item_name' in payload:
        changes['item_name'] = clean_text(payload, 'item_name')
    if 'quantity' in payload:
        changes['quantity'] = parse_quantity(payload)
    if 'sale_price' in payload:
        changes['sale_price'] = parse_amount(payload, 'sale_price')
    if 'cost_per_item' in payload:
        changes['cost_per_item'] = parse_amount(payload, 'cost_per_item')

    sale = update_sale(get_storage(), sale_id, changes)
    if sale is None:
        raise NotFoundError(f'Sale {sale_id} not found')
    return jsonify({'sale': sale})


@sales_bp.route('/<sale_id>', methods=['DELETE'])
def delete(sale_id):
    if not delete_sale(get_storage(), sale_id):
        raise NotFoundError(f'Sale {sale_id} not found')
    return jsonify({'status': 'deleted'})
