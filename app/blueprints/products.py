"""
Products blueprint.
Quick-sale catalog management and low stock alerts.
"""

from flask import Blueprint, jsonify, request

from app.exceptions import NotFoundError
from app.services.product_service import (
    add_quick_sale_item, delete_quick_sale_item, get_low_stock_items,
    get_quick_sale_item_by_id, get_quick_sale_items, update_quick_sale_item
)
from app.services.storage_service import get_storage
from app.utils.validators import (
    clean_text, parse_amount, parse_positive_int_arg, parse_stock_count, require_json
)

products_bp = Blueprint('products', __name__, url_prefix='/products')


@products_bp.route('', methods=['GET'])
def list_products():
    return jsonify({'products': get_quick_sale_items(get_storage())})


@products_bp.route('', methods=['POST'])
def create():
    payload = require_json(request.get_json(silent=True))

    item = add_quick_sale_item(get_storage(), {
        'item_name': clean_text(payload, 'item_name'),
        'default_price': parse_amount(payload, 'default_price'),
        'default_cost': parse_amount(payload, 'default_cost', default=0.0),
        'image_uri': clean_text(payload, 'image_uri', required=False) or None,
        'stock_count': parse_stock_count(payload),
    })
    return jsonify({'product': item}), 201


@products_bp.route('/low-stock', methods=['GET'])
def low_stock():
    """Items at or below the threshold (?threshold= overrides the setting)."""
    storage = get_storage()
    threshold = request.args.get('threshold')
    if threshold is not None:
        threshold = parse_positive_int_arg(threshold, 'threshold', 0)
    items = get_low_stock_items(storage, threshold)
    return jsonify({'products': items, 'count': len(items)})


@products_bp.route('/<product_id>', methods=['GET'])
def detail(product_id):
    item = get_quick_sale_item_by_id(get_storage(), product_id)
    if item is None:
        raise NotFoundError(f'Product {product_id} not found')
    return jsonify({'product': item})


@products_bp.route('/<product_id>', methods=['PATCH', 'PUT'])
def update(product_id):
    """Partial update; null clears image_uri or stock_count."""
    payload = require_json(request.get_json(silent=True))

    changes = {}
    if 'item_name' in payload:
        changes['item_name'] = clean_text(payload, 'item_name')
    if 'default_price' in payload:
        changes['default_price'] = parse_amount(payload, 'default_price')
    if 'default_cost' in payload:
        changes['default_cost'] = parse_amount(payload, 'default_cost')
    if 'image_uri' in payload:
        changes['image_uri'] = clean_text(payload, 'image_uri', required=False) or None
    if 'stock_count' in payload:
        changes['stock_count'] = parse_stock_count(payload)

    item = update_quick_sale_item(get_storage(), product_id, changes)
    if item is None:
        raise NotFoundError(f'Product {product_id} not found')
    return jsonify({'product': item})


@products_bp.route('/<product_id>', methods=['DELETE'])
def delete(product_id):
    if not delete_quick_sale_item(get_storage(), product_id):
        raise NotFoundError(f'Product {product_id} not found')
    return jsonify({'status': 'deleted'})
