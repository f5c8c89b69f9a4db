"""
Stats blueprint.
Dashboard aggregates across all events and chart series.
"""

from flask import Blueprint, jsonify, request

from app.services.event_service import get_all_events
from app.services.sale_service import get_all_sales
from app.services.stats_service import (
    REVENUE_SERIES_DAYS, calculate_global_stats, get_profit_by_event,
    get_revenue_over_time, get_top_selling_products
)
from app.services.storage_service import get_storage
from app.utils.validators import parse_positive_int_arg

stats_bp = Blueprint('stats', __name__, url_prefix='/stats')


@stats_bp.route('', methods=['GET'])
def global_stats():
    storage = get_storage()
    return jsonify(calculate_global_stats(get_all_events(storage), get_all_sales(storage)))


@stats_bp.route('/revenue', methods=['GET'])
def revenue_over_time():
    """Daily revenue for the last 7 days (?period_days= filters the sales)."""
    period_days = parse_positive_int_arg(request.args.get('period_days'), 'period_days', REVENUE_SERIES_DAYS)
    return jsonify(get_revenue_over_time(get_all_sales(get_storage()), period_days))


@stats_bp.route('/top-products', methods=['GET'])
def top_products():
    limit = parse_positive_int_arg(request.args.get('limit'), 'limit', 5)
    return jsonify({'products': get_top_selling_products(get_all_sales(get_storage()), limit)})


@stats_bp.route('/profit-by-event', methods=['GET'])
def profit_by_event():
    storage = get_storage()
    return jsonify({'events': get_profit_by_event(get_all_events(storage), get_all_sales(storage))})
