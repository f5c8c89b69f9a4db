"""
Statistics service.

Pure aggregations over already-loaded event and sale lists. Nothing here
touches storage; callers load the data and pass snapshots in. Every function
returns freshly built dicts/lists.

Tie-breaking follows insertion order: when two candidates are equal the one
seen first wins ("first strictly greater" replacement rule).
"""
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from app.utils.time_utils import parse_iso_datetime, utcnow

REVENUE_SERIES_DAYS = 7
EVENT_NAME_MAX_LENGTH = 12


def calculate_sale_revenue(sale: Dict[str, Any]) -> float:
    return sale['quantity'] * sale['sale_price']


def calculate_sale_cost(sale: Dict[str, Any]) -> float:
    return sale['quantity'] * sale['cost_per_item']


def calculate_sale_profit(sale: Dict[str, Any]) -> float:
    return calculate_sale_revenue(sale) - calculate_sale_cost(sale)


def calculate_sale_profit_margin(sale: Dict[str, Any]) -> float:
    """Profit as a percentage of revenue; 0 for a zero-revenue sale."""
    revenue = calculate_sale_revenue(sale)
    if revenue == 0:
        return 0
    return calculate_sale_profit(sale) / revenue * 100


def _group_by_item(sales: List[Dict[str, Any]]) -> Dict[str, Dict[str, float]]:
    # dicts keep insertion order, which drives tie-breaking
    grouped: Dict[str, Dict[str, float]] = {}
    for sale in sales:
        entry = grouped.setdefault(sale['item_name'], {'quantity': 0, 'revenue': 0})
        entry['quantity'] += sale['quantity']
        entry['revenue'] += calculate_sale_revenue(sale)
    return grouped


def find_best_selling_item(sales: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Item with the highest summed quantity, or None without sales."""
    best_item = None
    max_quantity = 0

    for item_name, data in _group_by_item(sales).items():
        if data['quantity'] > max_quantity:
            max_quantity = data['quantity']
            best_item = {
                'item_name': item_name,
                'quantity': data['quantity'],
                'revenue': data['revenue'],
            }

    return best_item


def calculate_event_stats(event: Dict[str, Any], sales: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Calculate statistics for a single event.

    Args:
        event: Event dict (booth_fee and travel_cost are the fixed expenses)
        sales: Sales already filtered to this event

    Returns:
        dict with keys:
            - total_revenue: sum of quantity * sale_price
            - total_cost_of_goods: sum of quantity * cost_per_item
            - total_expenses: booth_fee + travel_cost
            - gross_profit: revenue - cost of goods
            - net_profit: gross_profit - expenses
            - profit_margin: net_profit as % of revenue (0 without revenue)
            - best_selling_item: {item_name, quantity, revenue} or None
            - sales_count: total units sold
    """
    total_revenue = sum(calculate_sale_revenue(sale) for sale in sales)
    total_cost_of_goods = sum(calculate_sale_cost(sale) for sale in sales)
    total_expenses = event['booth_fee'] + event['travel_cost']

    gross_profit = total_revenue - total_cost_of_goods
    net_profit = gross_profit - total_expenses

    profit_margin = (net_profit / total_revenue) * 100 if total_revenue > 0 else 0

    return {
        'total_revenue': total_revenue,
        'total_cost_of_goods': total_cost_of_goods,
        'total_expenses': total_expenses,
        'gross_profit': gross_profit,
        'net_profit': net_profit,
        'profit_margin': profit_margin,
        'best_selling_item': find_best_selling_item(sales),
        'sales_count': sum(sale['quantity'] for sale in sales),
    }


def calculate_global_stats(events: List[Dict[str, Any]], all_sales: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Calculate statistics across all events.

    Sales whose event_id matches no event are ignored.
    """
    total_revenue = 0
    total_profit = 0
    most_profitable_event = None
    max_profit = -math.inf

    for event in events:
        event_sales = [sale for sale in all_sales if sale['event_id'] == event['id']]
        stats = calculate_event_stats(event, event_sales)

        total_revenue += stats['total_revenue']
        total_profit += stats['net_profit']

        if stats['net_profit'] > max_profit:
            max_profit = stats['net_profit']
            most_profitable_event = {
                'event_id': event['id'],
                'event_name': event['name'],
                'profit': stats['net_profit'],
            }

    total_events = len(events)
    average_profit_per_event = total_profit / total_events if total_events > 0 else 0

    return {
        'total_revenue': total_revenue,
        'total_profit': total_profit,
        'total_events': total_events,
        'average_profit_per_event': average_profit_per_event,
        'most_profitable_event': most_profitable_event,
    }


def get_revenue_over_time(
    sales: List[Dict[str, Any]],
    period_days: int = REVENUE_SERIES_DAYS,
    now: Optional[datetime] = None
) -> Dict[str, List]:
    """
    Daily revenue series for charts.

    period_days only limits which sales are considered; the emitted series
    always covers the last 7 days ending today. Days are matched on local
    month/day, so with a window longer than a year the same calendar day of
    different years lands in the same bucket.

    Returns:
        dict: {'labels': ['M/D', ...], 'data': [revenue, ...]} oldest first
    """
    now = now or utcnow()
    local_now = now.astimezone()
    try:
        cutoff = now - timedelta(days=period_days)
    except OverflowError:
        # window reaches past datetime.min, keep every sale
        cutoff = datetime.min.replace(tzinfo=timezone.utc)

    revenue_by_day: Dict[tuple, float] = {}
    for sale in sales:
        created_at = parse_iso_datetime(sale['created_at'])
        if created_at is None or created_at < cutoff:
            continue
        local = created_at.astimezone()
        day_key = (local.month, local.day)
        revenue_by_day[day_key] = revenue_by_day.get(day_key, 0) + calculate_sale_revenue(sale)

    labels = []
    data = []
    for offset in range(REVENUE_SERIES_DAYS - 1, -1, -1):
        day = local_now - timedelta(days=offset)
        labels.append(f"{day.month}/{day.day}")
        data.append(revenue_by_day.get((day.month, day.day), 0))

    return {'labels': labels, 'data': data}


def get_top_selling_products(sales: List[Dict[str, Any]], limit: int = 5) -> List[Dict[str, Any]]:
    """Items ranked by total quantity sold (descending), truncated to limit."""
    products = [
        {'name': name, 'quantity': data['quantity'], 'revenue': data['revenue']}
        for name, data in _group_by_item(sales).items()
    ]
    products.sort(key=lambda product: product['quantity'], reverse=True)
    return products[:limit]


def truncate_event_name(name: str, max_length: int = EVENT_NAME_MAX_LENGTH) -> str:
    if len(name) > max_length:
        return name[:max_length] + '...'
    return name


def get_profit_by_event(events: List[Dict[str, Any]], all_sales: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Net profit and revenue per event, in event order, names shortened for charts."""
    result = []
    for event in events:
        event_sales = [sale for sale in all_sales if sale['event_id'] == event['id']]
        stats = calculate_event_stats(event, event_sales)
        result.append({
            'name': truncate_event_name(event['name']),
            'profit': stats['net_profit'],
            'revenue': stats['total_revenue'],
        })
    return result
