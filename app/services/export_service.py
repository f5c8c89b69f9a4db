"""
CSV export of events and sales.
"""
import csv
import io

from app.services.event_service import get_all_events
from app.services.sale_service import get_all_sales
from app.services.stats_service import calculate_sale_profit, calculate_sale_revenue
from app.services.storage_service import StorageService

CSV_HEADER = [
    'Event Name', 'Event Date', 'Booth Fee', 'Travel Cost', 'Item Name',
    'Quantity', 'Sale Price', 'Cost Per Item', 'Revenue', 'Profit',
]


def _csv_number(value):
    """Whole amounts without the trailing .0 (50 rather than 50.0)."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def export_to_csv_data(storage: StorageService) -> str:
    """
    Export all events and sales to a CSV string.

    One row per sale; an event without sales still gets one row carrying
    only its expenses, with the sale columns left empty.
    """
    events = get_all_events(storage)
    sales = get_all_sales(storage)

    output = io.StringIO()
    writer = csv.writer(output, lineterminator='\n')
    writer.writerow(CSV_HEADER)

    for event in events:
        event_columns = [
            event['name'],
            event['date'],
            _csv_number(event['booth_fee']),
            _csv_number(event['travel_cost']),
        ]
        event_sales = [sale for sale in sales if sale['event_id'] == event['id']]

        if not event_sales:
            writer.writerow(event_columns + [''] * 6)
            continue

        for sale in event_sales:
            writer.writerow(event_columns + [
                sale['item_name'],
                _csv_number(sale['quantity']),
                _csv_number(sale['sale_price']),
                _csv_number(sale['cost_per_item']),
                _csv_number(calculate_sale_revenue(sale)),
                _csv_number(calculate_sale_profit(sale)),
            ])

    return output.getvalue()
