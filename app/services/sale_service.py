"""
Sale repository.

Sales are stored as one JSON array. A sale snapshots item name, price and
cost at the time it is recorded; it never references a catalog item by id,
and no referential integrity with events is enforced here.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from app.services.storage_service import STORAGE_KEYS, StorageService
from app.utils.time_utils import to_utc_z, utcnow

logger = logging.getLogger(__name__)

# event_id is fixed once the sale exists
SALE_UPDATABLE_FIELDS = ('item_name', 'quantity', 'sale_price', 'cost_per_item')


def get_all_sales(storage: StorageService) -> List[Dict[str, Any]]:
    return storage.get_json(STORAGE_KEYS['SALES']) or []


def _save_sales(storage: StorageService, sales: List[Dict[str, Any]]) -> None:
    storage.set_json(STORAGE_KEYS['SALES'], sales)


def get_sales_by_event_id(storage: StorageService, event_id: str) -> List[Dict[str, Any]]:
    """Get sales for specific event."""
    return [sale for sale in get_all_sales(storage) if sale['event_id'] == event_id]


def get_sale_by_id(storage: StorageService, sale_id: str) -> Optional[Dict[str, Any]]:
    for sale in get_all_sales(storage):
        if sale['id'] == sale_id:
            return sale
    return None


def create_sale(storage: StorageService, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Record a sale.

    Args:
        storage: Storage service
        data: event_id, item_name, quantity, sale_price, cost_per_item
              (prices are per unit)

    Returns:
        dict: The stored sale
    """
    sales = get_all_sales(storage)
    now = to_utc_z(utcnow())

    sale = {
        'id': str(uuid.uuid4()),
        'event_id': data['event_id'],
        'item_name': data['item_name'],
        'quantity': data['quantity'],
        'sale_price': data['sale_price'],
        'cost_per_item': data['cost_per_item'],
        'created_at': now,
        'updated_at': now,
    }

    sales.append(sale)
    _save_sales(storage, sales)

    logger.debug(f"Recorded sale {sale['id']} for event {sale['event_id']}")
    return sale


def quick_create_sale(
    storage: StorageService,
    event_id: str,
    item_name: str,
    sale_price: float,
    cost_per_item: float,
    quantity: int = 1
) -> Dict[str, Any]:
    """Quick create sale (1-tap entry from a catalog item)."""
    return create_sale(storage, {
        'event_id': event_id,
        'item_name': item_name,
        'quantity': quantity,
        'sale_price': sale_price,
        'cost_per_item': cost_per_item,
    })


def update_sale(storage: StorageService, sale_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Merge partial changes into a sale; None if the id does not exist."""
    sales = get_all_sales(storage)

    for index, sale in enumerate(sales):
        if sale['id'] != sale_id:
            continue

        updated = dict(sale)
        for field in SALE_UPDATABLE_FIELDS:
            if field in changes:
                updated[field] = changes[field]
        updated['updated_at'] = to_utc_z(utcnow())

        sales[index] = updated
        _save_sales(storage, sales)
        return updated

    return None


def delete_sale(storage: StorageService, sale_id: str) -> bool:
    sales = get_all_sales(storage)
    remaining = [sale for sale in sales if sale['id'] != sale_id]

    if len(remaining) == len(sales):
        return False

    _save_sales(storage, remaining)
    return True


def delete_all_sales_for_event(storage: StorageService, event_id: str) -> int:
    """
    Delete all sales for an event.

    Returns:
        int: Number of sales removed
    """
    sales = get_all_sales(storage)
    remaining = [sale for sale in sales if sale['event_id'] != event_id]
    deleted_count = len(sales) - len(remaining)

    _save_sales(storage, remaining)
    return deleted_count


def get_sales_count_for_event(storage: StorageService, event_id: str) -> int:
    """Number of sale records (transactions, not units) for an event."""
    return len(get_sales_by_event_id(storage, event_id))
