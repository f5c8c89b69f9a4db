"""
Quick-sale item (product catalog) repository.

Catalog items are templates for fast sale entry. Editing an item never
touches past sales, and recording a sale never changes stock_count: stock
is edited by hand only.
"""
import logging
import uuid
from typing import Any, Dict, List, Optional

from app.services.storage_service import STORAGE_KEYS, StorageService
from app.services.settings_service import get_low_stock_threshold

logger = logging.getLogger(__name__)

ITEM_FIELDS = ('item_name', 'default_price', 'default_cost', 'image_uri', 'stock_count')


def get_quick_sale_items(storage: StorageService) -> List[Dict[str, Any]]:
    return storage.get_json(STORAGE_KEYS['QUICK_ITEMS']) or []


def _save_items(storage: StorageService, items: List[Dict[str, Any]]) -> None:
    storage.set_json(STORAGE_KEYS['QUICK_ITEMS'], items)


def get_quick_sale_item_by_id(storage: StorageService, item_id: str) -> Optional[Dict[str, Any]]:
    for item in get_quick_sale_items(storage):
        if item['id'] == item_id:
            return item
    return None


def add_quick_sale_item(storage: StorageService, data: Dict[str, Any]) -> Dict[str, Any]:
    """Add a catalog item; image_uri and stock_count are optional."""
    items = get_quick_sale_items(storage)

    item = {'id': str(uuid.uuid4())}
    for field in ITEM_FIELDS:
        if field in data and data[field] is not None:
            item[field] = data[field]

    items.append(item)
    _save_items(storage, items)
    return item


def update_quick_sale_item(storage: StorageService, item_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Merge partial changes; a None value clears an optional field."""
    items = get_quick_sale_items(storage)

    for index, item in enumerate(items):
        if item['id'] != item_id:
            continue

        updated = dict(item)
        for field in ITEM_FIELDS:
            if field not in changes:
                continue
            if changes[field] is None:
                updated.pop(field, None)
            else:
                updated[field] = changes[field]

        items[index] = updated
        _save_items(storage, items)
        return updated

    return None


def delete_quick_sale_item(storage: StorageService, item_id: str) -> bool:
    items = get_quick_sale_items(storage)
    remaining = [item for item in items if item['id'] != item_id]

    if len(remaining) == len(items):
        return False

    _save_items(storage, remaining)
    return True


def get_low_stock_items(storage: StorageService, threshold: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Items with a tracked stock_count at or below the threshold.

    Args:
        storage: Storage service
        threshold: Defaults to the low_stock_threshold setting

    Returns:
        list: Items sorted by stock_count ascending (most critical first)
    """
    if threshold is None:
        threshold = get_low_stock_threshold(storage)

    low_stock = [
        item for item in get_quick_sale_items(storage)
        if item.get('stock_count') is not None and item['stock_count'] <= threshold
    ]
    return sorted(low_stock, key=lambda item: item['stock_count'])


def get_items_for_event(storage: StorageService, event: Dict[str, Any]) -> List[Dict[str, Any]]:
    """
    Catalog items brought to an event.

    An event without product_ids (or with an empty list) offers the whole
    catalog. Order follows the catalog, not product_ids.
    """
    items = get_quick_sale_items(storage)
    product_ids = event.get('product_ids')
    if not product_ids:
        return items

    wanted = set(product_ids)
    return [item for item in items if item['id'] in wanted]
