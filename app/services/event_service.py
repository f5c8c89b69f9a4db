"""
Event repository.

Events live as a single JSON array under the events storage key. Every
mutation is a full read-modify-write of that array. Misses are signalled by
returning None/False; nothing here raises for an unknown id.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from app.services.storage_service import STORAGE_KEYS, StorageService
from app.utils.time_utils import parse_event_date, to_utc_z, utcnow

logger = logging.getLogger(__name__)

EVENT_FIELDS = ('name', 'date', 'booth_fee', 'travel_cost', 'notes', 'product_ids')


def get_all_events(storage: StorageService) -> List[Dict[str, Any]]:
    """Get all events in insertion order."""
    return storage.get_json(STORAGE_KEYS['EVENTS']) or []


def _save_events(storage: StorageService, events: List[Dict[str, Any]]) -> None:
    storage.set_json(STORAGE_KEYS['EVENTS'], events)


def get_event_by_id(storage: StorageService, event_id: str) -> Optional[Dict[str, Any]]:
    """Get single event by ID."""
    for event in get_all_events(storage):
        if event['id'] == event_id:
            return event
    return None


def create_event(storage: StorageService, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a new event.

    Args:
        storage: Storage service
        data: name, date, booth_fee, travel_cost, optional notes and product_ids

    Returns:
        dict: The stored event
    """
    events = get_all_events(storage)
    now = to_utc_z(utcnow())

    event = {
        'id': str(uuid.uuid4()),
        'name': data['name'],
        'date': data['date'],
        'booth_fee': data['booth_fee'],
        'travel_cost': data['travel_cost'],
        'notes': data.get('notes') or '',
        'created_at': now,
        'updated_at': now,
    }
    if data.get('product_ids') is not None:
        event['product_ids'] = list(data['product_ids'])

    events.append(event)
    _save_events(storage, events)

    # First event unlocks the paywall check
    if len(events) == 1:
        storage.set_boolean(STORAGE_KEYS['FIRST_EVENT_CREATED'], True)

    logger.info(f"Created event {event['id']} ({event['name']})")
    return event


def update_event(storage: StorageService, event_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Merge partial changes into an event.

    Returns:
        dict: Updated event, or None if the id does not exist
    """
    events = get_all_events(storage)

    for index, event in enumerate(events):
        if event['id'] != event_id:
            continue

        updated = dict(event)
        for field in EVENT_FIELDS:
            if field in changes:
                updated[field] = changes[field]
        updated['updated_at'] = to_utc_z(utcnow())

        events[index] = updated
        _save_events(storage, events)
        return updated

    return None


def delete_event(storage: StorageService, event_id: str) -> bool:
    """Delete an event. Sales are NOT removed; see delete_event_with_sales."""
    events = get_all_events(storage)
    remaining = [event for event in events if event['id'] != event_id]

    if len(remaining) == len(events):
        return False

    _save_events(storage, remaining)
    return True


def delete_event_with_sales(storage: StorageService, event_id: str) -> Tuple[bool, int]:
    """
    Delete an event and every sale recorded for it.

    Returns:
        tuple: (event_deleted, sales_removed)
    """
    from app.services.sale_service import delete_all_sales_for_event

    deleted = delete_event(storage, event_id)
    if not deleted:
        return False, 0

    removed = delete_all_sales_for_event(storage, event_id)
    logger.info(f"Deleted event {event_id} with {removed} sales")
    return True, removed


def get_events_count(storage: StorageService) -> int:
    return len(get_all_events(storage))


def has_created_first_event(storage: StorageService) -> bool:
    """Check if the first event was ever created (survives deleting it)."""
    return storage.get_boolean(STORAGE_KEYS['FIRST_EVENT_CREATED']) or False


def _date_sort_key(event: Dict[str, Any]) -> datetime:
    parsed = parse_event_date(event.get('date'))
    return parsed or datetime.min.replace(tzinfo=timezone.utc)


def get_events_sorted_by_date(storage: StorageService) -> List[Dict[str, Any]]:
    """Get events sorted by date (newest first). Unparsable dates sort last."""
    return sorted(get_all_events(storage), key=_date_sort_key, reverse=True)
