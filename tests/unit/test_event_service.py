"""
Unit tests for the event repository.
"""

from app.services.event_service import (
    create_event, delete_event, delete_event_with_sales, get_all_events,
    get_event_by_id, get_events_count, get_events_sorted_by_date,
    has_created_first_event, update_event
)
from app.services.sale_service import create_sale, get_all_sales
from app.services.storage_service import STORAGE_KEYS


def _event(storage, name, date='2024-06-01', **extra):
    data = {'name': name, 'date': date, 'booth_fee': 10.0, 'travel_cost': 5.0}
    data.update(extra)
    return create_event(storage, data)


class TestCreateEvent:
    """Tests for create_event."""

    def test_create_event_fills_generated_fields(self, storage):
        """Test that id, timestamps and notes default are filled in."""
        event = _event(storage, 'Farmers Market')

        assert event['id']
        assert event['notes'] == ''
        assert event['created_at'] == event['updated_at']
        assert event['created_at'].endswith('Z')
        assert 'product_ids' not in event

    def test_created_event_roundtrips(self, storage):
        event = _event(storage, 'Farmers Market', notes='Corner spot')
        assert get_event_by_id(storage, event['id']) == event

    def test_product_ids_are_kept(self, storage):
        event = _event(storage, 'Farmers Market', product_ids=['p1', 'p2'])
        assert get_event_by_id(storage, event['id'])['product_ids'] == ['p1', 'p2']

    def test_first_event_sets_flag(self, storage):
        """Test that the first event flag survives deleting the event."""
        assert has_created_first_event(storage) is False

        event = _event(storage, 'Farmers Market')
        delete_event(storage, event['id'])

        assert has_created_first_event(storage) is True
        assert storage.get_boolean(STORAGE_KEYS['FIRST_EVENT_CREATED']) is True

    def test_events_are_stored_in_insertion_order(self, storage):
        first = _event(storage, 'One')
        second = _event(storage, 'Two')

        assert [e['id'] for e in get_all_events(storage)] == [first['id'], second['id']]
        assert get_events_count(storage) == 2

    def test_get_all_events_is_idempotent(self, storage):
        _event(storage, 'One')
        assert get_all_events(storage) == get_all_events(storage)


class TestUpdateEvent:
    """Tests for update_event."""

    def test_update_merges_fields(self, storage):
        event = _event(storage, 'Old Name')

        updated = update_event(storage, event['id'], {'name': 'New Name', 'booth_fee': 99.0})

        assert updated['name'] == 'New Name'
        assert updated['booth_fee'] == 99.0
        assert updated['travel_cost'] == event['travel_cost']
        assert updated['created_at'] == event['created_at']
        assert get_event_by_id(storage, event['id']) == updated

    def test_update_ignores_generated_fields(self, storage):
        event = _event(storage, 'Name')
        updated = update_event(storage, event['id'], {'id': 'hijack', 'created_at': 'x'})

        assert updated['id'] == event['id']
        assert updated['created_at'] == event['created_at']

    def test_update_unknown_id_returns_none(self, storage):
        assert update_event(storage, 'missing', {'name': 'x'}) is None


class TestDeleteEvent:
    """Tests for delete_event and the cascading variant."""

    def test_delete_unknown_id_leaves_collection(self, storage):
        _event(storage, 'Keep')
        before = get_all_events(storage)

        assert delete_event(storage, 'missing') is False
        assert get_all_events(storage) == before

    def test_delete_event_keeps_sales(self, storage, market_event, market_sales):
        assert delete_event(storage, market_event['id']) is True
        assert len(get_all_sales(storage)) == 2

    def test_delete_event_with_sales_cascades(self, storage, market_event, market_sales):
        """Test that only the deleted event's sales are removed."""
        other = _event(storage, 'Other')
        create_sale(storage, {
            'event_id': other['id'], 'item_name': 'Mug',
            'quantity': 1, 'sale_price': 12.0, 'cost_per_item': 4.0,
        })

        deleted, removed = delete_event_with_sales(storage, market_event['id'])

        assert deleted is True
        assert removed == 2
        assert [s['event_id'] for s in get_all_sales(storage)] == [other['id']]

    def test_delete_event_with_sales_unknown_id(self, storage):
        assert delete_event_with_sales(storage, 'missing') == (False, 0)


class TestSortedEvents:
    """Tests for get_events_sorted_by_date."""

    def test_newest_first(self, storage):
        _event(storage, 'Old', date='2024-01-10')
        _event(storage, 'New', date='2024-05-02')
        _event(storage, 'Mid', date='2024-03-15')

        names = [e['name'] for e in get_events_sorted_by_date(storage)]

        assert names == ['New', 'Mid', 'Old']

    def test_unparsable_dates_sort_last(self, storage):
        _event(storage, 'Broken', date='someday')
        _event(storage, 'Real', date='2024-03-15')

        names = [e['name'] for e in get_events_sorted_by_date(storage)]

        assert names == ['Real', 'Broken']
