"""
Unit tests for the sale repository.
"""

from app.services.sale_service import (
    create_sale, delete_all_sales_for_event, delete_sale, get_all_sales,
    get_sale_by_id, get_sales_by_event_id, get_sales_count_for_event,
    quick_create_sale, update_sale
)


class TestCreateSale:
    """Tests for create_sale and quick_create_sale."""

    def test_create_sale_snapshots_values(self, storage, market_event):
        sale = create_sale(storage, {
            'event_id': market_event['id'], 'item_name': 'Pin',
            'quantity': 4, 'sale_price': 3.0, 'cost_per_item': 1.0,
        })

        assert sale['id']
        assert sale['item_name'] == 'Pin'
        assert sale['created_at'] == sale['updated_at']
        assert get_sale_by_id(storage, sale['id']) == sale

    def test_quick_create_defaults_to_one_unit(self, storage, market_event):
        sale = quick_create_sale(storage, market_event['id'], 'Pin', 3.0, 1.0)

        assert sale['quantity'] == 1
        assert sale['sale_price'] == 3.0
        assert sale['cost_per_item'] == 1.0

    def test_sale_for_unknown_event_is_accepted(self, storage):
        """Test that the repository does not check the event exists."""
        sale = quick_create_sale(storage, 'ghost-event', 'Pin', 3.0, 1.0)
        assert get_sales_by_event_id(storage, 'ghost-event') == [sale]


class TestQuerySales:
    """Tests for sale lookups."""

    def test_sales_by_event(self, storage, market_event, market_sales):
        other = quick_create_sale(storage, 'other', 'Pin', 3.0, 1.0)

        assert get_sales_by_event_id(storage, market_event['id']) == market_sales
        assert get_sales_by_event_id(storage, 'other') == [other]
        assert get_sales_count_for_event(storage, market_event['id']) == 2

    def test_unknown_sale_is_none(self, storage):
        assert get_sale_by_id(storage, 'missing') is None


class TestUpdateSale:
    """Tests for update_sale."""

    def test_update_merges_fields(self, storage, market_sales):
        sale = market_sales[0]

        updated = update_sale(storage, sale['id'], {'quantity': 12, 'sale_price': 4.5})

        assert updated['quantity'] == 12
        assert updated['sale_price'] == 4.5
        assert updated['item_name'] == sale['item_name']

    def test_event_id_cannot_change(self, storage, market_sales):
        sale = market_sales[0]
        updated = update_sale(storage, sale['id'], {'event_id': 'elsewhere'})
        assert updated['event_id'] == sale['event_id']

    def test_update_unknown_id_returns_none(self, storage):
        assert update_sale(storage, 'missing', {'quantity': 2}) is None


class TestDeleteSale:
    """Tests for deleting sales."""

    def test_delete_sale(self, storage, market_sales):
        assert delete_sale(storage, market_sales[0]['id']) is True
        assert get_all_sales(storage) == [market_sales[1]]

    def test_delete_unknown_sale(self, storage, market_sales):
        assert delete_sale(storage, 'missing') is False
        assert len(get_all_sales(storage)) == 2

    def test_delete_all_sales_for_event(self, storage, market_event, market_sales):
        assert delete_all_sales_for_event(storage, market_event['id']) == 2
        assert delete_all_sales_for_event(storage, market_event['id']) == 0
        assert get_all_sales(storage) == []
