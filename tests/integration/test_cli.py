"""
Integration tests for the flask CLI commands.
"""

from app.services.event_service import create_event, get_all_events
from app.services.subscription_service import has_premium_access


class TestCliCommands:
    """Test maintenance commands through the Flask CLI runner."""

    def test_init_storage(self, app):
        result = app.test_cli_runner().invoke(args=['init-storage'])

        assert result.exit_code == 0
        assert 'Storage tables ready' in result.output

    def test_stats(self, app, app_storage):
        create_event(app_storage, {'name': 'Fair', 'date': '2024-06-01', 'booth_fee': 25.0, 'travel_cost': 0.0})

        result = app.test_cli_runner().invoke(args=['stats'])

        assert result.exit_code == 0
        assert 'Events:          1' in result.output
        assert '-$25.00' in result.output

    def test_start_trial(self, app, app_storage):
        result = app.test_cli_runner().invoke(args=['start-trial', '--days', '3'])

        assert result.exit_code == 0
        assert has_premium_access(app_storage) is True

    def test_reset_data(self, app, app_storage):
        create_event(app_storage, {'name': 'Fair', 'date': '2024-06-01', 'booth_fee': 0.0, 'travel_cost': 0.0})

        result = app.test_cli_runner().invoke(args=['reset-data', '--yes'])

        assert result.exit_code == 0
        assert get_all_events(app_storage) == []
