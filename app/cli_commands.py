"""
Flask CLI commands for local maintenance.

Commands:
- flask init-storage: Create the storage tables
- flask stats: Print global statistics
- flask start-trial: Start the free trial
- flask reset-data: Erase all stored data
"""

import click
from flask import current_app

from app import database


def init_cli_commands(app):
    """Register CLI commands with Flask app."""

    @app.cli.command('init-storage')
    def init_storage_command():
        """Create the key-value table if it does not exist."""
        database.Base.metadata.create_all(database.engine)
        click.echo(click.style('✅ Storage tables ready', fg='green'))

    @app.cli.command('stats')
    def stats_command():
        """Print totals across all events."""
        from app.services.event_service import get_all_events
        from app.services.sale_service import get_all_sales
        from app.services.stats_service import calculate_global_stats
        from app.services.storage_service import get_storage
        from app.utils.formatters import (
            format_compact_currency, format_currency_with_sign, format_percentage
        )

        storage = get_storage()
        stats = calculate_global_stats(get_all_events(storage), get_all_sales(storage))

        click.echo(click.style('\nVendStats summary', bold=True))
        click.echo(f"   Events:          {stats['total_events']}")
        click.echo(f"   Revenue:         {format_compact_currency(stats['total_revenue'])}")
        click.echo(f"   Net profit:      {format_currency_with_sign(stats['total_profit'])}")
        if stats['total_revenue'] > 0:
            margin = stats['total_profit'] / stats['total_revenue'] * 100
            click.echo(f"   Margin:          {format_percentage(margin)}")
        click.echo(f"   Avg per event:   {format_currency_with_sign(stats['average_profit_per_event'])}")

        best = stats['most_profitable_event']
        if best:
            click.echo(f"   Best event:      {best['event_name']} ({format_currency_with_sign(best['profit'])})")

    @app.cli.command('start-trial')
    @click.option('--days', type=int, default=None, help='Trial length in days')
    def start_trial_command(days):
        """Start (or restart) the free trial."""
        from app.services.storage_service import get_storage
        from app.services.subscription_service import start_free_trial

        storage = get_storage()
        state = start_free_trial(storage, trial_days=days or current_app.config.get('TRIAL_DURATION_DAYS', 7))
        storage.flush()
        click.echo(click.style(f"✅ Trial active until {state['trial_end_date']}", fg='green'))

    @app.cli.command('reset-data')
    @click.confirmation_option(prompt='This erases every event, sale and setting. Continue?')
    def reset_data_command():
        """Erase all stored data."""
        from app.services.settings_service import reset_all_data
        from app.services.storage_service import get_storage

        storage = get_storage()
        reset_all_data(storage)
        storage.flush()
        click.echo(click.style('✅ All data erased', fg='yellow'))
