"""
Unit tests for money and percentage formatting.
"""

import pytest

from app.utils.formatters import (
    format_compact_currency, format_currency, format_currency_with_sign,
    format_percentage, parse_currency
)


class TestFormatCurrency:
    """Tests for format_currency."""

    @pytest.mark.parametrize('value, expected', [
        (1500, '$1,500.00'),
        (-12.5, '-$12.50'),
        (0, '$0.00'),
        (0.005, '$0.01'),
        (None, '-'),
    ])
    def test_format_currency(self, value, expected):
        assert format_currency(value) == expected

    def test_without_cents(self):
        assert format_currency(1500.4, show_cents=False) == '$1,500'

    def test_other_currency(self):
        assert format_currency(10, currency='EUR') == '€10.00'

    def test_signed(self):
        assert format_currency_with_sign(20) == '+$20.00'
        assert format_currency_with_sign(-16) == '-$16.00'


class TestCompactAndParse:
    """Tests for compact formatting and parsing."""

    def test_compact(self):
        assert format_compact_currency(1250) == '$1.2K'
        assert format_compact_currency(3400000) == '$3.4M'
        assert format_compact_currency(999) == '$999.00'

    def test_parse_currency(self):
        assert parse_currency('$1,234.50') == 1234.5
        assert parse_currency('abc') == 0.0

    def test_percentage(self):
        assert format_percentage(-20) == '-20.0%'
        assert format_percentage(33.333, 2) == '33.33%'
