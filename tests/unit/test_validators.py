"""
Unit tests for request payload validation.
"""

import pytest

from app.exceptions import ValidationError
from app.utils.validators import parse_amount, parse_positive_int_arg, parse_quantity, parse_stock_count


class TestParseAmount:
    """Tests for parse_amount."""

    def test_accepts_numbers_and_numeric_strings(self):
        assert parse_amount({'price': 12}, 'price') == 12.0
        assert parse_amount({'price': '4.5'}, 'price') == 4.5

    def test_default_when_missing(self):
        assert parse_amount({}, 'cost', default=0.0) == 0.0

    @pytest.mark.parametrize('value', [float('nan'), float('inf'), float('-inf'), 'NaN', 'Infinity'])
    def test_rejects_non_finite(self, value):
        with pytest.raises(ValidationError):
            parse_amount({'price': value}, 'price')

    @pytest.mark.parametrize('value', [-1, True, 'abc'])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_amount({'price': value}, 'price')


class TestParseQuantity:
    """Tests for parse_quantity."""

    def test_whole_numbers(self):
        assert parse_quantity({'quantity': 3}) == 3
        assert parse_quantity({'quantity': 2.0}) == 2
        assert parse_quantity({}, default=1) == 1

    @pytest.mark.parametrize('value', [0, -2, 2.5, True, float('inf'), float('nan'), 'many'])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_quantity({'quantity': value})


class TestParseStockCount:
    """Tests for parse_stock_count."""

    def test_optional(self):
        assert parse_stock_count({}) is None
        assert parse_stock_count({'stock_count': 0}) == 0

    @pytest.mark.parametrize('value', [True, 2.7, -1, float('inf'), float('nan')])
    def test_rejects_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_stock_count({'stock_count': value})


class TestParsePositiveIntArg:
    def test_default_and_value(self):
        assert parse_positive_int_arg(None, 'limit', 5) == 5
        assert parse_positive_int_arg('3', 'limit', 5) == 3

    def test_rejects_zero(self):
        with pytest.raises(ValidationError):
            parse_positive_int_arg('0', 'limit', 5)
