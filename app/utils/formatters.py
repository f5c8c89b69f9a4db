"""
Formatting helpers for money and percentages (US style).
Used by the CLI report and by API responses that carry display strings.
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union, Optional

Number = Union[int, float, Decimal]

CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
}


def format_currency(value: Optional[Number], currency: str = 'USD', show_cents: bool = True) -> str:
    """
    Format a number as currency.

    Args:
        value: Amount to format
        currency: ISO currency code (symbol lookup, falls back to the code)
        show_cents: Two decimals when True, none when False

    Returns:
        Formatted string

    Examples:
        format_currency(1500) -> "$1,500.00"
        format_currency(-12.5) -> "-$12.50"
        format_currency(1500.4, show_cents=False) -> "$1,500"
        format_currency(None) -> "-"
    """
    if value is None:
        return "-"

    try:
        num = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return "-"

    quantum = Decimal('0.01') if show_cents else Decimal('1')
    num = num.quantize(quantum, rounding=ROUND_HALF_UP)

    sign = '-' if num < 0 else ''
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    return f"{sign}{symbol}{abs(num):,}"


def format_currency_with_sign(value: Number) -> str:
    """
    Examples:
        format_currency_with_sign(20) -> "+$20.00"
        format_currency_with_sign(-16) -> "-$16.00"
    """
    formatted = format_currency(abs(value))
    return f"+{formatted}" if value >= 0 else f"-{formatted}"


def format_compact_currency(value: Number) -> str:
    """
    Examples:
        format_compact_currency(1250) -> "$1.2K"
        format_compact_currency(3400000) -> "$3.4M"
        format_compact_currency(999) -> "$999.00"
    """
    if abs(value) >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if abs(value) >= 1000:
        return f"${value / 1000:.1f}K"
    return format_currency(value)


def parse_currency(text: str) -> float:
    """
    Parse a currency string; anything unparsable is 0.

    Examples:
        parse_currency("$1,234.50") -> 1234.5
        parse_currency("abc") -> 0.0
    """
    cleaned = re.sub(r'[^0-9.\-]', '', text or '')
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def format_percentage(value: Number, decimals: int = 1) -> str:
    """
    Examples:
        format_percentage(-20) -> "-20.0%"
        format_percentage(33.333, 2) -> "33.33%"
    """
    return f"{value:.{decimals}f}%"
