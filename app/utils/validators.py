"""
Request payload validation for the JSON API.

The services accept any well-typed input; these helpers are the form
validation layer that sits in front of them.
"""
import math
from typing import Any, Dict, Optional

from app.exceptions import ValidationError
from app.utils.time_utils import is_valid_date


def require_json(payload: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload


def clean_text(payload: Dict[str, Any], field: str, required: bool = True) -> Optional[str]:
    """Trimmed string; required fields must be non-empty after trimming."""
    value = payload.get(field)
    if value is None:
        if required:
            raise ValidationError(f'{field} is required')
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{field} must be a string')
    value = value.strip()
    if required and not value:
        raise ValidationError(f'{field} is required')
    return value


def parse_amount(payload: Dict[str, Any], field: str, required: bool = True, default: Optional[float] = None) -> Optional[float]:
    """Non-negative monetary amount."""
    value = payload.get(field)
    if value is None or value == '':
        if required and default is None:
            raise ValidationError(f'{field} is required')
        return default
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a number')
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{field} must be a number')
    if not math.isfinite(amount):
        raise ValidationError(f'{field} must be a finite number')
    if amount < 0:
        raise ValidationError(f'{field} cannot be negative')
    return amount


def _whole_number(value: Any, field: str) -> int:
    # rejects bools, fractions, NaN and infinities
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be a whole number')
    try:
        number = int(value)
        exact = number == float(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f'{field} must be a whole number')
    if not exact:
        raise ValidationError(f'{field} must be a whole number')
    return number


def parse_quantity(payload: Dict[str, Any], field: str = 'quantity', default: Optional[int] = None) -> int:
    """Positive whole number of units."""
    value = payload.get(field, default)
    if value is None:
        raise ValidationError(f'{field} is required')
    quantity = _whole_number(value, field)
    if quantity <= 0:
        raise ValidationError(f'{field} must be a positive whole number')
    return quantity


def parse_stock_count(payload: Dict[str, Any], field: str = 'stock_count') -> Optional[int]:
    value = payload.get(field)
    if value is None or value == '':
        return None
    count = _whole_number(value, field)
    if count < 0:
        raise ValidationError(f'{field} cannot be negative')
    return count


def parse_date(payload: Dict[str, Any], field: str = 'date') -> str:
    value = clean_text(payload, field)
    if not is_valid_date(value):
        raise ValidationError(f'{field} must be a date in YYYY-MM-DD format')
    return value


def parse_id_list(payload: Dict[str, Any], field: str) -> Optional[list]:
    value = payload.get(field)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValidationError(f'{field} must be a list of ids')
    # ordered set
    return list(dict.fromkeys(value))


def parse_positive_int_arg(value: Optional[str], name: str, default: int) -> int:
    """Query-string integer (> 0) with a default."""
    if value is None or value == '':
        return default
    try:
        number = int(value)
    except ValueError:
        raise ValidationError(f'{name} must be a whole number')
    if number <= 0:
        raise ValidationError(f'{name} must be greater than 0')
    return number

