"""
UTC time helpers.

Every stored timestamp is ISO-8601 UTC with milliseconds and a trailing
'Z'; event dates are plain YYYY-MM-DD strings.
"""
from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 datetime string into an aware UTC datetime.

    - None / "" -> None
    - naive values are interpreted as UTC
    - "...Z" or "...+/-HH:MM" is converted to UTC
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None

    # Accept trailing Z
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serialize a datetime as ISO-8601 with milliseconds and a trailing 'Z'.
    Naive datetimes are treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc)
    return dt_utc.isoformat(timespec='milliseconds').replace("+00:00", "Z")


def parse_event_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an event date ("YYYY-MM-DD" or a full ISO timestamp); None if unparsable."""
    if not value:
        return None
    try:
        return parse_iso_datetime(value)
    except ValueError:
        return None


def is_valid_date(value: str) -> bool:
    """True for a calendar date string in YYYY-MM-DD form."""
    try:
        date.fromisoformat(value)
        return True
    except (TypeError, ValueError):
        return False
