"""Calendar-day normalization.

Pure functions with no external dependencies. Every date comparison in the
engine goes through normalize() so that time-of-day never leaks into
ordering or equality checks.
"""

from datetime import date, datetime


def normalize(value: object) -> date | None:
    """Convert a date-like value to a local calendar day.

    Args:
        value: date, datetime, ISO-8601 string or epoch timestamp (seconds)

    Returns:
        The calendar day with time fields dropped, or None when the value is
        absent or cannot be parsed.

    Aware datetimes are shifted to local time before the time part is dropped.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value).date()
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return normalize(parsed)

    return None


def today() -> date:
    """Current local calendar day. Only used when callers do not inject one."""
    return datetime.now().date()
