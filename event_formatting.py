from datetime import datetime

from dateutil.parser import parse as parse_date


# ============================================================
# DATE / TIME FORMATTING
# ============================================================

def _parse(value):
    if isinstance(value, datetime):
        return value
    return parse_date(str(value))


def format_date(value):
    """Long date for the event card, e.g. 'Friday, March 15, 2024'."""
    if not value:
        return "TBD"
    try:
        dt = _parse(value)
    except (ValueError, OverflowError):
        return str(value)
    return f"{dt:%A}, {dt:%B} {dt.day}, {dt.year}"


def format_datetime(value, tz=None):
    """
    Short registration timestamp, e.g. 'Mar 15, 2024, 02:30 PM'.
    Aware timestamps are moved to `tz` when one is given.
    """
    if not value:
        return "N/A"
    try:
        dt = _parse(value)
    except (ValueError, OverflowError):
        return str(value)
    if tz is not None and dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    return f"{dt:%b} {dt.day}, {dt.year}, {dt:%I:%M %p}"


def format_time_range(start, end) -> str:
    if not start and not end:
        return "TBD"
    return f"{start or 'TBD'} - {end or 'TBD'}"
