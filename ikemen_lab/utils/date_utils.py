# ikemen_lab/utils/date_utils.py

"""Utility functions for the date values used in Smart Collection rules.

Rule values are stored as text. This module turns them into timezone-aware
UTC datetimes (or day counts) and back.

Accepted date formats: ISO 8601 date-time (``Z`` or offset suffix allowed),
YYYY-MM-DD, DD.MM.YYYY, YYYY/MM/DD. Naive values are read as UTC.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone


__all__ = ['format_rule_date', 'parse_day_count', 'parse_rule_date']

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_rule_date(date_str: str) -> datetime | None:
    """Converts a rule value to an aware UTC datetime.

    Accepted input formats (in order of priority):
        - ISO 8601     -> "2024-12-07T18:30:00Z", "2024-12-07T18:30:00+01:00"
        - YYYY-MM-DD   -> midnight UTC
        - DD.MM.YYYY   -> midnight UTC
        - YYYY/MM/DD   -> midnight UTC

    Args:
        date_str: The rule's value text.

    Returns:
        The parsed instant, or None when no format matches.
    """
    if not date_str or not date_str.strip():
        return None

    date_str = date_str.strip()

    # fromisoformat() only learned the "Z" suffix in 3.11
    iso_candidate = date_str[:-1] + "+00:00" if date_str.endswith(("Z", "z")) else date_str
    try:
        parsed = datetime.fromisoformat(iso_candidate)
    except ValueError:
        parsed = None

    if parsed is None:
        for fmt in ("%d.%m.%Y", "%Y/%m/%d"):
            try:
                parsed = datetime.strptime(date_str, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        # The offset pushes the instant past datetime.min or datetime.max
        return None

def parse_day_count(value: str) -> int | None:
    """Parses the N of a "within the last N days" rule.

    Args:
        value: The rule's value text.

    Returns:
        A non-negative day count no larger than ``timedelta.max.days``,
        or None if the text is not one.
    """
    if value is None:
        return None
    text = value.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    # Long digit runs would also trip int()'s string length limit
    digits = text.lstrip("0") or "0"
    if len(digits) > len(str(timedelta.max.days)):
        return None
    days = int(digits)
    if days > timedelta.max.days:
        return None
    return days

def format_rule_date(value: datetime) -> str:
    """Formats a datetime as the ISO 8601 UTC text stored in rule values.

    Args:
        value: The datetime to format. Naive values are read as UTC.

    Returns:
        Text like ``2024-12-07T18:30:00Z``.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
