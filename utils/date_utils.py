"""
Meal Planner Date Utilities
Helper functions for timezone-aware timestamps
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Make a datetime timezone-aware

    Some backends (SQLite) hand back naive datetimes even for
    ``DateTime(timezone=True)`` columns; those are taken to be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_past(value: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """True when ``value`` is set and earlier than ``now``"""
    if value is None:
        return False
    return ensure_utc(value) < ensure_utc(now or utc_now())
