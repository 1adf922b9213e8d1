"""
Local clock helpers for timezone-aware scoring.

Every function takes an explicit ``now`` so callers (and tests) control the
instant being evaluated; ``None`` means the current UTC time.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

# Errors that mean "this timezone string is unusable"
TIMEZONE_ERRORS = (ZoneInfoNotFoundError, ValueError, TypeError)

# Fixed boundaries of the time-of-day curve outside the configurable peak window
EARLY_MORNING_START = 7
EVENING_END = 21
LATE_EVENING_END = 23


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_aware(moment: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def local_time(tz_name: str, now: Optional[datetime] = None) -> datetime:
    """Convert ``now`` into the given IANA timezone.

    Raises ZoneInfoNotFoundError / ValueError for unknown or malformed names.
    """
    moment = as_aware(now) if now is not None else utc_now()
    return moment.astimezone(ZoneInfo(tz_name))


def fractional_hour(moment: datetime) -> float:
    """09:30 -> 9.5"""
    return moment.hour + moment.minute / 60


def parse_clock(value: str) -> float:
    """Parse an "HH:MM" string into fractional hours. Raises ValueError if malformed."""
    hours, minutes = value.split(":")
    return int(hours) + int(minutes) / 60


def is_night_hours(tz_name: Optional[str], now: Optional[datetime] = None) -> bool:
    """True iff the artist's local hour falls in [23, 24) or [0, 7).

    Unknown or invalid timezones are never considered night.
    """
    if not tz_name:
        return False

    try:
        hour = local_time(tz_name, now).hour
    except TIMEZONE_ERRORS as e:
        logger.debug(f"Failed to check night hours for timezone {tz_name!r}: {e}")
        return False

    return hour >= LATE_EVENING_END or hour < EARLY_MORNING_START
