"""Tolerance-based decisions on whether library date/location need rewriting.

Formatting a date to the EXIF string and back drops sub-second precision, and
the sign/magnitude split of GPS coordinates adds floating noise. Without a
tolerance every load-then-save cycle would look like a change.
"""

from __future__ import annotations

from datetime import datetime

from loguru import logger

from core.models import Coordinate

DATE_TOLERANCE_SECONDS = 1.0
# About 1.1 m at the equator
LOCATION_TOLERANCE_DEGREES = 1e-5


def _comparable(a: datetime, b: datetime) -> tuple[datetime, datetime]:
    """Give both dates the same awareness; naive values are read as local time."""
    if (a.tzinfo is None) != (b.tzinfo is None):
        return a.astimezone(), b.astimezone()
    return a, b


def should_sync_date(
    new: datetime | None,
    current: datetime | None,
    tolerance: float = DATE_TOLERANCE_SECONDS,
) -> bool:
    """Return True if the library capture date must be rewritten."""
    if new is None and current is None:
        return False
    if new is None or current is None:
        return True
    new, current = _comparable(new, current)
    return abs((new - current).total_seconds()) > tolerance


def should_sync_location(
    new: Coordinate | None,
    current: Coordinate | None,
    tolerance: float = LOCATION_TOLERANCE_DEGREES,
) -> bool:
    """Return True if the library location must be rewritten."""
    if new is None and current is None:
        return False
    if new is None or current is None:
        return True
    return (
        abs(new.latitude - current.latitude) > tolerance
        or abs(new.longitude - current.longitude) > tolerance
    )


def decide_sync(
    new_date: datetime | None,
    current_date: datetime | None,
    new_location: Coordinate | None,
    current_location: Coordinate | None,
    *,
    date_tolerance: float = DATE_TOLERANCE_SECONDS,
    location_tolerance: float = LOCATION_TOLERANCE_DEGREES,
) -> tuple[bool, bool]:
    """Evaluate both predicates and return (sync_date, sync_location)."""
    sync_date = should_sync_date(new_date, current_date, date_tolerance)
    sync_location = should_sync_location(new_location, current_location, location_tolerance)
    logger.debug("Library sync decision: date={} location={}", sync_date, sync_location)
    return sync_date, sync_location
