"""
Conversion between a business's local wall-clock time and canonical instants.

Every other engine module works on timezone-aware UTC datetimes and only
turns them into local dates and ``HH:MM`` labels for display. Naive
datetimes handed to the engine are taken to be UTC already.
"""

import logging
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from slotengine.config import settings
from slotengine.utils import parse_hhmm

logger = logging.getLogger(__name__)

UTC = timezone.utc
LAST_MOMENT = time(23, 59, 59, 999000)


@lru_cache(maxsize=64)
def resolve_zone(name: Optional[str] = None) -> ZoneInfo:
    """Return the zone for ``name``, or the configured default for unknown names."""
    default = settings.schedule.default_timezone
    try:
        return ZoneInfo(name or default)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to %s", name, default)
        return ZoneInfo(default)


def ensure_aware(value: datetime) -> datetime:
    """Canonical form of an instant: aware and expressed in UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_instant(day: date, label: str, zone: ZoneInfo) -> datetime:
    """Local ``HH:MM`` on ``day`` as a UTC instant."""
    minutes = parse_hhmm(label)
    if minutes is None:
        raise ValueError(f"Invalid time label: {label!r}")
    local = datetime.combine(day, time(0), tzinfo=zone) + timedelta(minutes=minutes)
    return local.astimezone(UTC)


def to_local(instant: datetime, zone: ZoneInfo) -> datetime:
    return ensure_aware(instant).astimezone(zone)


def local_date(instant: datetime, zone: ZoneInfo) -> date:
    return to_local(instant, zone).date()


def local_label(instant: datetime, zone: ZoneInfo) -> str:
    return to_local(instant, zone).strftime("%H:%M")


def day_bounds(day: date, zone: ZoneInfo) -> tuple[datetime, datetime]:
    """First and last moment (00:00:00 to 23:59:59.999) of a local day, in UTC."""
    start = datetime.combine(day, time(0), tzinfo=zone)
    end = datetime.combine(day, LAST_MOMENT, tzinfo=zone)
    return start.astimezone(UTC), end.astimezone(UTC)
