"""
Read-only index of existing bookings with half-open overlap queries.

Bookings are bucketed by ``(resource_scope, local date)`` so a query only
scans the days its window touches. A booking that runs past midnight is
placed in every day bucket it covers. Cancelled bookings are never indexed:
they vacate their time range.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Iterable, Iterator, Optional
from zoneinfo import ZoneInfo

from slotengine.engine.timezones import ensure_aware, local_date, resolve_zone
from slotengine.schemas.booking_schema import Booking

logger = logging.getLogger(__name__)

_EPSILON = timedelta(microseconds=1)

BucketKey = tuple[Optional[str], date]


def _days_covered(start: datetime, end: datetime, zone: ZoneInfo) -> Iterator[date]:
    day = local_date(start, zone)
    last = local_date(end - _EPSILON, zone)
    while day <= last:
        yield day
        day += timedelta(days=1)


class BookingIndex:
    """
    Active bookings for one business, queryable by scope and time window.

    ``default_duration_minutes`` stands in for bookings stored without a
    duration, normally the business's slot granularity.
    """

    def __init__(
        self,
        bookings: Iterable[Booking],
        default_duration_minutes: int,
        zone: Optional[ZoneInfo] = None,
    ) -> None:
        if default_duration_minutes <= 0:
            raise ValueError(
                f"Default booking duration must be positive, got {default_duration_minutes}"
            )
        self._default_duration = default_duration_minutes
        self._zone = zone or resolve_zone()
        self._buckets: dict[BucketKey, list[Booking]] = defaultdict(list)
        self._count = 0

        for booking in bookings:
            if not booking.is_active:
                continue
            start, end = self.span(booking)
            for day in _days_covered(start, end, self._zone):
                self._buckets[(booking.resource_scope, day)].append(booking)
            self._count += 1

        logger.debug("Indexed %d active bookings in %d buckets", self._count, len(self._buckets))

    def __len__(self) -> int:
        return self._count

    def span(self, booking: Booking) -> tuple[datetime, datetime]:
        """``[start, end)`` of a booking, applying the default duration."""
        return booking.start, booking.end(self._default_duration)

    def overlapping(
        self,
        start: datetime,
        end: datetime,
        resource_scope: Optional[str] = None,
        exclude_id: Optional[str] = None,
    ) -> list[Booking]:
        """All active bookings in ``resource_scope`` overlapping ``[start, end)``.

        Results are ordered by start instant, then id.
        """
        start = ensure_aware(start)
        end = ensure_aware(end)
        if end <= start:
            return []

        found: dict[str, Booking] = {}
        for day in _days_covered(start, end, self._zone):
            for booking in self._buckets.get((resource_scope, day), ()):
                if booking.id == exclude_id or booking.id in found:
                    continue
                booking_start, booking_end = self.span(booking)
                if start < booking_end and end > booking_start:
                    found[booking.id] = booking
        return sorted(found.values(), key=lambda b: (b.start, b.id))

    def has_overlap(
        self,
        start: datetime,
        end: datetime,
        resource_scope: Optional[str] = None,
        exclude_id: Optional[str] = None,
    ) -> bool:
        return bool(self.overlapping(start, end, resource_scope, exclude_id))
