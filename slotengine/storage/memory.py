"""
In-memory booking store.

Reference implementation of the ``BookingStore`` contract for tests and
local development. In production this is backed by the platform database,
with ``commit_scope`` mapped to a transaction holding a lock on the scope.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from slotengine.engine.blackouts import find_overlapping
from slotengine.engine.errors import BlackoutOverlap
from slotengine.schemas.blackout_schema import BlackoutPeriod
from slotengine.schemas.booking_schema import Booking
from slotengine.schemas.schedule_schema import WorkingHoursSchedule

logger = logging.getLogger(__name__)

ScopeKey = tuple[str, Optional[str]]


class InMemoryBookingStore:
    """Dict-backed store with one lock per (business, resource scope)."""

    def __init__(self) -> None:
        self._schedules: dict[ScopeKey, WorkingHoursSchedule] = {}
        self._granularity: dict[str, int] = {}
        self._blackouts: dict[str, list[BlackoutPeriod]] = {}
        self._bookings: dict[str, Booking] = {}
        self._locks: dict[ScopeKey, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # --- Settings written by the business / employee ---

    def set_schedule(
        self,
        business_id: str,
        schedule: WorkingHoursSchedule,
        resource_scope: Optional[str] = None,
    ) -> None:
        self._schedules[(business_id, resource_scope)] = schedule

    def set_granularity(self, business_id: str, minutes: int) -> None:
        if minutes <= 0:
            raise ValueError(f"Slot granularity must be positive, got {minutes}")
        self._granularity[business_id] = minutes

    def add_blackout(self, business_id: str, blackout: BlackoutPeriod) -> None:
        """Store a blackout; one overlapping a stored one of the same scope is refused.

        Raises:
            BlackoutOverlap: naming the blackout already covering those dates.
        """
        existing = self._blackouts.setdefault(business_id, [])
        clash = find_overlapping(existing, blackout)
        if clash is not None:
            raise BlackoutOverlap(clash)
        existing.append(blackout)

    def remove_blackout(self, business_id: str, blackout_id: str) -> bool:
        existing = self._blackouts.get(business_id, [])
        kept = [b for b in existing if b.id != blackout_id]
        self._blackouts[business_id] = kept
        return len(kept) != len(existing)

    # --- BookingStore contract ---

    def get_schedule(
        self, business_id: str, resource_scope: Optional[str] = None
    ) -> Optional[WorkingHoursSchedule]:
        if resource_scope is not None and (business_id, resource_scope) in self._schedules:
            return self._schedules[(business_id, resource_scope)]
        return self._schedules.get((business_id, None))

    def get_granularity(self, business_id: str) -> Optional[int]:
        return self._granularity.get(business_id)

    def get_blackouts(self, business_id: str) -> list[BlackoutPeriod]:
        return list(self._blackouts.get(business_id, []))

    def get_bookings(
        self, business_id: str, resource_scope: Optional[str] = None
    ) -> list[Booking]:
        return [
            b for b in self._bookings.values()
            if b.business_id == business_id and b.resource_scope == resource_scope
        ]

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        return self._bookings.get(booking_id)

    def add_booking(self, booking: Booking) -> Booking:
        if booking.id in self._bookings:
            raise ValueError(f"Booking {booking.id} already exists")
        self._bookings[booking.id] = booking
        logger.debug("Stored booking %s", booking.id)
        return booking

    def update_booking(self, booking: Booking) -> Booking:
        if booking.id not in self._bookings:
            raise KeyError(booking.id)
        self._bookings[booking.id] = booking
        logger.debug("Updated booking %s (%s)", booking.id, booking.status.value)
        return booking

    @contextmanager
    def commit_scope(
        self, business_id: str, resource_scope: Optional[str] = None
    ) -> Iterator[None]:
        with self._locks_guard:
            lock = self._locks.setdefault((business_id, resource_scope), threading.Lock())
        with lock:
            yield

    def reset(self) -> None:
        """Clear all data. Used by test fixtures for isolation."""
        self._schedules.clear()
        self._granularity.clear()
        self._blackouts.clear()
        self._bookings.clear()
        self._locks.clear()
