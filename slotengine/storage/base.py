"""
Persistence collaborator contract.

The engine never talks to a database directly. Whoever integrates it
provides a ``BookingStore``; the conflict validator reads live schedules,
blackouts and bookings from it and writes committed bookings back.

``commit_scope`` is the atomicity hook: the validator performs its
check-then-insert inside it, and the implementation must guarantee that two
commits for the same business and resource scope cannot interleave (a row
lock, a serializable transaction, or a process-local lock for the
in-memory store).
"""

from typing import ContextManager, Optional, Protocol, runtime_checkable

from slotengine.schemas.blackout_schema import BlackoutPeriod
from slotengine.schemas.booking_schema import Booking
from slotengine.schemas.schedule_schema import WorkingHoursSchedule


@runtime_checkable
class BookingStore(Protocol):
    def get_schedule(
        self, business_id: str, resource_scope: Optional[str] = None
    ) -> Optional[WorkingHoursSchedule]:
        """Schedule for the scope, falling back to the business's own hours."""
        ...

    def get_granularity(self, business_id: str) -> Optional[int]:
        ...

    def get_blackouts(self, business_id: str) -> list[BlackoutPeriod]:
        ...

    def get_bookings(
        self, business_id: str, resource_scope: Optional[str] = None
    ) -> list[Booking]:
        """Every booking of the business held against ``resource_scope``."""
        ...

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        ...

    def add_booking(self, booking: Booking) -> Booking:
        ...

    def update_booking(self, booking: Booking) -> Booking:
        ...

    def commit_scope(
        self, business_id: str, resource_scope: Optional[str] = None
    ) -> ContextManager[None]:
        ...
