"""
Error taxonomy for scheduling and booking conflicts.

Conflict errors are expected, recoverable outcomes: each carries a stable
``reason`` code for programmatic handling and the user-facing ``message``
the UI shows verbatim. Storage failures are not wrapped and propagate as-is.
"""

from datetime import datetime
from typing import Optional

from slotengine.engine import messages
from slotengine.schemas.blackout_schema import BlackoutPeriod


class SchedulingError(Exception):
    """Base class for all slot engine errors."""


class InvalidScheduleConfiguration(SchedulingError, ValueError):
    """Raised when a working-hours schedule is rejected at save time."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = list(problems)
        super().__init__("Invalid working hours: " + "; ".join(self.problems))


class BookingNotFound(SchedulingError, LookupError):
    """Raised when a booking id does not resolve to a stored booking."""

    def __init__(self, booking_id: str) -> None:
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} not found.")


class BlackoutOverlap(SchedulingError, ValueError):
    """Raised when a new blackout overlaps one already stored for the same scope."""

    def __init__(self, existing: BlackoutPeriod) -> None:
        self.existing = existing
        self.message = messages.BLACKOUT_OVERLAP_MESSAGE
        super().__init__(self.message)


class ConflictError(SchedulingError):
    """A booking request or cancellation rejected by policy or availability."""

    reason: str = "conflict"

    def __init__(self, message: str, slot_start: Optional[datetime] = None) -> None:
        self.message = message
        self.slot_start = slot_start
        super().__init__(message)

    @property
    def retryable_with_other_slot(self) -> bool:
        """True when picking a different slot could succeed."""
        return True


class SlotTooSoon(ConflictError):
    reason = "too_soon"

    def __init__(self, slot_start: Optional[datetime] = None) -> None:
        super().__init__(messages.MIN_LEAD_MESSAGE, slot_start)


class SlotOutsideWorkingHours(ConflictError):
    reason = "outside_working_hours"

    def __init__(self, slot_start: Optional[datetime] = None) -> None:
        super().__init__(messages.OUTSIDE_WORKING_HOURS_MESSAGE, slot_start)


class SlotBlocked(ConflictError):
    reason = "blackout"

    def __init__(
        self, blackout: Optional[BlackoutPeriod] = None, slot_start: Optional[datetime] = None
    ) -> None:
        self.blackout = blackout
        message = (blackout.reason if blackout and blackout.reason
                   else messages.BLACKOUT_DEFAULT_MESSAGE)
        super().__init__(message, slot_start)


class SlotOverlap(ConflictError):
    """Deliberately generic: never reveals whose booking is in the way."""

    reason = "overlap"

    def __init__(self, slot_start: Optional[datetime] = None) -> None:
        super().__init__(messages.SLOT_OVERLAP_MESSAGE, slot_start)


class CancellationWindowClosed(ConflictError):
    reason = "cancellation_closed"

    def __init__(self, message: str, reason: Optional[str] = None) -> None:
        if reason:
            self.reason = reason
        super().__init__(message)

    @property
    def retryable_with_other_slot(self) -> bool:
        return False
