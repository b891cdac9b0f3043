from slotengine.schemas.blackout_schema import BlackoutPeriod, BlackoutScope
from slotengine.schemas.booking_schema import (
    ActorRole,
    Booking,
    BookingStatus,
    CommitRequest,
    court_scope,
    employee_scope,
)
from slotengine.schemas.schedule_schema import (
    WEEKDAYS,
    DaySchedule,
    TimeRange,
    WorkingHoursSchedule,
)
from slotengine.schemas.slot_schema import (
    CandidateSlot,
    DayAvailability,
    SlotStatus,
    TimingDecision,
)

__all__ = [
    "ActorRole", "Booking", "BookingStatus", "CommitRequest",
    "court_scope", "employee_scope",
    "BlackoutPeriod", "BlackoutScope",
    "WEEKDAYS", "DaySchedule", "TimeRange", "WorkingHoursSchedule",
    "CandidateSlot", "DayAvailability", "SlotStatus", "TimingDecision",
]
