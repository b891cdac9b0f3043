from slotengine.engine.availability import (
    classify,
    classify_week,
    find_next_available,
    slots_needed,
    week_start,
)
from slotengine.engine.blackouts import (
    BlackoutMatch,
    blackouts_for_scope,
    find_overlapping,
    is_blocked,
)
from slotengine.engine.booking_index import BookingIndex
from slotengine.engine.conflict_validator import ConflictValidator
from slotengine.engine.errors import (
    BlackoutOverlap,
    BookingNotFound,
    CancellationWindowClosed,
    ConflictError,
    InvalidScheduleConfiguration,
    SchedulingError,
    SlotBlocked,
    SlotOutsideWorkingHours,
    SlotOverlap,
    SlotTooSoon,
)
from slotengine.engine.timing_policy import cancellation_status, creation_status, is_too_soon
from slotengine.engine.working_hours import (
    break_windows,
    candidate_slots_for_day,
    covers_span,
    infer_granularity,
    validate_schedule,
)

__all__ = [
    "classify", "classify_week", "find_next_available", "slots_needed", "week_start",
    "BlackoutMatch", "blackouts_for_scope", "find_overlapping", "is_blocked",
    "BookingIndex", "ConflictValidator",
    "BlackoutOverlap", "BookingNotFound", "CancellationWindowClosed", "ConflictError",
    "InvalidScheduleConfiguration", "SchedulingError",
    "SlotBlocked", "SlotOutsideWorkingHours", "SlotOverlap", "SlotTooSoon",
    "cancellation_status", "creation_status", "is_too_soon",
    "break_windows", "candidate_slots_for_day", "covers_span", "infer_granularity",
    "validate_schedule",
]
