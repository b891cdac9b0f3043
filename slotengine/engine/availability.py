"""
Slot availability engine: classify every candidate slot of a day.

Each candidate start from the working-hours resolver gets exactly one
status, decided in fixed precedence order:

1. past       the slot starts before ``now``
2. blocked    a blackout covers it, or it is inside the minimum lead time
3. booked     an active booking in the same scope overlaps it
4. blocked    a multi-slot service has no free consecutive run from here
5. available

Classification is a pure function of its arguments. It never reads the
clock and never writes to the booking store.

Usage:
    slots = classify(day, schedule, blackouts, bookings,
                     requested_duration_minutes=90, granularity_minutes=30,
                     now=now)
    free = [s.label for s in slots if s.is_available]
"""

import logging
import math
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union
from zoneinfo import ZoneInfo

from slotengine.engine import messages
from slotengine.engine.blackouts import blackouts_for_scope, is_blocked
from slotengine.engine.booking_index import BookingIndex
from slotengine.engine.timezones import ensure_aware, local_label, resolve_zone, to_instant
from slotengine.engine.timing_policy import is_too_soon
from slotengine.engine.working_hours import candidate_slots_for_day
from slotengine.schemas.blackout_schema import BlackoutPeriod
from slotengine.schemas.booking_schema import Booking
from slotengine.schemas.schedule_schema import WorkingHoursSchedule
from slotengine.schemas.slot_schema import CandidateSlot, DayAvailability, SlotStatus
from slotengine.utils import MINUTES_PER_DAY, format_hhmm, parse_hhmm

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
DEFAULT_SEARCH_HORIZON_DAYS = 14

BookingSource = Union[BookingIndex, Iterable[Booking]]


def slots_needed(requested_duration_minutes: int, granularity_minutes: int) -> int:
    """Consecutive slots a service occupies, rounding partial slots up."""
    if granularity_minutes <= 0:
        raise ValueError(f"Slot granularity must be positive, got {granularity_minutes}")
    return max(1, math.ceil(requested_duration_minutes / granularity_minutes))


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def _zone_for(schedule: Optional[WorkingHoursSchedule], zone: Optional[ZoneInfo]) -> ZoneInfo:
    if zone is not None:
        return zone
    return resolve_zone(schedule.timezone if schedule else None)


def _as_index(bookings: BookingSource, granularity_minutes: int, zone: ZoneInfo) -> BookingIndex:
    if isinstance(bookings, BookingIndex):
        return bookings
    return BookingIndex(bookings, granularity_minutes, zone)


def _candidate_starts(
    schedule: Optional[WorkingHoursSchedule], day: date, granularity_minutes: int, zone: ZoneInfo
) -> list[tuple[str, datetime]]:
    """Labels paired with their instants, minus wall-clock times that never occur.

    On a spring-forward day a skipped label such as 03:00 resolves to the
    same instant as 04:00; it is dropped so no instant is offered twice.
    """
    starts = []
    for label in candidate_slots_for_day(schedule, day, granularity_minutes):
        start = to_instant(day, label, zone)
        if local_label(start, zone) != label:
            logger.debug("Skipping nonexistent local time %s on %s", label, day)
            continue
        starts.append((label, start))
    return starts


def _classify_single(
    label: str,
    start: datetime,
    step: timedelta,
    now: datetime,
    blackouts: list[BlackoutPeriod],
    index: BookingIndex,
    resource_scope: Optional[str],
    zone: ZoneInfo,
) -> CandidateSlot:
    if start < now:
        return CandidateSlot(start=start, label=label, status=SlotStatus.PAST)

    end = start + step
    match = is_blocked(start, end, blackouts, zone)
    if match.blocked:
        return CandidateSlot(
            start=start,
            label=label,
            status=SlotStatus.BLOCKED,
            reason=match.reason or messages.BLACKOUT_DEFAULT_MESSAGE,
            blackout_id=match.matching.id,
        )
    if is_too_soon(start, now):
        return CandidateSlot(
            start=start, label=label, status=SlotStatus.BLOCKED, reason=messages.MIN_LEAD_MESSAGE
        )

    if index.has_overlap(start, end, resource_scope):
        return CandidateSlot(start=start, label=label, status=SlotStatus.BOOKED)

    return CandidateSlot(start=start, label=label, status=SlotStatus.AVAILABLE)


def _has_consecutive_run(
    slot: CandidateSlot, by_label: dict[str, CandidateSlot], needed: int, granularity: int
) -> bool:
    """The next ``needed`` grid slots from ``slot`` all exist and are free."""
    first = parse_hhmm(slot.label)
    for offset in range(1, needed):
        minutes = first + offset * granularity
        if minutes >= MINUTES_PER_DAY:
            return False
        follower = by_label.get(format_hhmm(minutes))
        if follower is None or follower.status != SlotStatus.AVAILABLE:
            return False
    return True


def classify(
    day: date,
    schedule: Optional[WorkingHoursSchedule],
    blackouts: Iterable[BlackoutPeriod],
    bookings: BookingSource,
    requested_duration_minutes: int,
    granularity_minutes: int,
    now: datetime,
    resource_scope: Optional[str] = None,
    zone: Optional[ZoneInfo] = None,
) -> list[CandidateSlot]:
    """
    Classify every candidate slot of ``day`` for one resource scope.

    Args:
        schedule: Weekly hours of the business or employee; None falls
            back to the default window.
        blackouts: All blackouts of the business; those not applying to
            ``resource_scope`` are ignored.
        bookings: Bookings of the business, or a prebuilt BookingIndex.
        requested_duration_minutes: Duration of the service being booked.
        granularity_minutes: Slot size of the business.
        now: Reference instant for past-ness and lead time.

    Returns:
        One CandidateSlot per candidate start, in chronological order.
    """
    zone = _zone_for(schedule, zone)
    now = ensure_aware(now)
    step = timedelta(minutes=granularity_minutes)
    index = _as_index(bookings, granularity_minutes, zone)
    scoped_blackouts = blackouts_for_scope(blackouts, resource_scope)

    base = [
        _classify_single(
            label, start, step, now, scoped_blackouts, index, resource_scope, zone,
        )
        for label, start in _candidate_starts(schedule, day, granularity_minutes, zone)
    ]

    needed = slots_needed(requested_duration_minutes, granularity_minutes)
    if needed <= 1:
        return base

    by_label = {slot.label: slot for slot in base}
    run_reason = messages.consecutive_run_message(needed)
    result = []
    for slot in base:
        if slot.is_available and not _has_consecutive_run(
            slot, by_label, needed, granularity_minutes
        ):
            slot = slot.model_copy(update={"status": SlotStatus.BLOCKED, "reason": run_reason})
        result.append(slot)
    return result


def classify_week(
    first_day: date,
    schedule: Optional[WorkingHoursSchedule],
    blackouts: Iterable[BlackoutPeriod],
    bookings: BookingSource,
    requested_duration_minutes: int,
    granularity_minutes: int,
    now: datetime,
    resource_scope: Optional[str] = None,
    zone: Optional[ZoneInfo] = None,
) -> list[DayAvailability]:
    """Seven consecutive days of classified slots starting at ``first_day``."""
    zone = _zone_for(schedule, zone)
    index = _as_index(bookings, granularity_minutes, zone)
    blackouts = list(blackouts)
    week = []
    for offset in range(DAYS_PER_WEEK):
        day = first_day + timedelta(days=offset)
        week.append(
            DayAvailability(
                day=day,
                slots=classify(
                    day, schedule, blackouts, index, requested_duration_minutes,
                    granularity_minutes, now, resource_scope, zone,
                ),
            )
        )
    return week


def find_next_available(
    from_day: date,
    schedule: Optional[WorkingHoursSchedule],
    blackouts: Iterable[BlackoutPeriod],
    bookings: BookingSource,
    requested_duration_minutes: int,
    granularity_minutes: int,
    now: datetime,
    resource_scope: Optional[str] = None,
    zone: Optional[ZoneInfo] = None,
    horizon_days: int = DEFAULT_SEARCH_HORIZON_DAYS,
) -> Optional[CandidateSlot]:
    """Earliest available slot within ``horizon_days`` of ``from_day``."""
    zone = _zone_for(schedule, zone)
    index = _as_index(bookings, granularity_minutes, zone)
    blackouts = list(blackouts)
    for offset in range(horizon_days):
        day = from_day + timedelta(days=offset)
        for slot in classify(
            day, schedule, blackouts, index, requested_duration_minutes,
            granularity_minutes, now, resource_scope, zone,
        ):
            if slot.is_available:
                return slot
    logger.debug("No availability within %d days of %s", horizon_days, from_day)
    return None
