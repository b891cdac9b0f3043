"""
Working-hours resolution: which slot starts exist on a given day.

Walks each configured range of the day's schedule entry in steps of the
slot granularity and emits ``HH:MM`` labels. Malformed ranges are skipped
rather than raised so a bad settings record never produces a reversed or
negative-length slot; ``validate_schedule`` is the strict save-time check.

Usage:
    schedule = WorkingHoursSchedule.uniform("09:00", "17:00")
    labels = candidate_slots_for_day(schedule, date(2025, 3, 18), 30)
    # ["09:00", "09:30", ..., "16:30"]
"""

import logging
from datetime import date
from typing import Iterable, Optional

from slotengine.config import settings
from slotengine.engine.errors import InvalidScheduleConfiguration
from slotengine.schemas.schedule_schema import WEEKDAYS, TimeRange, WorkingHoursSchedule
from slotengine.utils import format_hhmm

logger = logging.getLogger(__name__)


def default_schedule() -> WorkingHoursSchedule:
    """Fallback window used until a business has configured its hours."""
    return WorkingHoursSchedule.uniform(
        settings.schedule.default_open_time,
        settings.schedule.default_close_time,
    )


def _valid_bounds(ranges: Iterable[TimeRange], day: date) -> list[tuple[int, int]]:
    bounds = []
    for rng in ranges:
        pair = rng.bounds()
        if pair is None:
            logger.debug("Skipping malformed range %s-%s on %s", rng.start, rng.end, day)
            continue
        bounds.append(pair)
    return sorted(bounds)


def candidate_slots_for_day(
    schedule: Optional[WorkingHoursSchedule], day: date, granularity_minutes: int
) -> list[str]:
    """Ordered, de-duplicated slot-start labels for ``day``."""
    if granularity_minutes <= 0:
        raise ValueError(f"Slot granularity must be positive, got {granularity_minutes}")
    if schedule is None:
        schedule = default_schedule()

    entry = schedule.for_day(day)
    if not entry.is_open:
        return []

    labels: set[str] = set()
    for start, end in _valid_bounds(entry.ranges, day):
        cursor = start
        while cursor < end:
            labels.add(format_hhmm(cursor))
            cursor += granularity_minutes
    return sorted(labels)


def _merged(bounds: list[tuple[int, int]]) -> list[tuple[int, int]]:
    merged: list[tuple[int, int]] = []
    for start, end in bounds:
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def covers_span(
    schedule: Optional[WorkingHoursSchedule], day: date, start_minute: int, length_minutes: int
) -> bool:
    """True when one continuous working period of ``day`` holds the whole span.

    Touching or overlapping ranges count as one period, matching how
    consecutive runs are formed. ``schedule is None`` uses the default window.
    """
    if schedule is None:
        schedule = default_schedule()
    entry = schedule.for_day(day)
    if not entry.is_open:
        return False
    end_minute = start_minute + length_minutes
    return any(
        start <= start_minute and end_minute <= end
        for start, end in _merged(_valid_bounds(entry.ranges, day))
    )


def break_windows(schedule: Optional[WorkingHoursSchedule], day: date) -> list[TimeRange]:
    """Pauses between consecutive working periods of ``day``."""
    if schedule is None:
        return []
    entry = schedule.for_day(day)
    if not entry.is_open:
        return []

    gaps = []
    bounds = _valid_bounds(entry.ranges, day)
    for (_, prev_end), (next_start, _) in zip(bounds, bounds[1:]):
        if prev_end < next_start:
            gaps.append(TimeRange(start=format_hhmm(prev_end), end=format_hhmm(next_start)))
    return gaps


def validate_schedule(schedule: WorkingHoursSchedule) -> None:
    """
    Strict check for the settings save path.

    Raises:
        InvalidScheduleConfiguration: listing every malformed or
        overlapping range found.
    """
    problems = []
    for name, entry in zip(WEEKDAYS, schedule.days):
        previous: Optional[tuple[int, int, TimeRange]] = None
        parsed = []
        for rng in entry.ranges:
            pair = rng.bounds()
            if pair is None:
                problems.append(f"{name}: invalid range {rng.start}-{rng.end}")
                continue
            parsed.append((pair[0], pair[1], rng))
        for current in sorted(parsed, key=lambda item: (item[0], item[1])):
            if previous is not None and current[0] < previous[1]:
                problems.append(
                    f"{name}: {current[2].start}-{current[2].end} overlaps "
                    f"{previous[2].start}-{previous[2].end}"
                )
            previous = current
        if entry.enabled and not entry.ranges:
            problems.append(f"{name}: enabled without any ranges")
    if problems:
        raise InvalidScheduleConfiguration(problems)


def infer_granularity(
    service_durations: Iterable[int], configured: Optional[int] = None
) -> int:
    """
    Slot granularity for a business.

    An explicitly configured value wins. Otherwise the largest allowed
    granularity not exceeding the shortest service duration is used,
    falling back to the smallest allowed value for very short services
    and to the configured default when the business has no services.
    """
    if configured is not None and configured > 0:
        return configured

    durations = [d for d in service_durations if d and d > 0]
    if not durations:
        return settings.schedule.default_granularity_minutes

    shortest = min(durations)
    allowed = settings.schedule.allowed_granularities
    fitting = [value for value in allowed if value <= shortest]
    return max(fitting) if fitting else min(allowed)
