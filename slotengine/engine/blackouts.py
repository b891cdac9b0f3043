"""Blackout resolution: does an instant range touch a holiday or leave period?"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from slotengine.engine.timezones import day_bounds, ensure_aware, resolve_zone
from slotengine.schemas.blackout_schema import BlackoutPeriod, BlackoutScope
from slotengine.schemas.booking_schema import employee_scope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlackoutMatch:
    """Outcome of a blackout check."""
    blocked: bool
    matching: Optional[BlackoutPeriod] = None

    @property
    def reason(self) -> Optional[str]:
        return self.matching.reason if self.matching else None


NOT_BLOCKED = BlackoutMatch(blocked=False)


def blackout_span(blackout: BlackoutPeriod, zone: ZoneInfo) -> tuple[datetime, datetime]:
    """Start date 00:00:00 local through end date 23:59:59.999 local, in UTC."""
    start, _ = day_bounds(blackout.start_date, zone)
    _, end = day_bounds(blackout.end_date, zone)
    return start, end


def is_blocked(
    range_start: datetime,
    range_end: datetime,
    blackouts: Iterable[BlackoutPeriod],
    zone: Optional[ZoneInfo] = None,
) -> BlackoutMatch:
    """First blackout, in input order, overlapping ``[range_start, range_end)``."""
    zone = zone or resolve_zone()
    range_start = ensure_aware(range_start)
    range_end = ensure_aware(range_end)
    for blackout in blackouts:
        blackout_start, blackout_end = blackout_span(blackout, zone)
        if range_start < blackout_end and range_end > blackout_start:
            logger.debug("Range %s-%s hits blackout %s", range_start, range_end, blackout.id)
            return BlackoutMatch(blocked=True, matching=blackout)
    return NOT_BLOCKED


def applies_to_scope(blackout: BlackoutPeriod, resource_scope: Optional[str]) -> bool:
    """Business blackouts cover every scope; employee leave covers that employee only."""
    if blackout.scope == BlackoutScope.BUSINESS:
        return True
    return resource_scope == employee_scope(blackout.scope_id)


def blackouts_for_scope(
    blackouts: Iterable[BlackoutPeriod], resource_scope: Optional[str]
) -> list[BlackoutPeriod]:
    return [b for b in blackouts if applies_to_scope(b, resource_scope)]


def find_overlapping(
    blackouts: Iterable[BlackoutPeriod], candidate: BlackoutPeriod
) -> Optional[BlackoutPeriod]:
    """First stored blackout of the same scope sharing a date with ``candidate``."""
    for blackout in blackouts:
        if (blackout.scope, blackout.scope_id) != (candidate.scope, candidate.scope_id):
            continue
        if blackout.start_date <= candidate.end_date and candidate.start_date <= blackout.end_date:
            return blackout
    return None
