"""Shared time-of-day helpers used across the slot engine."""

import re
from typing import Optional

_HHMM = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")

MINUTES_PER_DAY = 24 * 60


def parse_hhmm(value: str) -> Optional[int]:
    """Parse an ``HH:MM`` wall-clock label into minutes since midnight.

    Returns None for anything that is not a valid time of day. ``24:00`` is
    accepted as the end-of-day boundary so ranges can close at midnight.

    Examples:
        >>> parse_hhmm("08:30")
        510
        >>> parse_hhmm("24:00")
        1440
        >>> parse_hhmm("8h") is None
        True
    """
    if not isinstance(value, str):
        return None
    match = _HHMM.match(value)
    if not match:
        return None
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59:
        return None
    total = hours * 60 + minutes
    if total > MINUTES_PER_DAY:
        return None
    return total


def format_hhmm(minutes: int) -> str:
    """Format minutes since midnight as a zero-padded ``HH:MM`` label."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
