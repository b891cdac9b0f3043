"""Weekly working-hours data models."""

from datetime import date
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from slotengine.utils import parse_hhmm

WEEKDAYS: tuple[str, ...] = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)


class TimeRange(BaseModel):
    """A local wall-clock working period, ``HH:MM`` to ``HH:MM``."""

    model_config = ConfigDict(frozen=True)

    start: str
    end: str

    def bounds(self) -> Optional[tuple[int, int]]:
        """Return (start, end) in minutes since midnight, or None if malformed."""
        start = parse_hhmm(self.start)
        end = parse_hhmm(self.end)
        if start is None or end is None or start >= end:
            return None
        return start, end


class DaySchedule(BaseModel):
    """One weekday entry: closed, or open over one or more ranges."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    ranges: tuple[TimeRange, ...] = ()

    @classmethod
    def closed(cls) -> "DaySchedule":
        return cls(enabled=False)

    @classmethod
    def open_ranges(cls, *ranges: tuple[str, str]) -> "DaySchedule":
        return cls(
            enabled=True,
            ranges=tuple(TimeRange(start=start, end=end) for start, end in ranges),
        )

    @property
    def is_open(self) -> bool:
        return self.enabled and bool(self.ranges)


class WorkingHoursSchedule(BaseModel):
    """
    Weekly schedule for a business or an employee.

    ``days`` always holds exactly seven entries, Monday first, so an
    unknown day key can never reach the resolver.
    """

    model_config = ConfigDict(frozen=True)

    days: tuple[DaySchedule, ...] = Field(
        default_factory=lambda: tuple(DaySchedule.closed() for _ in WEEKDAYS)
    )
    timezone: Optional[str] = None

    @field_validator("days")
    @classmethod
    def _seven_days(cls, value: tuple[DaySchedule, ...]) -> tuple[DaySchedule, ...]:
        if len(value) != len(WEEKDAYS):
            raise ValueError(f"A weekly schedule needs 7 day entries, got {len(value)}")
        return value

    def for_weekday(self, weekday: int) -> DaySchedule:
        """Entry for ``date.weekday()`` numbering (0 = Monday)."""
        return self.days[weekday]

    def for_day(self, day: date) -> DaySchedule:
        return self.days[day.weekday()]

    @classmethod
    def uniform(
        cls,
        start: str,
        end: str,
        weekdays: tuple[int, ...] = tuple(range(7)),
        timezone: Optional[str] = None,
    ) -> "WorkingHoursSchedule":
        """Same single range on every listed weekday, other days closed."""
        days = tuple(
            DaySchedule.open_ranges((start, end)) if idx in weekdays else DaySchedule.closed()
            for idx in range(len(WEEKDAYS))
        )
        return cls(days=days, timezone=timezone)

    @classmethod
    def from_mapping(
        cls, data: Mapping[str, Any], timezone: Optional[str] = None
    ) -> "WorkingHoursSchedule":
        """
        Build a schedule from the settings record keyed by day name.

        Accepts ``{"monday": {"enabled": true, "slots": [{"start": "09:00",
        "end": "17:00"}]}, ...}``; ``ranges`` is accepted as an alias of
        ``slots``. Missing days are closed, unknown keys raise ValueError.
        """
        unknown = sorted(key for key in data if key.lower() not in WEEKDAYS)
        if unknown:
            raise ValueError(f"Unknown weekday keys: {', '.join(unknown)}")

        lowered = {key.lower(): value for key, value in data.items()}
        days = []
        for name in WEEKDAYS:
            entry = lowered.get(name) or {}
            raw_ranges = entry.get("slots", entry.get("ranges")) or []
            days.append(
                DaySchedule(
                    enabled=bool(entry.get("enabled", False)),
                    ranges=tuple(
                        TimeRange(start=str(r.get("start", "")), end=str(r.get("end", "")))
                        for r in raw_ranges
                    ),
                )
            )
        return cls(days=tuple(days), timezone=timezone)
