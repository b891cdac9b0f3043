"""Query-time slot classification and timing decision models."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SlotStatus(str, Enum):
    AVAILABLE = "available"
    BOOKED = "booked"
    PAST = "past"
    BLOCKED = "blocked"


class CandidateSlot(BaseModel):
    """One classified slot start. Recomputed on every query, never stored."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    label: str
    status: SlotStatus
    reason: Optional[str] = None
    blackout_id: Optional[str] = None

    @property
    def is_available(self) -> bool:
        return self.status == SlotStatus.AVAILABLE


class DayAvailability(BaseModel):
    """Classified slots for one calendar day."""

    day: date
    slots: list[CandidateSlot] = Field(default_factory=list)

    @property
    def available_labels(self) -> list[str]:
        return [slot.label for slot in self.slots if slot.is_available]


class TimingDecision(BaseModel):
    """Whether a creation or cancellation is currently permitted."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    message: Optional[str] = None
    reason: Optional[str] = None
