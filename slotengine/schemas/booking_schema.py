"""Booking and commit-request data models."""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class BookingStatus(str, Enum):
    PENDING_CONSENT = "PENDING_CONSENT"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"


class ActorRole(str, Enum):
    """Who is acting on a booking; elevated roles bypass timing policy."""

    CLIENT = "CLIENT"
    BUSINESS = "BUSINESS"
    EMPLOYEE = "EMPLOYEE"
    SUPERADMIN = "SUPERADMIN"


def employee_scope(employee_id: str) -> str:
    """Resource-scope key for bookings held against one employee."""
    return f"employee:{employee_id}"


def court_scope(court_id: str) -> str:
    """Resource-scope key for bookings held against one court."""
    return f"court:{court_id}"


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Booking(BaseModel):
    """A reserved time range for one resource scope of a business."""

    id: str
    business_id: str
    resource_scope: Optional[str] = None
    client_id: Optional[str] = None
    start: datetime
    duration_minutes: Optional[int] = Field(default=None, gt=0)
    status: BookingStatus = BookingStatus.CONFIRMED
    paid: bool = False
    reminder_sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @field_validator("start", "reminder_sent_at", "created_at")
    @classmethod
    def _normalize_instant(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)

    @property
    def is_active(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    def end(self, default_duration_minutes: int) -> datetime:
        """End instant, using the default duration when none is recorded."""
        minutes = self.duration_minutes or default_duration_minutes
        return self.start + timedelta(minutes=minutes)


class CommitRequest(BaseModel):
    """A client or staff request to reserve ``[start, start + duration)``."""

    business_id: str
    resource_scope: Optional[str] = None
    client_id: Optional[str] = None
    start: datetime
    duration_minutes: int = Field(gt=0)
    granularity_minutes: Optional[int] = Field(default=None, gt=0)
    paid: bool = False
    requires_consent: bool = False
    actor_role: ActorRole = ActorRole.CLIENT

    @field_validator("start")
    @classmethod
    def _normalize_start(cls, value: datetime) -> datetime:
        return _as_utc(value)
