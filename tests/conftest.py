"""Shared test fixtures and helpers."""

from datetime import date, datetime, timezone
from typing import Optional

import pytest

from slotengine.engine.conflict_validator import ConflictValidator
from slotengine.schemas.blackout_schema import BlackoutPeriod, BlackoutScope
from slotengine.schemas.booking_schema import ActorRole, Booking, BookingStatus, CommitRequest
from slotengine.schemas.schedule_schema import WorkingHoursSchedule
from slotengine.storage.memory import InMemoryBookingStore

UTC = timezone.utc

# Monday morning; DAY is the following Tuesday.
NOW = datetime(2025, 3, 17, 9, 0, tzinfo=UTC)
DAY = date(2025, 3, 18)
BUSINESS_ID = "biz-1"


def at(hhmm: str, day: date = DAY) -> datetime:
    """UTC instant for ``HH:MM`` on ``day``."""
    hours, minutes = (int(part) for part in hhmm.split(":"))
    return datetime(day.year, day.month, day.day, hours, minutes, tzinfo=UTC)


def utc_schedule(start: str = "08:00", end: str = "19:00") -> WorkingHoursSchedule:
    return WorkingHoursSchedule.uniform(start, end, timezone="UTC")


def make_booking(
    start: datetime,
    duration_minutes: Optional[int] = 60,
    booking_id: str = "BK-TEST",
    resource_scope: Optional[str] = None,
    status: BookingStatus = BookingStatus.CONFIRMED,
    reminder_sent_at: Optional[datetime] = None,
    business_id: str = BUSINESS_ID,
) -> Booking:
    """Helper to create a Booking with sensible defaults."""
    return Booking(
        id=booking_id,
        business_id=business_id,
        resource_scope=resource_scope,
        start=start,
        duration_minutes=duration_minutes,
        status=status,
        reminder_sent_at=reminder_sent_at,
    )


def make_blackout(
    start_date: date,
    end_date: Optional[date] = None,
    blackout_id: str = "BO-1",
    reason: Optional[str] = "Sărbătoare legală",
    employee_id: Optional[str] = None,
) -> BlackoutPeriod:
    return BlackoutPeriod(
        id=blackout_id,
        scope=BlackoutScope.EMPLOYEE if employee_id else BlackoutScope.BUSINESS,
        scope_id=employee_id,
        start_date=start_date,
        end_date=end_date or start_date,
        reason=reason,
    )


def make_request(
    start: datetime,
    duration_minutes: int = 60,
    resource_scope: Optional[str] = None,
    actor_role: ActorRole = ActorRole.CLIENT,
    requires_consent: bool = False,
    granularity_minutes: Optional[int] = None,
) -> CommitRequest:
    return CommitRequest(
        business_id=BUSINESS_ID,
        resource_scope=resource_scope,
        client_id="client-1",
        start=start,
        duration_minutes=duration_minutes,
        granularity_minutes=granularity_minutes,
        requires_consent=requires_consent,
        actor_role=actor_role,
    )


@pytest.fixture
def store():
    store = InMemoryBookingStore()
    store.set_schedule(BUSINESS_ID, utc_schedule())
    store.set_granularity(BUSINESS_ID, 60)
    return store


@pytest.fixture
def validator(store):
    return ConflictValidator(store)


class InterleavingStore(InMemoryBookingStore):
    """Runs ``before_lock`` once, just before the next commit scope is taken."""

    def __init__(self) -> None:
        super().__init__()
        self.before_lock = None

    def commit_scope(self, business_id, resource_scope=None):
        hook, self.before_lock = self.before_lock, None
        if hook is not None:
            hook()
        return super().commit_scope(business_id, resource_scope)


@pytest.fixture
def interleaving_store():
    store = InterleavingStore()
    store.set_schedule(BUSINESS_ID, utc_schedule())
    store.set_granularity(BUSINESS_ID, 60)
    return store
