"""
Booking timing policy: minimum lead time and cancellation windows.

Two independent rules, both keyed on an explicit ``now``:
1. Minimum lead time:   a booking may start no sooner than MIN_BOOKING_LEAD
2. Cancellation window: CANCELLATION_LIMIT before the start, or, once a
                         reminder went out, only within REMINDER_GRACE of it

Elevated roles (the business and its staff) bypass both rules.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Union

from slotengine.config import settings
from slotengine.engine import messages
from slotengine.engine.timezones import ensure_aware
from slotengine.schemas.booking_schema import ActorRole
from slotengine.schemas.slot_schema import TimingDecision

logger = logging.getLogger(__name__)

MIN_BOOKING_LEAD = timedelta(minutes=settings.timing.min_booking_lead_minutes)
CANCELLATION_LIMIT = timedelta(minutes=settings.timing.cancellation_limit_minutes)
REMINDER_GRACE = timedelta(minutes=settings.timing.reminder_grace_minutes)

ALLOWED = TimingDecision(allowed=True)


def is_elevated(role: Union[ActorRole, str, None]) -> bool:
    if role is None:
        return False
    value = role.value if isinstance(role, ActorRole) else str(role)
    return value.upper() in settings.policy.elevated_roles


def is_too_soon(start: datetime, now: datetime) -> bool:
    """True when ``start`` is less than MIN_BOOKING_LEAD after ``now``."""
    return ensure_aware(start) - ensure_aware(now) < MIN_BOOKING_LEAD


def earliest_bookable(now: datetime) -> datetime:
    return ensure_aware(now) + MIN_BOOKING_LEAD


def creation_status(
    start: datetime, now: datetime, actor_role: Union[ActorRole, str, None] = ActorRole.CLIENT
) -> TimingDecision:
    if is_elevated(actor_role):
        return ALLOWED
    if is_too_soon(start, now):
        return TimingDecision(
            allowed=False, message=messages.MIN_LEAD_MESSAGE, reason="too_soon"
        )
    return ALLOWED


def cancellation_status(
    start: datetime,
    now: datetime,
    reminder_sent_at: Optional[datetime] = None,
    actor_role: Union[ActorRole, str, None] = ActorRole.CLIENT,
) -> TimingDecision:
    """
    Whether a booking starting at ``start`` may be cancelled at ``now``.

    Once a reminder was sent, the grace window after it is the only thing
    that matters: cancellation is allowed up to ``reminder_sent_at +
    REMINDER_GRACE`` and refused afterwards, however far away the
    appointment still is.
    """
    if is_elevated(actor_role):
        return ALLOWED

    now = ensure_aware(now)
    if reminder_sent_at is not None:
        if now <= ensure_aware(reminder_sent_at) + REMINDER_GRACE:
            return ALLOWED
        return TimingDecision(
            allowed=False,
            message=messages.REMINDER_LIMIT_MESSAGE,
            reason="reminder_grace_expired",
        )

    if ensure_aware(start) - now < CANCELLATION_LIMIT:
        return TimingDecision(
            allowed=False,
            message=messages.CANCELLATION_LIMIT_MESSAGE,
            reason="cancellation_closed",
        )
    return ALLOWED
