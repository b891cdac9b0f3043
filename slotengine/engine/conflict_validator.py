"""
Commit-time conflict validation: the authoritative booking check.

Availability shown to a client may be minutes old. Before a booking is
persisted the validator re-reads schedules, blackouts and bookings from the
store and re-runs every check against that live data, inside the store's
``commit_scope`` so no other commit for the same scope can interleave
between the check and the insert.

Checks, in order, each raising a specific ConflictError:
1. minimum lead time        -> SlotTooSoon
2. inside working hours     -> SlotOutsideWorkingHours
3. blackout over the span   -> SlotBlocked
4. booking overlap          -> SlotOverlap
5. lead time, blackout and overlap again for every sub-slot of a
   multi-slot service

Usage:
    validator = ConflictValidator(store)
    try:
        booking = validator.validate_and_commit(request, now=now)
    except ConflictError as exc:
        show(exc.message)
"""

import uuid
from datetime import datetime, timedelta
from typing import Optional, Union
from zoneinfo import ZoneInfo

from slotengine.config import settings
from slotengine.engine.availability import slots_needed
from slotengine.engine.blackouts import blackouts_for_scope, is_blocked
from slotengine.engine.booking_index import BookingIndex
from slotengine.engine.errors import (
    BookingNotFound,
    CancellationWindowClosed,
    ConflictError,
    SlotBlocked,
    SlotOutsideWorkingHours,
    SlotOverlap,
    SlotTooSoon,
)
from slotengine.engine.timezones import ensure_aware, resolve_zone, to_local
from slotengine.engine.timing_policy import cancellation_status, is_elevated, is_too_soon
from slotengine.engine.working_hours import covers_span
from slotengine.logging_context import get_commit_logger, new_commit_id
from slotengine.schemas.blackout_schema import BlackoutPeriod
from slotengine.schemas.booking_schema import ActorRole, Booking, BookingStatus, CommitRequest
from slotengine.storage.base import BookingStore
from slotengine.storage.policy import initial_status

logger = get_commit_logger(__name__)

Role = Union[ActorRole, str, None]


def _new_booking_id() -> str:
    return f"BK-{uuid.uuid4().hex[:8].upper()}"


class ConflictValidator:
    """Re-validates and persists bookings against live store data."""

    def __init__(self, store: BookingStore) -> None:
        self.store = store

    def _granularity(
        self, business_id: str, requested: Optional[int] = None, actor_role: Role = None
    ) -> int:
        """The business's slot size; only elevated roles may override it."""
        if requested and is_elevated(actor_role):
            return requested
        if requested:
            logger.debug("Ignoring client granularity override %d for %s", requested, business_id)
        return (
            self.store.get_granularity(business_id)
            or settings.schedule.default_granularity_minutes
        )

    def _check_window(
        self,
        start: datetime,
        end: datetime,
        now: datetime,
        skip_lead_time: bool,
        blackouts: list[BlackoutPeriod],
        index: BookingIndex,
        resource_scope: Optional[str],
        exclude_id: Optional[str],
        zone: ZoneInfo,
    ) -> None:
        if not skip_lead_time and is_too_soon(start, now):
            raise SlotTooSoon(slot_start=start)
        match = is_blocked(start, end, blackouts, zone)
        if match.blocked:
            raise SlotBlocked(match.matching, slot_start=start)
        if index.has_overlap(start, end, resource_scope, exclude_id):
            raise SlotOverlap(slot_start=start)

    def check(
        self,
        business_id: str,
        resource_scope: Optional[str],
        start: datetime,
        duration_minutes: int,
        now: datetime,
        actor_role: Role = ActorRole.CLIENT,
        granularity_minutes: Optional[int] = None,
        exclude_id: Optional[str] = None,
    ) -> None:
        """
        Run every commit-time check without persisting anything.

        The checked span is rounded up to whole slots, so a 45 minute
        service on a 30 minute grid reserves the trailing 15 minutes too.

        Raises:
            SlotTooSoon, SlotOutsideWorkingHours, SlotBlocked, SlotOverlap:
            on the first failure.
        """
        granularity = self._granularity(business_id, granularity_minutes, actor_role)
        needed = slots_needed(duration_minutes, granularity)
        step = timedelta(minutes=granularity)
        start = ensure_aware(start)
        end = start + needed * step
        now = ensure_aware(now)
        skip_lead_time = is_elevated(actor_role)

        if not skip_lead_time and is_too_soon(start, now):
            raise SlotTooSoon(slot_start=start)

        schedule = self.store.get_schedule(business_id, resource_scope)
        zone = resolve_zone(schedule.timezone if schedule else None)
        local_start = to_local(start, zone)
        if not covers_span(
            schedule,
            local_start.date(),
            local_start.hour * 60 + local_start.minute,
            needed * granularity,
        ):
            raise SlotOutsideWorkingHours(slot_start=start)

        blackouts = blackouts_for_scope(self.store.get_blackouts(business_id), resource_scope)
        index = BookingIndex(
            self.store.get_bookings(business_id, resource_scope), granularity, zone
        )

        self._check_window(
            start, end, now, skip_lead_time, blackouts, index, resource_scope, exclude_id, zone
        )
        for offset in range(needed):
            sub_start = start + offset * step
            self._check_window(
                sub_start, sub_start + step, now, skip_lead_time,
                blackouts, index, resource_scope, exclude_id, zone,
            )

    def validate_and_commit(self, request: CommitRequest, now: datetime) -> Booking:
        """Check ``request`` against live data and persist it on success."""
        new_commit_id()
        now = ensure_aware(now)
        with self.store.commit_scope(request.business_id, request.resource_scope):
            try:
                self.check(
                    request.business_id,
                    request.resource_scope,
                    request.start,
                    request.duration_minutes,
                    now,
                    actor_role=request.actor_role,
                    granularity_minutes=request.granularity_minutes,
                )
            except ConflictError as exc:
                logger.info(
                    "Commit rejected for %s scope=%s at %s: %s",
                    request.business_id, request.resource_scope,
                    request.start.isoformat(), exc.reason,
                )
                raise

            booking = Booking(
                id=_new_booking_id(),
                business_id=request.business_id,
                resource_scope=request.resource_scope,
                client_id=request.client_id,
                start=request.start,
                duration_minutes=request.duration_minutes,
                status=initial_status(request.requires_consent),
                paid=request.paid,
                created_at=now,
            )
            self.store.add_booking(booking)

        logger.info(
            "Booking committed: %s for %s scope=%s at %s (%s)",
            booking.id, booking.business_id, booking.resource_scope,
            booking.start.isoformat(), booking.status.value,
        )
        return booking

    def _require_booking(self, booking_id: str) -> Booking:
        booking = self.store.get_booking(booking_id)
        if booking is None:
            raise BookingNotFound(booking_id)
        return booking

    def _require_cancellable(
        self, booking: Booking, now: datetime, actor_role: Role, action: str
    ) -> None:
        decision = cancellation_status(booking.start, now, booking.reminder_sent_at, actor_role)
        if not decision.allowed:
            logger.info("%s refused for %s: %s", action, booking.id, decision.reason)
            raise CancellationWindowClosed(decision.message, reason=decision.reason)

    def cancel(self, booking_id: str, now: datetime, actor_role: Role = ActorRole.CLIENT) -> Booking:
        """Cancel a booking if the cancellation policy allows it at ``now``.

        Cancelling an already cancelled booking returns it unchanged. The
        booking is re-read inside the commit scope so a concurrent
        reschedule is never overwritten with a stale start.
        """
        new_commit_id("CANCEL")
        located = self._require_booking(booking_id)
        with self.store.commit_scope(located.business_id, located.resource_scope):
            booking = self._require_booking(booking_id)
            if not booking.is_active:
                logger.debug("Booking %s already cancelled", booking_id)
                return booking
            self._require_cancellable(booking, now, actor_role, "Cancellation")
            cancelled = booking.model_copy(update={"status": BookingStatus.CANCELLED})
            self.store.update_booking(cancelled)

        logger.info("Booking cancelled: %s", booking_id)
        return cancelled

    def reschedule(
        self,
        booking_id: str,
        new_start: datetime,
        now: datetime,
        actor_role: Role = ActorRole.CLIENT,
        granularity_minutes: Optional[int] = None,
    ) -> Booking:
        """
        Move an active booking to ``new_start``.

        The old slot must still be cancellable by ``actor_role`` and the new
        span must pass every commit-time check, ignoring the booking itself.
        Status and policy are re-checked on a fresh read inside the commit
        scope, so a booking cancelled meanwhile is never revived.
        """
        new_commit_id("RESCHEDULE")
        located = self._require_booking(booking_id)
        with self.store.commit_scope(located.business_id, located.resource_scope):
            booking = self._require_booking(booking_id)
            if not booking.is_active:
                raise BookingNotFound(booking_id)
            self._require_cancellable(booking, now, actor_role, "Reschedule")

            granularity = self._granularity(booking.business_id, granularity_minutes, actor_role)
            try:
                self.check(
                    booking.business_id,
                    booking.resource_scope,
                    new_start,
                    booking.duration_minutes or granularity,
                    now,
                    actor_role=actor_role,
                    granularity_minutes=granularity_minutes,
                    exclude_id=booking.id,
                )
            except ConflictError as exc:
                logger.info("Reschedule rejected for %s: %s", booking_id, exc.reason)
                raise
            moved = booking.model_copy(
                update={"start": ensure_aware(new_start), "reminder_sent_at": None}
            )
            self.store.update_booking(moved)

        logger.info("Booking rescheduled: %s to %s", booking_id, moved.start.isoformat())
        return moved
