"""Tests for the in-memory booking store and consent policy lookup."""

from datetime import timedelta

import pytest

from slotengine.engine import messages
from slotengine.engine.errors import BlackoutOverlap
from slotengine.schemas.booking_schema import BookingStatus, employee_scope
from slotengine.storage.base import BookingStore
from slotengine.storage.memory import InMemoryBookingStore
from slotengine.storage.policy import business_requires_consent, initial_status
from tests.conftest import BUSINESS_ID, DAY, at, make_blackout, make_booking, utc_schedule


class TestInMemoryStore:
    def test_satisfies_protocol(self, store):
        assert isinstance(store, BookingStore)

    def test_employee_schedule_falls_back_to_business(self, store):
        ana = employee_scope("ana")
        assert store.get_schedule(BUSINESS_ID, ana) == utc_schedule()
        own = utc_schedule("10:00", "14:00")
        store.set_schedule(BUSINESS_ID, own, resource_scope=ana)
        assert store.get_schedule(BUSINESS_ID, ana) == own
        assert store.get_schedule(BUSINESS_ID) == utc_schedule()

    def test_unknown_business_has_no_schedule(self, store):
        assert store.get_schedule("biz-unknown") is None
        assert store.get_granularity("biz-unknown") is None

    def test_invalid_granularity_rejected(self, store):
        with pytest.raises(ValueError):
            store.set_granularity(BUSINESS_ID, 0)

    def test_bookings_filtered_by_exact_scope(self, store):
        store.add_booking(make_booking(at("10:00"), booking_id="BK-1"))
        store.add_booking(
            make_booking(at("10:00"), booking_id="BK-2", resource_scope=employee_scope("ana"))
        )
        assert [b.id for b in store.get_bookings(BUSINESS_ID)] == ["BK-1"]
        assert [b.id for b in store.get_bookings(BUSINESS_ID, employee_scope("ana"))] == ["BK-2"]

    def test_duplicate_id_rejected(self, store):
        store.add_booking(make_booking(at("10:00")))
        with pytest.raises(ValueError, match="already exists"):
            store.add_booking(make_booking(at("12:00")))

    def test_update_missing_booking(self, store):
        with pytest.raises(KeyError):
            store.update_booking(make_booking(at("10:00")))

    def test_remove_blackout(self, store):
        store.add_blackout(BUSINESS_ID, make_blackout(DAY))
        assert store.remove_blackout(BUSINESS_ID, "BO-1") is True
        assert store.remove_blackout(BUSINESS_ID, "BO-1") is False
        assert store.get_blackouts(BUSINESS_ID) == []

    def test_overlapping_business_blackout_rejected(self, store):
        holiday = make_blackout(DAY, DAY + timedelta(days=2))
        store.add_blackout(BUSINESS_ID, holiday)
        with pytest.raises(BlackoutOverlap) as exc_info:
            store.add_blackout(
                BUSINESS_ID, make_blackout(DAY + timedelta(days=1), blackout_id="BO-2")
            )
        assert exc_info.value.existing == holiday
        assert exc_info.value.message == messages.BLACKOUT_OVERLAP_MESSAGE
        assert store.get_blackouts(BUSINESS_ID) == [holiday]

    def test_blackout_overlap_is_value_error(self, store):
        store.add_blackout(BUSINESS_ID, make_blackout(DAY))
        with pytest.raises(ValueError):
            store.add_blackout(BUSINESS_ID, make_blackout(DAY, blackout_id="BO-2"))

    def test_adjacent_blackouts_accepted(self, store):
        store.add_blackout(BUSINESS_ID, make_blackout(DAY))
        store.add_blackout(BUSINESS_ID, make_blackout(DAY + timedelta(days=1), blackout_id="BO-2"))
        assert len(store.get_blackouts(BUSINESS_ID)) == 2

    def test_leave_may_fall_on_business_holiday(self, store):
        store.add_blackout(BUSINESS_ID, make_blackout(DAY))
        store.add_blackout(BUSINESS_ID, make_blackout(DAY, blackout_id="BO-2", employee_id="ana"))
        store.add_blackout(BUSINESS_ID, make_blackout(DAY, blackout_id="BO-3", employee_id="ion"))
        with pytest.raises(BlackoutOverlap):
            store.add_blackout(
                BUSINESS_ID, make_blackout(DAY, blackout_id="BO-4", employee_id="ana")
            )
        assert len(store.get_blackouts(BUSINESS_ID)) == 3

    def test_commit_scopes_are_independent(self, store):
        with store.commit_scope(BUSINESS_ID, employee_scope("ana")):
            with store.commit_scope(BUSINESS_ID, employee_scope("ion")):
                pass

    def test_reset(self, store):
        store.add_booking(make_booking(at("10:00")))
        store.reset()
        assert store.get_booking("BK-TEST") is None
        assert store.get_schedule(BUSINESS_ID) is None

    def test_fresh_store_is_empty(self):
        assert InMemoryBookingStore().get_blackouts(BUSINESS_ID) == []


class TestConsentPolicy:
    @pytest.mark.parametrize("business_type", ["STOMATOLOGIE", "beauty", "Psihologie"])
    def test_consent_types(self, business_type):
        assert business_requires_consent(business_type) is True

    @pytest.mark.parametrize("business_type", ["SPORT_OUTDOOR", "", None])
    def test_no_consent(self, business_type):
        assert business_requires_consent(business_type) is False

    def test_initial_status(self):
        assert initial_status(True) == BookingStatus.PENDING_CONSENT
        assert initial_status(False) == BookingStatus.CONFIRMED
