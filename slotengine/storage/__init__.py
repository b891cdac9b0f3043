from slotengine.storage.base import BookingStore
from slotengine.storage.memory import InMemoryBookingStore
from slotengine.storage.policy import business_requires_consent, initial_status

__all__ = [
    "BookingStore", "InMemoryBookingStore",
    "business_requires_consent", "initial_status",
]
