"""Consent policy lookup: which business types collect a signed form after booking."""

from typing import Optional

from slotengine.config import settings
from slotengine.schemas.booking_schema import BookingStatus


def business_requires_consent(business_type: Optional[str]) -> bool:
    if not business_type:
        return False
    return business_type.upper() in settings.policy.consent_required_types


def initial_status(requires_consent: bool) -> BookingStatus:
    """Status a freshly committed booking starts in."""
    return BookingStatus.PENDING_CONSENT if requires_consent else BookingStatus.CONFIRMED
