"""
User-facing messages surfaced verbatim by the booking UI.

The wording is part of the public contract: clients match on these
strings, so change them only together with the UI.
"""

MIN_LEAD_MESSAGE = "Rezervările se pot face cu minim 2 ore înainte."
CANCELLATION_LIMIT_MESSAGE = (
    "Rezervarea nu mai poate fi anulată. Ai depășit limita de anulare."
)
REMINDER_LIMIT_MESSAGE = "Timpul de anulare după reminder a expirat."
SLOT_OVERLAP_MESSAGE = "Acest interval tocmai a devenit indisponibil."
BLACKOUT_DEFAULT_MESSAGE = "Perioadă indisponibilă (concediu sau sărbătoare)."
OUTSIDE_WORKING_HOURS_MESSAGE = (
    "Rezervarea nu poate fi făcută în afara orelor de lucru ale business-ului."
)
BLACKOUT_OVERLAP_MESSAGE = (
    "Există deja o perioadă de concediu care se suprapune cu această perioadă."
)
CONSECUTIVE_RUN_MESSAGE = (
    "Serviciul necesită {slots_needed} sloturi consecutive. "
    "Unele sloturi nu sunt disponibile."
)


def consecutive_run_message(slots_needed: int) -> str:
    return CONSECUTIVE_RUN_MESSAGE.format(slots_needed=slots_needed)
