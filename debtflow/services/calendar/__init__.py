"""Calendar deep-link helpers."""

from debtflow.services.calendar.google_calendar import (
    GOOGLE_CALENDAR_URL,
    build_calendar_event_url,
    build_installment_reminder_url,
)

__all__ = [
    "GOOGLE_CALENDAR_URL",
    "build_calendar_event_url",
    "build_installment_reminder_url",
]
