"""
Google Calendar deep links.

We don't talk to the Calendar API. We only build a "create event" URL the
user opens in a new tab, so no credentials are involved and no response is
read back.
"""

from datetime import datetime
from typing import Optional
from urllib.parse import quote

from debtflow.models.debt import Debt, Installment
from debtflow.utils.formatting import format_currency

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"

CALENDAR_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"

# Characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


def _encode(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def build_calendar_event_url(
    title: str,
    start: datetime,
    details: str,
    end: Optional[datetime] = None,
) -> str:
    """
    Build a Google Calendar "create event" link.

    ``end`` defaults to ``start`` (zero-duration event).
    """
    start_str = start.strftime(CALENDAR_TIMESTAMP_FORMAT)
    end_str = (end or start).strftime(CALENDAR_TIMESTAMP_FORMAT)
    return (
        f"{GOOGLE_CALENDAR_URL}?action=TEMPLATE"
        f"&text={_encode(title)}"
        f"&dates={start_str}/{end_str}"
        f"&details={_encode(details)}"
    )


def build_installment_reminder_url(
    debt: Debt,
    installment: Installment,
    reminder: datetime,
) -> str:
    """Calendar link reminding the user to pay one installment."""
    title = f"Pay installment {installment.number} - {debt.description}"
    details = (
        "Payment reminder created by DebtFlow.\n"
        f"Value: {format_currency(installment.value)}"
    )
    return build_calendar_event_url(title, reminder, details)
