"""Display formatting for amounts and dates."""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from debtflow.config import get_settings
from debtflow.schedule.generator import CENTS, Number, to_decimal

DateLike = Union[date, datetime, str, None]

EMPTY_DATE = "-"


def format_currency(value: Number) -> str:
    """
    Format an amount as currency, e.g. ``R$ 1.234,56``.

    Symbol and separators come from AppSettings.
    """
    settings = get_settings().app
    amount = to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)

    # Format with placeholder separators, then swap in the configured ones
    body = f"{abs(amount):,.2f}"
    body = (
        body.replace(",", "\x00")
        .replace(".", settings.decimal_separator)
        .replace("\x00", settings.thousands_separator)
    )

    sign = "-" if amount < 0 else ""
    return f"{sign}{settings.currency_symbol} {body}"


def _to_date(value: DateLike) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # ISO string; only the calendar part matters
    return date.fromisoformat(value[:10])


def format_date(value: DateLike) -> str:
    """Format a calendar date, or '-' when there is none."""
    day = _to_date(value)
    if day is None:
        return EMPTY_DATE
    return day.strftime(get_settings().app.date_format)


def format_datetime(value: Union[datetime, str, None]) -> str:
    """Format a timestamp (reminders), or '-' when there is none."""
    if value is None or value == "":
        return EMPTY_DATE
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return value.strftime(get_settings().app.datetime_format)


def format_percentage(value: int) -> str:
    return f"{value}%"
