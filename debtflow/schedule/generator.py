"""
Installment schedule generation.

A schedule is a fixed number of equal installments, one calendar month
apart, starting on the first due date.

IMPORTANT: Generating a schedule always starts from scratch. Callers that
regenerate an existing debt's schedule throw away its payment and
reminder history - there is no reconciliation between old and new
installments.
"""

from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from debtflow.models.debt import Installment, utc_now

CENTS = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert form/number input to Decimal without float artifacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def add_months(start: date, months: int) -> date:
    """
    Advance a date by whole calendar months.

    When the day of month does not exist in the target month, the
    surplus days roll into the following month instead of clamping:

        add_months(date(2024, 1, 31), 1) == date(2024, 3, 2)
        add_months(date(2023, 1, 31), 1) == date(2023, 3, 3)
    """
    first_of_target = start.replace(day=1) + relativedelta(months=months)
    return first_of_target + timedelta(days=start.day - 1)


def generate_installments(
    count: int,
    amount: Number,
    first_due_date: date,
    paid_count: int = 0,
    now: Optional[datetime] = None,
) -> list[Installment]:
    """
    Build a fresh installment schedule.

    Args:
        count: Number of installments (0 gives an empty schedule)
        amount: Value of each installment
        first_due_date: Due date of installment #1
        paid_count: How many leading installments are already paid
        now: Timestamp stamped as paid_date (default: current UTC time)

    Returns:
        Installments numbered 1..count, one month apart

    Raises:
        ValueError: If count is negative or paid_count is outside [0, count]
    """
    if count < 0:
        raise ValueError(f"Installment count cannot be negative: {count}")
    if paid_count < 0 or paid_count > count:
        raise ValueError(
            f"Paid installments ({paid_count}) must be between 0 and {count}"
        )

    value = to_decimal(amount)
    paid_at = now or utc_now()

    installments = []
    for i in range(count):
        is_paid = i < paid_count
        installments.append(Installment(
            number=i + 1,
            value=value,
            due_date=add_months(first_due_date, i),
            is_paid=is_paid,
            paid_date=paid_at if is_paid else None,
        ))

    return installments


def suggest_installment_value(
    total_value: Number,
    down_payment: Number,
    count: int,
) -> Decimal:
    """
    Split what is left after the down payment into equal installments.

    Rounded half-up to cents. A down payment above the total gives 0.00.
    """
    if count < 1:
        return Decimal("0.00")
    remaining = max(Decimal("0"), to_decimal(total_value) - to_decimal(down_payment))
    return (remaining / count).quantize(CENTS, rounding=ROUND_HALF_UP)


def predict_next_due_date(start_date: date, paid_count: int) -> date:
    """Due date of the first unpaid installment (number paid_count + 1)."""
    return add_months(start_date, max(0, paid_count))
