"""Debt status derivation."""

from datetime import date
from typing import Optional

from debtflow.models.debt import Debt, DebtStatus, Installment


def is_overdue(installment: Installment, today: date) -> bool:
    """Unpaid and due strictly before today (day granularity)."""
    return not installment.is_paid and installment.due_date < today


def calculate_debt_status(debt: Debt, today: Optional[date] = None) -> DebtStatus:
    """
    Derive the debt's status from its installments.

    PAID_OFF wins first, so an empty schedule counts as paid off.
    """
    if all(inst.is_paid for inst in debt.installments):
        return DebtStatus.PAID_OFF

    today = today or date.today()
    if any(is_overdue(inst, today) for inst in debt.installments):
        return DebtStatus.LATE

    return DebtStatus.ON_TIME
