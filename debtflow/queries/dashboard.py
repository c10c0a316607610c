"""
Dashboard Queries

DESIGN DECISION: Everything the dashboard shows is DERIVED from the debt
collection on every read. Nothing here is cached or persisted, so the
numbers can never drift from the stored installments.
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from debtflow.models.debt import (
    DashboardSummary,
    DashboardView,
    Debt,
    DebtOverview,
    OverdueItem,
    ProgressStats,
)
from debtflow.schedule.status import calculate_debt_status, is_overdue


def percent(part: int, whole: int) -> int:
    """Whole percentage, rounded half up; 0 when there is nothing to count."""
    if whole <= 0:
        return 0
    ratio = Decimal(part * 100) / Decimal(whole)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_summary(debts: list[Debt]) -> DashboardSummary:
    """
    Totals across all debts.

    Paid = down payments + value of paid installments.
    """
    total_debt = sum((debt.total_value for debt in debts), Decimal("0"))
    total_paid = sum(
        (debt.down_payment + debt.paid_installments_value for debt in debts),
        Decimal("0"),
    )
    return DashboardSummary(
        total_debt=total_debt,
        total_paid=total_paid,
        total_remaining=total_debt - total_paid,
        debts_count=len(debts),
    )


def find_overdue_installments(
    debts: list[Debt],
    today: Optional[date] = None,
) -> list[OverdueItem]:
    """Every unpaid installment due before today, in collection order."""
    today = today or date.today()
    return [
        OverdueItem(
            debt_id=debt.id,
            debt_description=debt.description,
            installment_id=inst.id,
            number=inst.number,
            value=inst.value,
            due_date=inst.due_date,
        )
        for debt in debts
        for inst in debt.installments
        if is_overdue(inst, today)
    ]


def calculate_progress(debts: list[Debt]) -> ProgressStats:
    """Paid vs. total installment counts across all debts."""
    total = sum(debt.total_installments for debt in debts)
    paid = sum(debt.paid_count for debt in debts)
    return ProgressStats(
        total_installments=total,
        paid_installments=paid,
        percentage=percent(paid, total),
    )


def build_debt_overview(debt: Debt, today: Optional[date] = None) -> DebtOverview:
    """Card data for a single debt."""
    next_inst = debt.next_installment
    return DebtOverview(
        debt_id=debt.id,
        description=debt.description,
        status=calculate_debt_status(debt, today),
        total_value=debt.total_value,
        installment_value=debt.installment_value,
        paid_count=debt.paid_count,
        total_installments=debt.total_installments,
        next_due_date=next_inst.due_date if next_inst else None,
        progress_percent=percent(debt.paid_count, debt.total_installments),
    )


class DashboardQuery:
    """Builds the full dashboard view from a debt collection."""

    def build(self, debts: list[Debt], today: Optional[date] = None) -> DashboardView:
        today = today or date.today()
        overdue = find_overdue_installments(debts, today)
        return DashboardView(
            summary=calculate_summary(debts),
            overdue=overdue,
            overdue_total=sum((item.value for item in overdue), Decimal("0")),
            progress=calculate_progress(debts),
            debts=[build_debt_overview(debt, today) for debt in debts],
        )
