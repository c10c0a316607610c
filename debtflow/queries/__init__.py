"""Dashboard query package."""

from debtflow.queries.dashboard import (
    DashboardQuery,
    build_debt_overview,
    calculate_progress,
    calculate_summary,
    find_overdue_installments,
    percent,
)

__all__ = [
    "DashboardQuery",
    "build_debt_overview",
    "calculate_progress",
    "calculate_summary",
    "find_overdue_installments",
    "percent",
]
