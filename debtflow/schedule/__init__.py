"""Installment schedule generation and status derivation."""

from debtflow.schedule.generator import (
    add_months,
    generate_installments,
    predict_next_due_date,
    suggest_installment_value,
    to_decimal,
)
from debtflow.schedule.status import calculate_debt_status, is_overdue

__all__ = [
    "add_months",
    "calculate_debt_status",
    "generate_installments",
    "is_overdue",
    "predict_next_due_date",
    "suggest_installment_value",
    "to_decimal",
]
