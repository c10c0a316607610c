"""Debt form validation."""

from debtflow.validation.validator import MAX_INSTALLMENTS, DebtDraft, DebtFormValidator

__all__ = ["MAX_INSTALLMENTS", "DebtDraft", "DebtFormValidator"]
