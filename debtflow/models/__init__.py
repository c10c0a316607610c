"""
Data Models Package

This package contains all Pydantic models used in DebtFlow.
All data flowing through the application must conform to these schemas.
"""

from debtflow.models.debt import (
    DashboardSummary,
    DashboardView,
    Debt,
    DebtOverview,
    DebtStatus,
    Installment,
    OverdueItem,
    ProgressStats,
    utc_now,
)
from debtflow.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from debtflow.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Debt models
    "DashboardSummary",
    "DashboardView",
    "Debt",
    "DebtOverview",
    "DebtStatus",
    "Installment",
    "OverdueItem",
    "ProgressStats",
    "utc_now",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
