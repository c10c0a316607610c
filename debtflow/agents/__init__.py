"""AI Agents package."""

from debtflow.agents.advisor import (
    FALLBACK_NO_ANALYSIS,
    FALLBACK_UNAVAILABLE,
    NO_DEBTS_MESSAGE,
    NO_DUE_DATE,
    DebtAdvisorAgent,
    DebtSummaryItem,
    PriorityAdvice,
    summarize_debts,
)

__all__ = [
    "FALLBACK_NO_ANALYSIS",
    "FALLBACK_UNAVAILABLE",
    "NO_DEBTS_MESSAGE",
    "NO_DUE_DATE",
    "DebtAdvisorAgent",
    "DebtSummaryItem",
    "PriorityAdvice",
    "summarize_debts",
]
