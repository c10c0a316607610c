"""
Debt Priority Advisor

DESIGN DECISION: The advice feature is a single best-effort call to
Gemini. It is strictly optional:
1. Only runs when the user asks for it
2. Sees a compact summary, never the raw stored records
3. Never writes anything back
4. Any failure becomes a fixed fallback sentence

The LLM gets the deterministic facts (totals, remaining installments,
next due date, status) and is only asked to phrase a recommendation.
"""

import asyncio
import json
from datetime import date
from decimal import Decimal
from typing import Any, Optional

import google.generativeai as genai
from pydantic import BaseModel, Field

from debtflow.audit import AuditLogger, get_audit_logger
from debtflow.config import GeminiSettings, get_settings
from debtflow.models.debt import Debt
from debtflow.schedule.status import calculate_debt_status

NO_DUE_DATE = "N/A"

FALLBACK_NO_ANALYSIS = "It was not possible to generate an analysis right now."
FALLBACK_UNAVAILABLE = (
    "The virtual advisor is unavailable at the moment. Please try again later."
)
NO_DEBTS_MESSAGE = "You have no registered debts yet - add one to get advice."


class DebtSummaryItem(BaseModel):
    """What the advisor is told about one debt."""

    description: str
    total_value: Decimal
    remaining_installments: int = Field(ge=0)
    next_due_date: str = Field(
        ...,
        description="ISO date of the next unpaid installment, or 'N/A'"
    )
    status: str


class PriorityAdvice(BaseModel):
    """Advice text plus whether it actually came from the model."""

    advice: str
    generated: bool = Field(
        ...,
        description="False when the text is a fallback message"
    )


def summarize_debts(debts: list[Debt], today: Optional[date] = None) -> list[DebtSummaryItem]:
    """Deterministic per-debt facts handed to the model."""
    summary = []
    for debt in debts:
        next_inst = debt.next_installment
        summary.append(DebtSummaryItem(
            description=debt.description,
            total_value=debt.total_value,
            remaining_installments=len(debt.unpaid_installments),
            next_due_date=next_inst.due_date.isoformat() if next_inst else NO_DUE_DATE,
            status=calculate_debt_status(debt, today).label,
        ))
    return summary


class DebtAdvisorAgent:
    """
    AI agent that suggests which debt to prioritize.

    BOUNDARIES:
    - NEVER persists data
    - NEVER sees more than the summary
    - ALWAYS returns a string, even when the service is down
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model: Optional[Any] = None,
        language: Optional[str] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Args:
            settings: Gemini settings (default: loaded from the environment)
            model: Pre-built model exposing ``generate_content_async``.
                   Built from settings when omitted.
            language: Language of the answer (default: AppSettings)
            audit_logger: Where failures are logged
        """
        self._settings = settings or get_settings().gemini
        self._language = language or get_settings().app.advice_language
        self._audit_logger = audit_logger or get_audit_logger()
        self._model = model or self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        return genai.GenerativeModel(
            model_name=self._settings.model_name,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
            }
        )

    def build_prompt(self, summary: list[DebtSummaryItem]) -> str:
        data = json.dumps(
            [item.model_dump(mode="json") for item in summary],
            indent=2,
            ensure_ascii=False,
        )
        return f"""Act as a personal finance advisor. Analyze the list of debts below.

Goal: Give a short, motivating action plan (at most 3 sentences) focused on which debt to prioritize paying first.
Take due dates and status into account.

Data:
{data}

Answer in {self._language}."""

    async def get_priority_advice(
        self,
        debts: list[Debt],
        today: Optional[date] = None,
    ) -> PriorityAdvice:
        """
        Ask the model which debt to pay first.

        Never raises: timeouts, API errors and blocked responses all
        return a fallback message with ``generated=False``.
        """
        if not debts:
            return PriorityAdvice(advice=NO_DEBTS_MESSAGE, generated=False)

        prompt = self.build_prompt(summarize_debts(debts, today))

        try:
            response = await asyncio.wait_for(
                self._model.generate_content_async(prompt),
                timeout=self._settings.timeout_seconds,
            )
            text = (response.text or "").strip()
        except asyncio.TimeoutError:
            self._audit_logger.log_external_service_error(
                service="gemini",
                error_message=f"Timed out after {self._settings.timeout_seconds}s",
            )
            return PriorityAdvice(advice=FALLBACK_UNAVAILABLE, generated=False)
        except Exception as e:
            self._audit_logger.log_external_service_error(
                service="gemini",
                error_message=str(e),
            )
            return PriorityAdvice(advice=FALLBACK_UNAVAILABLE, generated=False)

        if not text:
            return PriorityAdvice(advice=FALLBACK_NO_ANALYSIS, generated=False)

        return PriorityAdvice(advice=text, generated=True)
