"""
Tests for the priority advisor.

The Gemini model is replaced by small fakes exposing
``generate_content_async``; no network calls are made.
"""

import asyncio
import json
from datetime import date

from debtflow.agents import (
    FALLBACK_NO_ANALYSIS,
    FALLBACK_UNAVAILABLE,
    NO_DEBTS_MESSAGE,
    NO_DUE_DATE,
    DebtAdvisorAgent,
    summarize_debts,
)
from debtflow.config import GeminiSettings

TODAY = date(2024, 1, 20)


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    """Records prompts and answers with a fixed text."""

    def __init__(self, text="Pay the credit card first."):
        self.text = text
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        return FakeResponse(self.text)


class FailingModel:
    async def generate_content_async(self, prompt):
        raise RuntimeError("quota exceeded")


class SlowModel:
    async def generate_content_async(self, prompt):
        await asyncio.sleep(1)
        return FakeResponse("too late")


class RecordingAuditLogger:
    def __init__(self):
        self.errors = []

    def log_external_service_error(self, service, error_message):
        self.errors.append((service, error_message))


def make_agent(model, timeout_seconds=5.0, audit_logger=None):
    return DebtAdvisorAgent(
        settings=GeminiSettings(api_key="test-key", timeout_seconds=timeout_seconds),
        model=model,
        language="English",
        audit_logger=audit_logger or RecordingAuditLogger(),
    )


class TestSummarizeDebts:
    """Tests for the summary handed to the model."""

    def test_summary_fields(self, debt_factory):
        """Each debt is reduced to the facts the advisor needs."""
        debt = debt_factory(start_date=date(2024, 1, 15), paid_count=1)
        item = summarize_debts([debt], TODAY)[0]
        assert item.description == "Credit card"
        assert item.remaining_installments == 2
        assert item.next_due_date == "2024-02-15"
        assert item.status == "On time"

    def test_paid_off_has_no_due_date(self, debt_factory):
        """Paid-off debts report N/A as the next due date."""
        item = summarize_debts([debt_factory(paid_count=3)], TODAY)[0]
        assert item.next_due_date == NO_DUE_DATE
        assert item.status == "Paid off"


class TestDebtAdvisorAgent:
    """Tests for DebtAdvisorAgent.get_priority_advice."""

    def test_generated_advice(self, debt_factory):
        """Model text is returned trimmed."""
        model = FakeModel("  Pay the credit card first.  ")
        advice = asyncio.run(make_agent(model).get_priority_advice([debt_factory()], TODAY))
        assert advice.generated is True
        assert advice.advice == "Pay the credit card first."

    def test_prompt_contains_summary_and_language(self, debt_factory):
        """The prompt embeds the JSON summary and the answer language."""
        model = FakeModel()
        asyncio.run(make_agent(model).get_priority_advice([debt_factory()], TODAY))

        prompt = model.prompts[0]
        assert "Answer in English." in prompt
        data = json.loads(prompt.split("Data:\n", 1)[1].split("\n\nAnswer in", 1)[0])
        assert data[0]["description"] == "Credit card"
        assert data[0]["remaining_installments"] == 3

    def test_no_debts_skips_model(self):
        """With no debts the model is not called."""
        model = FakeModel()
        advice = asyncio.run(make_agent(model).get_priority_advice([], TODAY))
        assert advice.advice == NO_DEBTS_MESSAGE
        assert advice.generated is False
        assert model.prompts == []

    def test_empty_response(self, debt_factory):
        """An empty answer becomes the no-analysis fallback."""
        advice = asyncio.run(make_agent(FakeModel("   ")).get_priority_advice([debt_factory()], TODAY))
        assert advice.advice == FALLBACK_NO_ANALYSIS
        assert advice.generated is False

    def test_service_error(self, debt_factory):
        """API errors become the unavailable fallback and are logged."""
        audit = RecordingAuditLogger()
        agent = make_agent(FailingModel(), audit_logger=audit)

        advice = asyncio.run(agent.get_priority_advice([debt_factory()], TODAY))

        assert advice.advice == FALLBACK_UNAVAILABLE
        assert advice.generated is False
        assert audit.errors == [("gemini", "quota exceeded")]

    def test_timeout(self, debt_factory):
        """A slow model times out into the unavailable fallback."""
        audit = RecordingAuditLogger()
        agent = make_agent(SlowModel(), timeout_seconds=0.05, audit_logger=audit)

        advice = asyncio.run(agent.get_priority_advice([debt_factory()], TODAY))

        assert advice.advice == FALLBACK_UNAVAILABLE
        assert len(audit.errors) == 1
        assert "Timed out" in audit.errors[0][1]
