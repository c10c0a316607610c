"""
Main Orchestrator for DebtFlow

This module ties together all the components and defines the
end-to-end flows the UI calls:
1. Debt management (create, edit, pay, remind, delete, clear)
2. Priority advice (summary -> Gemini -> text)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Form data is validated before any schedule is generated
- Not-found targets are a None result, never an exception
- Schedule regeneration is explicit and logged, because it is lossy
- Every user action is audited
"""

from datetime import date, datetime, time
from typing import Optional, Union
from uuid import UUID

from debtflow.agents import FALLBACK_UNAVAILABLE, DebtAdvisorAgent, PriorityAdvice
from debtflow.audit import AuditLogger, configure_logging, get_audit_logger
from debtflow.config import get_settings
from debtflow.models.debt import DashboardView, Debt, utc_now
from debtflow.models.validation import ValidationResult
from debtflow.queries import DashboardQuery
from debtflow.schedule.generator import generate_installments
from debtflow.services.calendar import build_installment_reminder_url
from debtflow.services.storage import (
    DebtRepository,
    InMemoryStore,
    LocalDirectoryStore,
    StorageError,
)
from debtflow.validation import DebtDraft, DebtFormValidator

DebtId = Union[UUID, str]


class DebtFlow:
    """
    Orchestrates every debt operation the UI exposes.

    All operations run synchronously to completion: read the collection,
    change it, write it back.
    """

    def __init__(
        self,
        repository: DebtRepository,
        validator: Optional[DebtFormValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        dashboard_query: Optional[DashboardQuery] = None,
    ):
        self._repository = repository
        self._validator = validator or DebtFormValidator()
        self._audit_logger = audit_logger or get_audit_logger()
        self._dashboard_query = dashboard_query or DashboardQuery()

    @property
    def validator(self) -> DebtFormValidator:
        return self._validator

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_debts(self) -> list[Debt]:
        return self._repository.get_all()

    def get_debt(self, debt_id: DebtId) -> Optional[Debt]:
        return self._repository.get_by_id(debt_id)

    def dashboard(self, today: Optional[date] = None) -> DashboardView:
        return self._dashboard_query.build(self._repository.get_all(), today)

    # -------------------------------------------------------------------------
    # Create / edit
    # -------------------------------------------------------------------------

    def create_debt(self, draft: DebtDraft, now: Optional[datetime] = None) -> Debt:
        """
        Register a new debt with a freshly generated schedule.

        The first ``draft.paid_count`` installments start out paid.
        """
        now = now or utc_now()
        installment_value = draft.resolved_installment_value

        debt = Debt(
            description=draft.description,
            total_value=draft.total_value,
            down_payment=draft.down_payment,
            installment_value=installment_value,
            total_installments=draft.total_installments,
            start_date=draft.start_date,
            installments=generate_installments(
                count=draft.total_installments,
                amount=installment_value,
                first_due_date=draft.start_date,
                paid_count=draft.paid_count,
                now=now,
            ),
            created_at=now,
        )

        self._repository.save_one(debt)
        self._audit_logger.log_debt_created(
            debt_id=debt.id,
            description=debt.description,
            total_installments=debt.total_installments,
        )
        return debt

    @staticmethod
    def needs_regeneration(existing: Debt, draft: DebtDraft) -> bool:
        """Count, installment value or start date changed."""
        return (
            existing.total_installments != draft.total_installments
            or existing.installment_value != draft.resolved_installment_value
            or existing.start_date != draft.start_date
        )

    def update_debt(
        self,
        existing: Debt,
        draft: DebtDraft,
        now: Optional[datetime] = None,
    ) -> Debt:
        """
        Replace a debt with edited form values.

        WARNING: If the count, installment value or start date changed,
        the schedule is regenerated from scratch. Every payment and
        reminder on the old schedule is DISCARDED and only the draft's
        ``paid_count`` is applied. Otherwise the installments are kept
        as they are.
        """
        now = now or utc_now()
        installment_value = draft.resolved_installment_value

        if self.needs_regeneration(existing, draft):
            installments = generate_installments(
                count=draft.total_installments,
                amount=installment_value,
                first_due_date=draft.start_date,
                paid_count=draft.paid_count,
                now=now,
            )
            self._audit_logger.log_schedule_regenerated(
                debt_id=existing.id,
                discarded_paid=existing.paid_count,
                discarded_reminders=sum(
                    1 for inst in existing.installments if inst.reminder is not None
                ),
            )
        else:
            installments = existing.installments

        debt = Debt(
            id=existing.id,
            description=draft.description,
            total_value=draft.total_value,
            down_payment=draft.down_payment,
            installment_value=installment_value,
            total_installments=draft.total_installments,
            start_date=draft.start_date,
            installments=installments,
            created_at=existing.created_at,
        )

        self._repository.save_one(debt)
        self._audit_logger.log_debt_updated(debt_id=debt.id, description=debt.description)
        return debt

    def submit_debt_form(
        self,
        data: dict,
        existing: Optional[Debt] = None,
        today: Optional[date] = None,
    ) -> tuple[Optional[Debt], ValidationResult]:
        """
        Validate form data, then create or update the debt.

        Returns:
            (saved debt, validation result) - the debt is None when the
            submission was blocked by validation errors
        """
        draft, result = self._validator.validate(data, today=today)
        if draft is None or not result.is_valid:
            self._audit_logger.log_validation_failed(
                issues=[issue.model_dump() for issue in result.issues if issue.severity == "error"]
            )
            return None, result

        if existing is None:
            return self.create_debt(draft), result
        return self.update_debt(existing, draft), result

    # -------------------------------------------------------------------------
    # Installment actions
    # -------------------------------------------------------------------------

    def toggle_installment(
        self,
        debt_id: DebtId,
        installment_id: DebtId,
        is_paid: bool,
    ) -> Optional[Debt]:
        """Mark an installment paid/unpaid. None if not found."""
        debt = self._repository.toggle_payment(debt_id, installment_id, is_paid)
        if debt is None:
            self._audit_logger.log_not_found("toggle_payment", debt_id, installment_id)
            return None

        installment = debt.get_installment(installment_id)
        self._audit_logger.log_payment_toggled(
            debt_id=debt.id,
            installment_id=installment.id,
            number=installment.number,
            is_paid=is_paid,
        )
        return debt

    def set_next_installment_reminder(
        self,
        debt_id: DebtId,
        reminder_date: date,
        reminder_time: time,
    ) -> Optional[tuple[Debt, str]]:
        """
        Set a reminder on the debt's next unpaid installment.

        Returns:
            (updated debt, calendar link) or None when the debt is unknown
            or already paid off
        """
        debt = self._repository.get_by_id(debt_id)
        next_inst = debt.next_installment if debt else None
        if next_inst is None:
            self._audit_logger.log_not_found("set_reminder", debt_id)
            return None

        reminder = datetime.combine(reminder_date, reminder_time)
        updated = self._repository.set_reminder(debt.id, next_inst.id, reminder)
        if updated is None:
            self._audit_logger.log_not_found("set_reminder", debt_id, next_inst.id)
            return None

        self._audit_logger.log_reminder_set(
            debt_id=updated.id,
            installment_id=next_inst.id,
            reminder=reminder,
        )
        url = build_installment_reminder_url(
            updated, updated.get_installment(next_inst.id), reminder
        )
        return updated, url

    # -------------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------------

    def delete_debt(self, debt_id: DebtId) -> bool:
        """Delete immediately and irreversibly. Returns whether it existed."""
        removed = self._repository.delete_one(debt_id)
        self._audit_logger.log_debt_deleted(debt_id=debt_id, removed=removed)
        return removed

    def clear_all_data(self) -> None:
        """Erase every stored record. The UI must confirm first."""
        self._repository.clear_all()
        self._audit_logger.log_data_cleared()


class AdviceFlow:
    """
    Orchestrates the user-triggered advice request.

    Holds a single in-flight flag: while a request is pending, further
    requests are ignored instead of starting a second call.
    """

    def __init__(
        self,
        repository: DebtRepository,
        advisor: Optional[DebtAdvisorAgent] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._repository = repository
        self._advisor = advisor
        self._audit_logger = audit_logger or get_audit_logger()
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def _get_advisor(self) -> DebtAdvisorAgent:
        # Built lazily: a missing API key must not break the rest of the app
        if self._advisor is None:
            self._advisor = DebtAdvisorAgent(audit_logger=self._audit_logger)
        return self._advisor

    async def request_advice(self, today: Optional[date] = None) -> Optional[PriorityAdvice]:
        """
        Ask for priority advice on the current debts.

        Returns:
            The advice (possibly a fallback text), or None if a request
            is already in flight
        """
        if self._in_flight:
            return None

        self._in_flight = True
        try:
            debts = self._repository.get_all()
            self._audit_logger.log_advice_requested(debts_count=len(debts))

            try:
                advisor = self._get_advisor()
            except Exception as e:
                self._audit_logger.log_external_service_error(
                    service="gemini",
                    error_message=f"Advisor not configured: {e}",
                )
                advice = PriorityAdvice(advice=FALLBACK_UNAVAILABLE, generated=False)
            else:
                advice = await advisor.get_priority_advice(debts, today)

            self._audit_logger.log_advice_generated(generated=advice.generated)
            return advice
        finally:
            self._in_flight = False


def create_app_components(
    use_storage: bool = True,
) -> tuple[DebtFlow, AdviceFlow, DebtRepository]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to persist to the configured data directory.
                    Set to False for an in-memory session (testing/demo).

    Returns:
        (debt_flow, advice_flow, repository)
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)
    audit_logger = get_audit_logger()
    storage_settings = settings.storage

    store = None
    if use_storage:
        try:
            local_store = LocalDirectoryStore(storage_settings.data_dir)
            local_store.ensure_writable()
            store = local_store
        except StorageError as e:
            # Storage not usable - continue in memory
            audit_logger.log_storage_error("initialize", str(e))

    if store is None:
        store = InMemoryStore()

    repository = DebtRepository(store, storage_key=storage_settings.storage_key)

    debt_flow = DebtFlow(repository=repository, audit_logger=audit_logger)
    advice_flow = AdviceFlow(repository=repository, audit_logger=audit_logger)

    return debt_flow, advice_flow, repository
