"""
Tests for DebtFlow models

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for flows (with fake external services)
3. No real API calls in tests
"""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from debtflow.audit import AuditLogger
from debtflow.config import AppSettings
from debtflow.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from debtflow.models.debt import Debt, DebtStatus, Installment, ProgressStats
from debtflow.models.validation import ValidationIssue, ValidationResult


class TestInstallmentModel:
    """Tests for the Installment model."""

    def test_installment_defaults(self):
        """A new installment is unpaid with no reminder."""
        inst = Installment(number=1, value=Decimal("100.00"), due_date=date(2024, 1, 15))
        assert inst.is_paid is False
        assert inst.paid_date is None
        assert inst.reminder is None

    def test_installment_rejects_negative_value(self):
        """Negative amounts are rejected."""
        with pytest.raises(ValidationError):
            Installment(number=1, value=Decimal("-1"), due_date=date(2024, 1, 15))

    def test_installment_number_is_one_based(self):
        """Installment numbers start at 1."""
        with pytest.raises(ValidationError):
            Installment(number=0, value=Decimal("1"), due_date=date(2024, 1, 15))

    def test_set_paid_stamps_and_clears_paid_date(self):
        """Paying stamps paid_date, unpaying clears it."""
        inst = Installment(number=1, value=Decimal("10"), due_date=date(2024, 1, 15))
        at = datetime(2024, 1, 20, tzinfo=timezone.utc)

        inst.set_paid(True, at=at)
        assert inst.is_paid is True
        assert inst.paid_date == at

        inst.set_paid(False)
        assert inst.is_paid is False
        assert inst.paid_date is None

    def test_set_paid_same_state_keeps_paid_date(self):
        """Re-marking a paid installment as paid keeps the original date."""
        first = datetime(2024, 1, 20, tzinfo=timezone.utc)
        inst = Installment(number=1, value=Decimal("10"), due_date=date(2024, 1, 15))
        inst.set_paid(True, at=first)
        inst.set_paid(True, at=datetime(2024, 2, 1, tzinfo=timezone.utc))
        assert inst.paid_date == first

    def test_persisted_names_are_camel_case(self):
        """Dumping by alias uses the stored field names."""
        inst = Installment(number=1, value=Decimal("10"), due_date=date(2024, 1, 15))
        dumped = inst.model_dump(by_alias=True)
        assert "dueDate" in dumped
        assert "isPaid" in dumped
        assert "paidDate" in dumped

    def test_accepts_camel_case_input(self):
        """Stored camelCase keys parse back into the model."""
        inst = Installment.model_validate({
            "id": str(uuid4()),
            "number": 2,
            "value": "55.10",
            "dueDate": "2024-02-15",
            "isPaid": True,
            "paidDate": "2024-02-10T08:00:00+00:00",
        })
        assert inst.number == 2
        assert inst.due_date == date(2024, 2, 15)
        assert inst.is_paid is True


class TestDebtModel:
    """Tests for the Debt model and its schedule invariants."""

    def test_debt_creation(self, debt_factory):
        """A generated debt satisfies all invariants."""
        debt = debt_factory(paid_count=1)
        assert debt.total_installments == 3
        assert [inst.number for inst in debt.installments] == [1, 2, 3]
        assert debt.paid_count == 1
        assert debt.next_installment.number == 2
        assert debt.paid_installments_value == Decimal("100.00")

    def test_description_is_stripped(self, debt_factory):
        """Whitespace is stripped from the description."""
        debt = debt_factory(description="  Car loan  ")
        assert debt.description == "Car loan"

    def test_empty_description_rejected(self, debt_factory):
        """An empty description is rejected."""
        with pytest.raises(ValidationError):
            debt_factory(description="   ")

    def test_count_must_match_schedule(self, debt_factory):
        """total_installments must equal the schedule length."""
        debt = debt_factory()
        with pytest.raises(ValidationError):
            Debt(
                description="Broken",
                total_value=Decimal("300"),
                installment_value=Decimal("100"),
                total_installments=4,
                start_date=debt.start_date,
                installments=debt.installments,
            )

    def test_due_dates_must_increase(self, debt_factory):
        """Out-of-order due dates are rejected."""
        debt = debt_factory(count=2)
        first, second = debt.installments
        with pytest.raises(ValidationError):
            Debt(
                description="Broken",
                total_value=Decimal("200"),
                installment_value=Decimal("100"),
                total_installments=2,
                start_date=debt.start_date,
                installments=[
                    first,
                    second.model_copy(update={"due_date": first.due_date}),
                ],
            )

    def test_empty_schedule_allowed(self):
        """A debt may have zero installments."""
        debt = Debt(
            description="Settled",
            total_value=Decimal("50"),
            installment_value=Decimal("0"),
            total_installments=0,
            start_date=date(2024, 1, 1),
        )
        assert debt.installments == []
        assert debt.next_installment is None

    def test_get_installment_accepts_string_id(self, debt_factory):
        """Installments can be looked up by the string form of their id."""
        debt = debt_factory()
        target = debt.installments[1]
        assert debt.get_installment(str(target.id)) is target
        assert debt.get_installment(uuid4()) is None

    def test_status_labels(self):
        """Every status has a display label."""
        assert DebtStatus.ON_TIME.label == "On time"
        assert DebtStatus.LATE.label == "Late"
        assert DebtStatus.PAID_OFF.label == "Paid off"

    def test_progress_remaining(self):
        """Remaining installments are derived from the counts."""
        stats = ProgressStats(total_installments=10, paid_installments=4, percentage=40)
        assert stats.remaining_installments == 6


class TestAuditModels:
    """Tests for audit models."""

    def test_audit_event_creation(self):
        """Test AuditEvent creation."""
        event = AuditEvent(
            event_type=AuditEventType.DEBT_CREATED,
            description="Debt created: Car loan",
        )
        assert event.event_id is not None
        assert event.timestamp is not None
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to a structured log dictionary."""
        debt_id = uuid4()
        event = AuditEventBuilder.debt_created(debt_id, "Car loan", 12)
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "debt_created"
        assert log_dict["entity_id"] == str(debt_id)
        assert log_dict["details"] == {"total_installments": 12}
        assert log_dict["is_user_action"] is True

    def test_schedule_regenerated_is_warning(self):
        """Lossy regeneration is logged as a warning."""
        event = AuditEventBuilder.schedule_regenerated(uuid4(), 3, 1)
        assert event.severity == AuditSeverity.WARNING
        assert event.details["discarded_paid_installments"] == 3
        assert event.details["discarded_reminders"] == 1

    def test_debt_deleted_accepts_any_id(self):
        """Deleting an unknown, non-UUID id still produces an event."""
        event = AuditEventBuilder.debt_deleted("not-a-uuid", removed=False)
        assert event.details == {"debt_id": "not-a-uuid", "removed": False}
        assert event.entity_id is None

    def test_storage_error_carries_message(self):
        """Storage errors keep the error message."""
        event = AuditEventBuilder.storage_error("initialize", "disk full")
        assert event.severity == AuditSeverity.ERROR
        assert event.error_message == "disk full"


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_validation_result_has_errors(self):
        """Errors make the result invalid."""
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=False,
            issues=[
                ValidationIssue(
                    field="down_payment",
                    issue_type="out_of_range",
                    message="Down payment is larger than the total value",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors
        assert result.error_count == 1
        assert not result.is_valid

    def test_validation_result_warnings_only(self):
        """Warnings alone keep the result valid."""
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=True,
            issues=[
                ValidationIssue(
                    field="installment_value",
                    issue_type="mismatch",
                    message="Installments do not add up",
                    severity="warning",
                ),
            ],
        )
        assert not result.has_errors
        assert result.is_valid
        assert len(result.warnings) == 1


class TestAuditLogger:
    """Tests for severity routing in the audit logger."""

    def test_every_severity_has_a_log_level(self, caplog):
        """Each severity is written at the matching stdlib level."""
        caplog.set_level(logging.INFO)
        logger = AuditLogger()

        for severity in AuditSeverity:
            logger.log(AuditEvent(
                event_type=AuditEventType.DEBT_UPDATED,
                severity=severity,
                description=f"{severity.value} event",
            ))

        assert [record.levelname for record in caplog.records] == [
            severity.value.upper() for severity in AuditSeverity
        ]

    def test_app_settings_fields(self):
        """App settings only carry options something reads."""
        assert "app_environment" not in AppSettings.model_fields
        assert "debug_mode" not in AppSettings.model_fields
