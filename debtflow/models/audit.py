"""
Audit Models for DebtFlow

Every significant action in the application emits an event to the
structured log. This provides:
1. Traceability of user actions (create, pay, delete...)
2. Debugging information when an external call fails
3. A record of lossy operations such as schedule regeneration

DESIGN DECISION: Events go to the process log only. They are NOT persisted
next to the debts - the storage slot holds debts and nothing else.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from debtflow.models.debt import utc_now


class AuditEventType(str, Enum):
    """Types of events we log."""
    # Debt lifecycle
    DEBT_CREATED = "debt_created"
    DEBT_UPDATED = "debt_updated"
    DEBT_DELETED = "debt_deleted"
    SCHEDULE_REGENERATED = "schedule_regenerated"

    # Installment changes
    PAYMENT_TOGGLED = "payment_toggled"
    REMINDER_SET = "reminder_set"

    # Lookups that found nothing
    RECORD_NOT_FOUND = "record_not_found"

    # Data management
    DATA_CLEARED = "data_cleared"
    VALIDATION_FAILED = "validation_failed"

    # Advice
    ADVICE_REQUESTED = "advice_requested"
    ADVICE_GENERATED = "advice_generated"

    # System events
    STORAGE_ERROR = "storage_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'debt', 'installment', 'advice')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.debt_created(debt_id, description, 12)
        event = AuditEventBuilder.payment_toggled(debt_id, installment_id, 3, True)
    """

    @staticmethod
    def debt_created(
        debt_id: UUID,
        description: str,
        total_installments: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_CREATED,
            entity_type="debt",
            entity_id=debt_id,
            description=f"Debt created: {description}",
            details={"total_installments": total_installments},
            is_user_action=True,
        )

    @staticmethod
    def debt_updated(
        debt_id: UUID,
        description: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_UPDATED,
            entity_type="debt",
            entity_id=debt_id,
            description=f"Debt updated: {description}",
            is_user_action=True,
        )

    @staticmethod
    def schedule_regenerated(
        debt_id: UUID,
        discarded_paid: int,
        discarded_reminders: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEDULE_REGENERATED,
            severity=AuditSeverity.WARNING,
            entity_type="debt",
            entity_id=debt_id,
            description="Installment schedule regenerated; payment history discarded",
            details={
                "discarded_paid_installments": discarded_paid,
                "discarded_reminders": discarded_reminders,
            },
            is_user_action=True,
        )

    @staticmethod
    def debt_deleted(debt_id: Any, removed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEBT_DELETED,
            entity_type="debt",
            description="Debt deleted" if removed else "Delete requested for unknown debt",
            details={"debt_id": str(debt_id), "removed": removed},
            is_user_action=True,
        )

    @staticmethod
    def payment_toggled(
        debt_id: UUID,
        installment_id: UUID,
        number: int,
        is_paid: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_TOGGLED,
            entity_type="installment",
            entity_id=installment_id,
            description=f"Installment #{number} marked as {'paid' if is_paid else 'unpaid'}",
            details={"debt_id": str(debt_id), "is_paid": is_paid},
            is_user_action=True,
        )

    @staticmethod
    def reminder_set(
        debt_id: UUID,
        installment_id: UUID,
        reminder: datetime,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REMINDER_SET,
            entity_type="installment",
            entity_id=installment_id,
            description="Reminder set",
            details={"debt_id": str(debt_id), "reminder": reminder.isoformat()},
            is_user_action=True,
        )

    @staticmethod
    def record_not_found(
        operation: str,
        debt_id: Any,
        installment_id: Any = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            description=f"{operation}: target not found",
            details={
                "operation": operation,
                "debt_id": str(debt_id),
                "installment_id": str(installment_id) if installment_id else None,
            },
        )

    @staticmethod
    def data_cleared() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_CLEARED,
            severity=AuditSeverity.WARNING,
            description="All local data erased",
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.INFO,
            entity_type="debt_form",
            description=f"Debt form rejected with {len(issues)} issue(s)",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def advice_requested(debts_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVICE_REQUESTED,
            entity_type="advice",
            description="Priority advice requested",
            details={"debts_count": debts_count},
            is_user_action=True,
        )

    @staticmethod
    def advice_generated(generated: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVICE_GENERATED,
            entity_type="advice",
            description="Advice generated" if generated else "Advice fell back to static text",
            details={"generated": generated},
        )

    @staticmethod
    def storage_error(operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            details={"operation": operation},
            error_message=error_message,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            details={"service": service},
            error_message=error_message,
        )
