"""
Audit Logger

DESIGN DECISION: Every significant action in the application is logged.
This provides:
1. Traceability of what the user changed
2. Debugging capability when external calls fail
3. A visible record of lossy operations (schedule regeneration)

The audit logger writes structured JSON to the local log only.
"""

import logging
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

import structlog

from debtflow.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog's stdlib output to stderr at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))


class AuditLogger:
    """
    Central audit logging service.

    Events are rendered as JSON through structlog.
    """

    def __init__(self, logger_name: str = "debtflow.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_debt_created(
        self,
        debt_id: UUID,
        description: str,
        total_installments: int,
    ) -> None:
        """Log debt creation."""
        self.log(AuditEventBuilder.debt_created(
            debt_id=debt_id,
            description=description,
            total_installments=total_installments,
        ))

    def log_debt_updated(self, debt_id: UUID, description: str) -> None:
        """Log debt update."""
        self.log(AuditEventBuilder.debt_updated(debt_id=debt_id, description=description))

    def log_schedule_regenerated(
        self,
        debt_id: UUID,
        discarded_paid: int,
        discarded_reminders: int,
    ) -> None:
        """Log a lossy schedule regeneration."""
        self.log(AuditEventBuilder.schedule_regenerated(
            debt_id=debt_id,
            discarded_paid=discarded_paid,
            discarded_reminders=discarded_reminders,
        ))

    def log_debt_deleted(self, debt_id: Any, removed: bool) -> None:
        """Log debt deletion."""
        self.log(AuditEventBuilder.debt_deleted(debt_id=debt_id, removed=removed))

    def log_payment_toggled(
        self,
        debt_id: UUID,
        installment_id: UUID,
        number: int,
        is_paid: bool,
    ) -> None:
        """Log an installment payment toggle."""
        self.log(AuditEventBuilder.payment_toggled(
            debt_id=debt_id,
            installment_id=installment_id,
            number=number,
            is_paid=is_paid,
        ))

    def log_reminder_set(
        self,
        debt_id: UUID,
        installment_id: UUID,
        reminder: datetime,
    ) -> None:
        """Log a reminder being set."""
        self.log(AuditEventBuilder.reminder_set(
            debt_id=debt_id,
            installment_id=installment_id,
            reminder=reminder,
        ))

    def log_not_found(
        self,
        operation: str,
        debt_id: Any,
        installment_id: Any = None,
    ) -> None:
        """Log a mutation that targeted an unknown record."""
        self.log(AuditEventBuilder.record_not_found(
            operation=operation,
            debt_id=debt_id,
            installment_id=installment_id,
        ))

    def log_data_cleared(self) -> None:
        """Log the erase-everything action."""
        self.log(AuditEventBuilder.data_cleared())

    def log_validation_failed(self, issues: list[dict]) -> None:
        """Log a rejected form submission."""
        self.log(AuditEventBuilder.validation_failed(issues=issues))

    def log_advice_requested(self, debts_count: int) -> None:
        """Log an advice request."""
        self.log(AuditEventBuilder.advice_requested(debts_count=debts_count))

    def log_advice_generated(self, generated: bool) -> None:
        """Log the advice outcome."""
        self.log(AuditEventBuilder.advice_generated(generated=generated))

    def log_storage_error(self, operation: str, error_message: str) -> None:
        """Log a storage failure."""
        self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
        ))

    def log_external_service_error(
        self,
        service: str,
        error_message: str,
    ) -> None:
        """Log external service error."""
        self.log(AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
        ))


_default_logger: Optional[AuditLogger] = None


def get_audit_logger() -> AuditLogger:
    """Shared logger for components created without one."""
    global _default_logger
    if _default_logger is None:
        _default_logger = AuditLogger()
    return _default_logger
