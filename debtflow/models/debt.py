"""
Core Data Models for DebtFlow

These models define the strict schemas for every debt record the
application reads, derives and persists. They are designed to:
1. Enforce the schedule invariants at runtime
2. Round-trip losslessly through the JSON storage slot
3. Keep derived values (status, totals) out of the persisted shape

Persisted field names are camelCase (``dueDate``, ``isPaid``...) through
pydantic aliases; Python code uses the snake_case attribute names.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    model_validator,
)
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Timezone-aware current timestamp used for paid/created dates."""
    return datetime.now(timezone.utc)


# Amounts are Decimal in Python and plain numbers in the stored JSON
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# Shared config for everything that is written to the storage slot
PERSISTED_MODEL_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class DebtStatus(str, Enum):
    """
    Lifecycle status of a debt.

    CRITICAL: Status is DERIVED from the installments and today's date.
    It is recomputed on every read and never persisted.
    """
    ON_TIME = "on_time"    # Unpaid installments exist, none overdue
    LATE = "late"          # At least one unpaid installment is overdue
    PAID_OFF = "paid_off"  # Every installment is paid

    @property
    def label(self) -> str:
        """Human-readable label for the UI and the advisor prompt."""
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    DebtStatus.ON_TIME: "On time",
    DebtStatus.LATE: "Late",
    DebtStatus.PAID_OFF: "Paid off",
}


# =============================================================================
# CORE DEBT MODELS
# =============================================================================

class Installment(BaseModel):
    """
    One scheduled payment within a debt.

    ``number``, ``value`` and ``due_date`` are fixed when the schedule is
    generated. Only the payment state and the reminder change afterwards.
    """
    model_config = PERSISTED_MODEL_CONFIG

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique installment ID"
    )
    number: int = Field(
        ...,
        ge=1,
        description="1-based position within the debt's schedule"
    )
    value: Money = Field(
        ...,
        ge=0,
        description="Amount owed for this installment"
    )
    due_date: date = Field(
        ...,
        description="Calendar date the payment is due"
    )
    is_paid: bool = Field(
        default=False,
        description="Has the user marked this installment as paid?"
    )
    paid_date: Optional[datetime] = Field(
        default=None,
        description="When the installment was marked as paid"
    )
    reminder: Optional[datetime] = Field(
        default=None,
        description="When the user wants to be reminded about it"
    )

    def set_paid(self, is_paid: bool, at: Optional[datetime] = None) -> None:
        """
        Set the payment state.

        ``paid_date`` is stamped when the installment becomes paid and
        cleared when it becomes unpaid. Setting the state it already has
        leaves ``paid_date`` untouched.
        """
        if is_paid == self.is_paid:
            return
        self.is_paid = is_paid
        self.paid_date = (at or utc_now()) if is_paid else None


class Debt(BaseModel):
    """
    A debt paid through a fixed-count, monthly installment schedule.

    The down payment is paid upfront and is NOT part of the installments.
    """
    model_config = PERSISTED_MODEL_CONFIG

    # Identity
    id: UUID = Field(
        default_factory=uuid4,
        description="Unique debt ID"
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Free-text label (e.g. 'Credit card', 'Car loan')"
    )

    # Amounts
    total_value: Money = Field(
        ...,
        ge=0,
        description="Full principal amount"
    )
    down_payment: Money = Field(
        default=Decimal("0"),
        ge=0,
        description="Amount paid upfront, outside the installments"
    )
    installment_value: Money = Field(
        ...,
        ge=0,
        description="Per-installment amount used when the schedule was generated"
    )

    # Schedule
    total_installments: int = Field(
        ...,
        ge=0,
        description="Number of installments (must match the schedule)"
    )
    start_date: date = Field(
        ...,
        description="Due date of installment #1"
    )
    installments: list[Installment] = Field(
        default_factory=list,
        description="Installments ordered by number"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the debt was registered"
    )

    @model_validator(mode='after')
    def validate_schedule(self) -> 'Debt':
        """Validate the schedule invariants."""
        if self.total_installments != len(self.installments):
            raise ValueError(
                f"total_installments ({self.total_installments}) does not match "
                f"the number of installments ({len(self.installments)})"
            )

        numbers = [inst.number for inst in self.installments]
        if numbers != list(range(1, len(self.installments) + 1)):
            raise ValueError("Installment numbers must be 1..n in order")

        due_dates = [inst.due_date for inst in self.installments]
        if any(later <= earlier for earlier, later in zip(due_dates, due_dates[1:])):
            raise ValueError("Installment due dates must be strictly increasing")

        return self

    # -------------------------------------------------------------------------
    # Derived values (never persisted)
    # -------------------------------------------------------------------------

    @property
    def paid_installments(self) -> list[Installment]:
        return [inst for inst in self.installments if inst.is_paid]

    @property
    def unpaid_installments(self) -> list[Installment]:
        return [inst for inst in self.installments if not inst.is_paid]

    @property
    def paid_count(self) -> int:
        return len(self.paid_installments)

    @property
    def next_installment(self) -> Optional[Installment]:
        """First unpaid installment by number, or None when paid off."""
        return next(iter(self.unpaid_installments), None)

    @property
    def paid_installments_value(self) -> Decimal:
        return sum((inst.value for inst in self.paid_installments), Decimal("0"))

    def get_installment(self, installment_id: Union[UUID, str]) -> Optional[Installment]:
        """Find an installment by ID."""
        wanted = str(installment_id)
        for inst in self.installments:
            if str(inst.id) == wanted:
                return inst
        return None


# =============================================================================
# DASHBOARD MODELS (derived, never persisted)
# =============================================================================

class DashboardSummary(BaseModel):
    """Aggregate over every debt, recomputed on each read."""

    total_debt: Decimal = Field(
        ...,
        description="Sum of all debts' total value"
    )
    total_paid: Decimal = Field(
        ...,
        description="Down payments plus paid installments"
    )
    total_remaining: Decimal = Field(
        ...,
        description="total_debt - total_paid"
    )
    debts_count: int = Field(ge=0)


class OverdueItem(BaseModel):
    """An unpaid installment whose due date has passed."""

    debt_id: UUID
    debt_description: str
    installment_id: UUID
    number: int
    value: Decimal
    due_date: date


class ProgressStats(BaseModel):
    """Installment-count progress across all debts."""

    total_installments: int = Field(ge=0)
    paid_installments: int = Field(ge=0)
    percentage: int = Field(
        ge=0,
        le=100,
        description="Paid share of installments, rounded to a whole percent"
    )

    @property
    def remaining_installments(self) -> int:
        return self.total_installments - self.paid_installments


class DebtOverview(BaseModel):
    """Card data for one debt on the dashboard."""

    debt_id: UUID
    description: str
    status: DebtStatus
    total_value: Decimal
    installment_value: Decimal
    paid_count: int
    total_installments: int
    next_due_date: Optional[date] = None
    progress_percent: int = Field(ge=0, le=100)


class DashboardView(BaseModel):
    """Everything the dashboard page renders."""

    summary: DashboardSummary
    overdue: list[OverdueItem] = Field(default_factory=list)
    overdue_total: Decimal = Decimal("0")
    progress: ProgressStats
    debts: list[DebtOverview] = Field(default_factory=list)

    @property
    def has_overdue(self) -> bool:
        return len(self.overdue) > 0
