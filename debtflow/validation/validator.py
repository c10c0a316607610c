"""
Two-Stage Debt Form Validation

DESIGN DECISION: The debt form is the ONLY way new schedule parameters
enter the application, so it is where they are checked. Invalid
submissions are blocked here and never reach the schedule generator.

STAGE 1 - SCHEMA VALIDATION:
- Required fields
- Types and numeric minimums
- Paid installments within [0, total installments]

STAGE 2 - SEMANTIC VALIDATION:
- Down payment larger than the total (error)
- Absurd totals (error)
- Schedule that doesn't add up to the total (warning)
- Installments that will be overdue as soon as they are saved (warning)

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the user can correct the form.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from debtflow.config import get_settings
from debtflow.models.validation import ValidationIssue, ValidationResult
from debtflow.schedule.generator import add_months, suggest_installment_value
from debtflow.utils.formatting import format_currency

# Fifty years of monthly payments
MAX_INSTALLMENTS = 600


class DebtDraft(BaseModel):
    """
    Debt form input, before a schedule exists.

    ``installment_value`` may be left empty, in which case the value is
    suggested from the total, the down payment and the count.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="What the debt is"
    )
    total_value: Decimal = Field(
        ...,
        ge=Decimal("0.01"),
        description="Full principal amount"
    )
    down_payment: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Amount paid upfront"
    )
    installment_value: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Per-installment amount (None = suggest one)"
    )
    total_installments: int = Field(
        ...,
        ge=1,
        le=MAX_INSTALLMENTS,
        description="Number of installments"
    )
    start_date: date = Field(
        ...,
        description="Due date of the first installment"
    )
    paid_count: int = Field(
        default=0,
        ge=0,
        description="Installments already paid before registering"
    )

    @model_validator(mode='after')
    def validate_paid_count(self) -> 'DebtDraft':
        if self.paid_count > self.total_installments:
            raise ValueError(
                "Paid installments cannot exceed the number of installments"
            )
        return self

    @property
    def resolved_installment_value(self) -> Decimal:
        """The entered installment value, or the suggested one."""
        if self.installment_value is not None:
            return self.installment_value
        return suggest_installment_value(
            self.total_value, self.down_payment, self.total_installments
        )


class DebtFormValidator:
    """
    Validates debt form submissions through a two-stage pipeline.
    """

    def __init__(self):
        self._settings = get_settings().app

    def _validate_schema(
        self,
        data: dict[str, Any],
    ) -> tuple[Optional[DebtDraft], list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (draft or None, list_of_issues)
        """
        try:
            return DebtDraft.model_validate(data), []
        except ValidationError as e:
            issues = []
            for error in e.errors():
                loc = ".".join(str(part) for part in error["loc"]) or "form"
                message = error["msg"]
                # Strip pydantic's "Value error, " prefix from our own messages
                if message.startswith("Value error, "):
                    message = message[len("Value error, "):]
                issues.append(ValidationIssue(
                    field=loc,
                    issue_type=error["type"],
                    message=message,
                    severity="error",
                ))
            return None, issues

    def _validate_semantic(
        self,
        draft: DebtDraft,
        today: date,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if draft.down_payment > draft.total_value:
            issues.append(ValidationIssue(
                field="down_payment",
                issue_type="out_of_range",
                message="Down payment is larger than the total value",
                severity="error",
                suggested_fix="Check the total value and the down payment",
            ))

        if draft.total_value > Decimal(str(self._settings.max_debt_value)):
            issues.append(ValidationIssue(
                field="total_value",
                issue_type="suspicious_value",
                message=(
                    f"Total value {format_currency(draft.total_value)} is above "
                    f"the allowed maximum of {format_currency(self._settings.max_debt_value)}"
                ),
                severity="error",
                suggested_fix="Check for extra digits",
            ))

        # Schedule total vs. stated total, tolerating one cent per installment
        scheduled = draft.down_payment + draft.resolved_installment_value * draft.total_installments
        tolerance = Decimal("0.01") * draft.total_installments
        if abs(scheduled - draft.total_value) > tolerance:
            issues.append(ValidationIssue(
                field="installment_value",
                issue_type="mismatch",
                message=(
                    f"Down payment plus installments add up to "
                    f"{format_currency(scheduled)}, not {format_currency(draft.total_value)}"
                ),
                severity="warning",
                suggested_fix="Fine if the debt has interest; otherwise adjust the value",
            ))

        overdue = sum(
            1
            for i in range(draft.paid_count, draft.total_installments)
            if add_months(draft.start_date, i) < today
        )
        if overdue:
            issues.append(ValidationIssue(
                field="paid_count",
                issue_type="already_overdue",
                message=f"{overdue} unpaid installment(s) are already past their due date",
                severity="warning",
                suggested_fix="Increase the number of paid installments if they were paid",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def validate(
        self,
        data: Union[dict[str, Any], DebtDraft],
        today: Optional[date] = None,
    ) -> tuple[Optional[DebtDraft], ValidationResult]:
        """
        Run both validation stages.

        Returns:
            (draft, result) - draft is None when stage 1 fails, and
            should only be used when ``result.is_valid`` is True.
        """
        today = today or date.today()

        if isinstance(data, DebtDraft):
            draft, schema_issues = data, []
        else:
            draft, schema_issues = self._validate_schema(data)

        if draft is None:
            return None, ValidationResult(
                schema_valid=False,
                semantic_valid=False,
                issues=schema_issues,
            )

        semantic_valid, semantic_issues = self._validate_semantic(draft, today)
        return draft, ValidationResult(
            schema_valid=True,
            semantic_valid=semantic_valid,
            issues=schema_issues + semantic_issues,
        )
