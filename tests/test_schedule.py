"""Tests for schedule generation and status derivation."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from debtflow.models.debt import Debt, DebtStatus
from debtflow.schedule import (
    add_months,
    calculate_debt_status,
    generate_installments,
    is_overdue,
    predict_next_due_date,
    suggest_installment_value,
)

NOW = datetime(2024, 1, 10, 9, 30, tzinfo=timezone.utc)


class TestAddMonths:
    """Tests for month arithmetic."""

    def test_regular_day(self):
        """Days that exist in every month are kept."""
        assert add_months(date(2024, 1, 15), 1) == date(2024, 2, 15)
        assert add_months(date(2024, 1, 15), 12) == date(2025, 1, 15)

    def test_zero_months(self):
        """Adding zero months is the identity."""
        assert add_months(date(2024, 1, 31), 0) == date(2024, 1, 31)

    def test_end_of_month_rolls_over_in_leap_year(self):
        """Jan 31 + 1 month rolls into March (leap year)."""
        assert add_months(date(2024, 1, 31), 1) == date(2024, 3, 2)

    def test_end_of_month_rolls_over_in_common_year(self):
        """Jan 31 + 1 month rolls into March (common year)."""
        assert add_months(date(2023, 1, 31), 1) == date(2023, 3, 3)

    def test_day_30_in_february(self):
        """The 30th has no February counterpart either."""
        assert add_months(date(2023, 1, 30), 1) == date(2023, 3, 2)

    def test_crosses_year_boundary(self):
        """December plus one is January of the next year."""
        assert add_months(date(2023, 12, 10), 1) == date(2024, 1, 10)


class TestGenerateInstallments:
    """Tests for generate_installments."""

    def test_three_installments_one_paid(self):
        """3 x 100.00 from 2024-01-15 with the first one already paid."""
        installments = generate_installments(3, Decimal("100.00"), date(2024, 1, 15), 1, now=NOW)

        assert [inst.number for inst in installments] == [1, 2, 3]
        assert [inst.due_date for inst in installments] == [
            date(2024, 1, 15),
            date(2024, 2, 15),
            date(2024, 3, 15),
        ]
        assert all(inst.value == Decimal("100.00") for inst in installments)
        assert [inst.is_paid for inst in installments] == [True, False, False]
        assert installments[0].paid_date == NOW
        assert installments[1].paid_date is None
        assert all(inst.reminder is None for inst in installments)

    def test_exactly_leading_installments_paid(self):
        """For every paid_count, only the first paid_count are paid and dated."""
        count = 6
        for paid_count in range(count + 1):
            installments = generate_installments(count, 10, date(2024, 1, 31), paid_count, now=NOW)

            assert len(installments) == count
            assert [inst.number for inst in installments] == list(range(1, count + 1))
            for inst in installments:
                expected_paid = inst.number <= paid_count
                assert inst.is_paid is expected_paid
                assert (inst.paid_date is not None) is expected_paid
            for earlier, later in zip(installments, installments[1:]):
                assert later.due_date > earlier.due_date

    def test_ids_are_unique(self):
        """Every installment gets its own id."""
        installments = generate_installments(12, 10, date(2024, 1, 1))
        assert len({inst.id for inst in installments}) == 12

    def test_all_paid(self):
        """paid_count equal to count marks everything paid."""
        installments = generate_installments(2, "50", date(2024, 1, 1), 2, now=NOW)
        assert all(inst.is_paid for inst in installments)
        assert all(inst.paid_date == NOW for inst in installments)

    def test_zero_count_is_empty(self):
        """Zero installments gives an empty schedule."""
        assert generate_installments(0, 100, date(2024, 1, 1)) == []

    def test_negative_count_rejected(self):
        """A negative count is a programming error."""
        with pytest.raises(ValueError):
            generate_installments(-1, 100, date(2024, 1, 1))

    def test_paid_count_above_count_rejected(self):
        """paid_count beyond the schedule is rejected, not clamped."""
        with pytest.raises(ValueError):
            generate_installments(3, 100, date(2024, 1, 1), paid_count=4)

    def test_negative_paid_count_rejected(self):
        """Negative paid_count is rejected."""
        with pytest.raises(ValueError):
            generate_installments(3, 100, date(2024, 1, 1), paid_count=-1)

    def test_float_amount_has_no_artifacts(self):
        """Float input is converted through its string form."""
        installments = generate_installments(1, 0.1, date(2024, 1, 1))
        assert installments[0].value == Decimal("0.1")

    def test_end_of_month_schedule_is_strictly_increasing(self):
        """Rolled-over dates still form a valid schedule."""
        installments = generate_installments(4, 10, date(2024, 1, 31))
        dates = [inst.due_date for inst in installments]
        assert dates == [
            date(2024, 1, 31),
            date(2024, 3, 2),
            date(2024, 3, 31),
            date(2024, 5, 1),
        ]
        assert dates == sorted(set(dates))


class TestSuggestions:
    """Tests for the form helpers."""

    def test_suggest_even_split(self):
        """What's left after the down payment is split evenly."""
        assert suggest_installment_value(1000, 200, 2) == Decimal("400.00")

    def test_suggest_rounds_half_up(self):
        """Suggestions are rounded to cents."""
        assert suggest_installment_value(100, 0, 3) == Decimal("33.33")
        assert suggest_installment_value("0.05", 0, 2) == Decimal("0.03")

    def test_suggest_down_payment_above_total(self):
        """A down payment above the total suggests zero."""
        assert suggest_installment_value(100, 150, 2) == Decimal("0.00")

    def test_suggest_without_installments(self):
        """No installments means nothing to suggest."""
        assert suggest_installment_value(100, 0, 0) == Decimal("0.00")

    def test_predict_next_due_date(self):
        """The next due date skips the paid installments."""
        assert predict_next_due_date(date(2024, 1, 15), 0) == date(2024, 1, 15)
        assert predict_next_due_date(date(2024, 1, 15), 2) == date(2024, 3, 15)


class TestDebtStatus:
    """Tests for status derivation."""

    def test_on_time(self, debt_factory):
        """Nothing overdue yet."""
        debt = debt_factory(start_date=date(2024, 1, 15))
        assert calculate_debt_status(debt, today=date(2024, 1, 15)) == DebtStatus.ON_TIME

    def test_late_after_due_date(self, debt_factory):
        """An unpaid installment due yesterday makes the debt late."""
        debt = debt_factory(start_date=date(2024, 1, 15))
        assert calculate_debt_status(debt, today=date(2024, 1, 16)) == DebtStatus.LATE

    def test_paid_overdue_installment_not_late(self, debt_factory):
        """Paid installments never count as overdue."""
        debt = debt_factory(start_date=date(2024, 1, 15), paid_count=1)
        assert calculate_debt_status(debt, today=date(2024, 1, 20)) == DebtStatus.ON_TIME

    def test_paid_off_wins_over_dates(self, debt_factory):
        """A fully paid debt is paid off even with old due dates."""
        debt = debt_factory(start_date=date(2020, 1, 15), paid_count=3)
        assert calculate_debt_status(debt, today=date(2024, 1, 1)) == DebtStatus.PAID_OFF

    def test_empty_schedule_is_paid_off(self):
        """No installments means nothing left to pay."""
        debt = Debt(
            description="Nothing",
            total_value=Decimal("0"),
            installment_value=Decimal("0"),
            total_installments=0,
            start_date=date(2024, 1, 1),
        )
        assert calculate_debt_status(debt, today=date(2024, 1, 1)) == DebtStatus.PAID_OFF

    def test_is_overdue_is_strict(self, debt_factory):
        """Due today is not overdue."""
        inst = debt_factory().installments[0]
        assert not is_overdue(inst, inst.due_date)
        assert is_overdue(inst, date(2024, 1, 16))
