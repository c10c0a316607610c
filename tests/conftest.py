"""Shared fixtures: in-memory storage and a few ready-made debts."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from debtflow.config import get_settings
from debtflow.models.debt import Debt
from debtflow.schedule.generator import generate_installments
from debtflow.services.storage import DebtRepository, InMemoryStore

FIXED_NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def default_settings(monkeypatch):
    """Run every test against the built-in pt-BR defaults."""
    for name in (
        "CURRENCY_SYMBOL",
        "DECIMAL_SEPARATOR",
        "THOUSANDS_SEPARATOR",
        "DATE_FORMAT",
        "DATETIME_FORMAT",
        "MAX_DEBT_VALUE",
        "ADVICE_LANGUAGE",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_debt(
    description: str = "Credit card",
    total_value: str = "300.00",
    installment_value: str = "100.00",
    count: int = 3,
    start_date: date = date(2024, 1, 15),
    paid_count: int = 0,
    down_payment: str = "0",
) -> Debt:
    return Debt(
        description=description,
        total_value=Decimal(total_value),
        down_payment=Decimal(down_payment),
        installment_value=Decimal(installment_value),
        total_installments=count,
        start_date=start_date,
        installments=generate_installments(
            count, installment_value, start_date, paid_count, now=FIXED_NOW
        ),
        created_at=FIXED_NOW,
    )


@pytest.fixture
def debt_factory():
    return make_debt


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def repository(store):
    return DebtRepository(store)
