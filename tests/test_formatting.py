"""Tests for display formatting."""

from datetime import date, datetime
from decimal import Decimal

from debtflow.config import get_settings
from debtflow.utils import format_currency, format_date, format_datetime, format_percentage


class TestFormatCurrency:
    """Tests for format_currency with the default pt-BR settings."""

    def test_thousands_and_decimals(self):
        """Separators follow the pt-BR convention."""
        assert format_currency(Decimal("1234.56")) == "R$ 1.234,56"

    def test_small_amount(self):
        """Amounts below one thousand have no group separator."""
        assert format_currency(5) == "R$ 5,00"

    def test_millions(self):
        """Every thousands group is separated."""
        assert format_currency("1234567.8") == "R$ 1.234.567,80"

    def test_rounds_half_up(self):
        """Sub-cent values are rounded half up."""
        assert format_currency(Decimal("0.125")) == "R$ 0,13"

    def test_negative(self):
        """The sign goes before the symbol."""
        assert format_currency(Decimal("-1")) == "-R$ 1,00"

    def test_configured_symbol(self, monkeypatch):
        """Symbol and separators come from the environment."""
        monkeypatch.setenv("CURRENCY_SYMBOL", "$")
        monkeypatch.setenv("DECIMAL_SEPARATOR", ".")
        monkeypatch.setenv("THOUSANDS_SEPARATOR", ",")
        get_settings.cache_clear()
        assert format_currency(Decimal("1234.5")) == "$ 1,234.50"


class TestFormatDate:
    """Tests for date formatting."""

    def test_date(self):
        """Calendar dates use dd/mm/YYYY."""
        assert format_date(date(2024, 3, 5)) == "05/03/2024"

    def test_datetime_uses_calendar_part(self):
        """Datetimes are shown as their date."""
        assert format_date(datetime(2024, 3, 5, 23, 59)) == "05/03/2024"

    def test_iso_string(self):
        """ISO strings are accepted."""
        assert format_date("2024-03-05") == "05/03/2024"
        assert format_date("2024-03-05T10:00:00") == "05/03/2024"

    def test_missing_date(self):
        """Missing values render as a dash."""
        assert format_date(None) == "-"
        assert format_date("") == "-"

    def test_datetime_format(self):
        """Reminders show date and time."""
        assert format_datetime(datetime(2024, 3, 5, 9, 0)) == "05/03/2024 09:00"
        assert format_datetime("2024-03-05T18:30:00") == "05/03/2024 18:30"
        assert format_datetime(None) == "-"

    def test_percentage(self):
        """Percentages are whole numbers."""
        assert format_percentage(42) == "42%"
