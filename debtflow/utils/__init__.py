"""Utility helpers."""

from debtflow.utils.formatting import (
    format_currency,
    format_date,
    format_datetime,
    format_percentage,
)

__all__ = [
    "format_currency",
    "format_date",
    "format_datetime",
    "format_percentage",
]
