"""
DebtFlow - Source Package

A personal debt tracker: register debts paid in installments, mark
installments as paid, see overdue alerts and a running summary, all
kept in local storage.

DESIGN PRINCIPLES:
1. Status and totals are derived, never stored
2. Not-found is a normal result, not an error
3. Regenerating a schedule is lossy - and says so
4. External AI is optional and never blocks the app
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "DebtFlow Team"
