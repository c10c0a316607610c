"""
Debt Persistence Gateway

DESIGN DECISION: The whole debt collection is stored as ONE JSON document
in ONE named slot. Every mutation is a read-modify-write of the full
collection.

This is the right size for a single-user local tracker:
- No indexes or partial updates to keep consistent
- The slot is rewritten atomically by the store
- Collection order is the order debts were first saved

FAILURE SEMANTICS:
- Missing/blank slot -> empty collection (not an error)
- Unknown debt or installment id -> None / False (not an exception)
- Unparseable slot -> CorruptDataError (we never silently drop data)
"""

from datetime import datetime
from typing import Callable, Optional, Union
from uuid import UUID

from pydantic import TypeAdapter, ValidationError

from debtflow.models.debt import Debt, Installment
from debtflow.services.storage.interface import CorruptDataError, KeyValueStore

STORAGE_KEY = "debtflow_data_v1"

DebtId = Union[UUID, str]

_collection_adapter = TypeAdapter(list[Debt])


def serialize_debts(debts: list[Debt]) -> str:
    """Serialize the collection with the persisted (camelCase) field names."""
    return _collection_adapter.dump_json(debts, by_alias=True).decode("utf-8")


def deserialize_debts(raw: str) -> list[Debt]:
    """Parse a stored collection, raising CorruptDataError if it is invalid."""
    try:
        return _collection_adapter.validate_json(raw)
    except ValidationError as e:
        raise CorruptDataError(f"Stored debt collection is invalid: {e}")


class DebtRepository:
    """
    Whole-collection storage of Debt records in a key-value slot.
    """

    def __init__(self, store: KeyValueStore, storage_key: str = STORAGE_KEY):
        self._store = store
        self._key = storage_key

    @property
    def storage_key(self) -> str:
        return self._key

    # -------------------------------------------------------------------------
    # Whole-collection access
    # -------------------------------------------------------------------------

    def get_all(self) -> list[Debt]:
        """Load every debt. An unset or blank slot is an empty collection."""
        raw = self._store.get_item(self._key)
        if raw is None or not raw.strip():
            return []
        return deserialize_debts(raw)

    def _write_all(self, debts: list[Debt]) -> None:
        self._store.set_item(self._key, serialize_debts(debts))

    @staticmethod
    def _index_of(debts: list[Debt], debt_id: DebtId) -> int:
        wanted = str(debt_id)
        for index, debt in enumerate(debts):
            if str(debt.id) == wanted:
                return index
        return -1

    # -------------------------------------------------------------------------
    # Record operations
    # -------------------------------------------------------------------------

    def get_by_id(self, debt_id: DebtId) -> Optional[Debt]:
        debts = self.get_all()
        index = self._index_of(debts, debt_id)
        return debts[index] if index >= 0 else None

    def save_one(self, debt: Debt) -> Debt:
        """
        Insert or replace a debt.

        An existing record with the same id is replaced in place,
        preserving collection order. Otherwise the debt is appended.
        """
        debts = self.get_all()
        index = self._index_of(debts, debt.id)

        if index >= 0:
            debts[index] = debt
        else:
            debts.append(debt)

        self._write_all(debts)
        return debt

    def delete_one(self, debt_id: DebtId) -> bool:
        """
        Delete a debt.

        Returns True if a record was removed. Unknown ids leave the
        collection unchanged.
        """
        debts = self.get_all()
        remaining = [debt for debt in debts if str(debt.id) != str(debt_id)]
        self._write_all(remaining)
        return len(remaining) != len(debts)

    def _mutate_installment(
        self,
        debt_id: DebtId,
        installment_id: DebtId,
        mutate: Callable[[Installment], None],
    ) -> Optional[Debt]:
        """Locate a debt's installment, apply ``mutate`` and rewrite the slot."""
        debts = self.get_all()
        index = self._index_of(debts, debt_id)
        if index < 0:
            return None

        debt = debts[index]
        installment = debt.get_installment(installment_id)
        if installment is None:
            return None

        mutate(installment)
        self._write_all(debts)
        return debt

    def toggle_payment(
        self,
        debt_id: DebtId,
        installment_id: DebtId,
        is_paid: bool,
        now: Optional[datetime] = None,
    ) -> Optional[Debt]:
        """
        Mark an installment as paid or unpaid.

        Returns:
            The updated debt, or None if either id is unknown
        """
        return self._mutate_installment(
            debt_id,
            installment_id,
            lambda inst: inst.set_paid(is_paid, at=now),
        )

    def set_reminder(
        self,
        debt_id: DebtId,
        installment_id: DebtId,
        reminder: Optional[datetime],
    ) -> Optional[Debt]:
        """
        Set (or clear, with None) an installment's reminder.

        Returns:
            The updated debt, or None if either id is unknown
        """
        def apply(inst: Installment) -> None:
            inst.reminder = reminder

        return self._mutate_installment(debt_id, installment_id, apply)

    def clear_all(self) -> None:
        """Erase the entire store, not just the debt slot."""
        self._store.clear()
