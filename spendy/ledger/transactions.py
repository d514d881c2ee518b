"""
Transaction Ledger

Owns the collection of transaction records, most recently added first.

The ledger only ever:
- prepends new records (add)
- drops a record by id (remove)
- drops or re-categorises every record of one (type, category) pair
  (bulk_reassign_or_delete, used by category deletion)

No other field of a stored transaction is ever changed.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Callable, Iterable, Iterator, Optional, Union

from spendy.models.transaction import (
    ReferenceMonth,
    Transaction,
    TransactionType,
    new_transaction_id,
)
from spendy.validation import EntryValidator


def local_now() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now().astimezone()


class BulkMode(str, Enum):
    """What to do with the transactions of a deleted category."""
    DELETE = "delete"
    REASSIGN = "reassign"


def assigned_date(reference_month: ReferenceMonth, now: datetime) -> datetime:
    """
    Date a new entry is filed under.

    Today's day-of-month applied to the reference month. If that day
    does not exist in the month (e.g. the 31st in February), the entry
    lands on the month's last day instead of spilling into the next.
    """
    day = min(now.day, reference_month.days_in_month)
    return now.replace(year=reference_month.year, month=reference_month.month, day=day)


def format_display_date(value: datetime, template: str) -> str:
    return template.format(day=value.day, month=value.month, year=value.year)


class TransactionLedger:
    """
    In-memory transaction store.

    Not thread-safe. All mutations are expected to run to completion
    on a single thread before the next one starts.
    """

    def __init__(
        self,
        transactions: Optional[Iterable[Transaction]] = None,
        validator: Optional[EntryValidator] = None,
        clock: Callable[[], datetime] = local_now,
        display_date_format: Optional[str] = None,
    ):
        self._validator = validator or EntryValidator()
        self._clock = clock
        if display_date_format is None:
            from spendy.config import get_settings
            display_date_format = get_settings().ledger.display_date_format
        self._display_date_format = display_date_format
        self._transactions: list[Transaction] = []
        if transactions is not None:
            self.replace(transactions)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return tuple(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._transactions))

    def __contains__(self, transaction_id: object) -> bool:
        return self.get(transaction_id) is not None

    def get(self, transaction_id: object) -> Optional[Transaction]:
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def dependents(self, category: str, t_type: TransactionType) -> list[Transaction]:
        """Transactions filed under (type, category), in ledger order."""
        t_type = TransactionType(t_type)
        return [
            t for t in self._transactions
            if t.type == t_type and t.category == category
        ]

    def has_dependents(self, category: str, t_type: TransactionType) -> bool:
        t_type = TransactionType(t_type)
        return any(
            t.type == t_type and t.category == category
            for t in self._transactions
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(
        self,
        t_type: TransactionType,
        amount: Union[str, int, float, Decimal, None],
        category: Optional[str],
        note: Optional[str] = "",
        reference_month: Optional[ReferenceMonth] = None,
        now: Optional[datetime] = None,
    ) -> Transaction:
        """
        Record a new transaction at the front of the ledger.

        Args:
            t_type: Income or Expense
            amount: Raw amount as typed
            category: Category name
            note: Optional free text
            reference_month: Month the entry is filed under (default: current)
            now: Override of the current time

        Returns:
            The new transaction

        Raises:
            ValidationError: If amount or category is refused
        """
        value, category = self._validator.clean_transaction(amount, category)

        now = now or self._clock()
        reference_month = reference_month or ReferenceMonth.from_date(now.date())
        when = assigned_date(reference_month, now)

        transaction_id = new_transaction_id()
        while transaction_id in self:
            transaction_id = new_transaction_id()

        transaction = Transaction(
            id=transaction_id,
            type=TransactionType(t_type),
            amount=value,
            category=category,
            note=note or "",
            date_iso=when,
            display_date=format_display_date(when, self._display_date_format),
        )

        self._transactions.insert(0, transaction)
        return transaction

    def remove(self, transaction_id: str) -> bool:
        """Delete a transaction. Returns False (and does nothing) if absent."""
        for index, transaction in enumerate(self._transactions):
            if transaction.id == transaction_id:
                del self._transactions[index]
                return True
        return False

    def bulk_reassign_or_delete(
        self,
        category: str,
        t_type: TransactionType,
        mode: BulkMode,
        target_category: Optional[str] = None,
    ) -> int:
        """
        Delete or re-categorise every transaction under (type, category).

        Returns:
            Number of transactions affected

        Raises:
            ValidationError: If mode is reassign and no target is given
        """
        t_type = TransactionType(t_type)
        mode = BulkMode(mode)

        if mode == BulkMode.REASSIGN:
            result = self._validator.validate_reassign_target(target_category)
            self._validator.raise_for_errors(result)

            affected = self.dependents(category, t_type)
            for transaction in affected:
                transaction.category = target_category
            return len(affected)

        kept = [
            t for t in self._transactions
            if not (t.type == t_type and t.category == category)
        ]
        removed = len(self._transactions) - len(kept)
        self._transactions = kept
        return removed

    def replace(self, transactions: Iterable[Transaction]) -> None:
        """
        Swap in a full list (used when loading stored data).

        Order is kept. A repeated id keeps its first record only.
        """
        seen = set()
        records = []
        for transaction in transactions:
            if transaction.id in seen:
                continue
            seen.add(transaction.id)
            records.append(transaction)
        self._transactions = records

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TransactionLedger):
            return NotImplemented
        return self._transactions == other._transactions

    def __repr__(self) -> str:
        return f"TransactionLedger({len(self._transactions)} transactions)"
