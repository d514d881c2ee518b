"""Builders shared by the test modules."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from spendy.models.transaction import Transaction, TransactionType
from spendy.services.storage import PersistenceError, PersistenceGateway


def local_noon(year: int, month: int, day: int) -> datetime:
    """Aware local timestamp at noon, safe from day shifts across DST."""
    return datetime(year, month, day, 12, 0).astimezone()


def make_transaction(
    t_type: TransactionType,
    category: str,
    amount: str,
    when: datetime,
    note: str = "",
) -> Transaction:
    return Transaction(
        type=t_type,
        amount=Decimal(amount),
        category=category,
        note=note,
        date_iso=when,
        display_date=f"{when.month}/{when.day}/{when.year}",
    )


class FailingGateway(PersistenceGateway):
    """Reads like an empty store; every write fails."""

    def __init__(self, stored: Optional[dict[str, str]] = None):
        self._stored = dict(stored or {})
        self.attempts = 0

    async def get(self, key: str) -> Optional[str]:
        return self._stored.get(key)

    async def set(self, key: str, blob: str) -> bool:
        self.attempts += 1
        raise PersistenceError("disk full")


class BrokenReadGateway(PersistenceGateway):
    """Raises on reading one key."""

    def __init__(self, broken_key: str, stored: Optional[dict[str, str]] = None):
        self._broken_key = broken_key
        self._stored = dict(stored or {})
        self.writes: dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        if key == self._broken_key:
            raise OSError("permission denied")
        return self._stored.get(key)

    async def set(self, key: str, blob: str) -> bool:
        self.writes[key] = blob
        return True


class RefusingGateway(PersistenceGateway):
    """Reports every write as not written, without raising."""

    def __init__(self):
        self.attempts = 0

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, blob: str) -> bool:
        self.attempts += 1
        return False
