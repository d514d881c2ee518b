"""
Slot Codec

Serialization of the three persisted slots:

- transactions: JSON array of objects
  (id, type, amount, category, note, dateISO, displayDate)
- categories: JSON object {"Income": [...], "Expense": [...]}
- theme: bare token, "light" or "dark"

All encoders keep order. All decoders raise LoadError on
malformed input instead of returning partial data.
"""

from typing import Iterable, Mapping

import pydantic
from pydantic import TypeAdapter

from spendy.models.transaction import Theme, Transaction, TransactionType
from spendy.services.storage.interface import LoadError


_TRANSACTIONS = TypeAdapter(list[Transaction])
_CATEGORIES = TypeAdapter(dict[TransactionType, list[str]])


def dump_transactions(transactions: Iterable[Transaction]) -> str:
    return _TRANSACTIONS.dump_json(list(transactions), by_alias=True).decode("utf-8")


def load_transactions(blob: str) -> list[Transaction]:
    try:
        return _TRANSACTIONS.validate_json(blob)
    except pydantic.ValidationError as e:
        raise LoadError(f"Stored transactions are invalid: {e.error_count()} errors") from e


def dump_categories(categories: Mapping[TransactionType, list[str]]) -> str:
    return _CATEGORIES.dump_json(dict(categories)).decode("utf-8")


def load_categories(blob: str) -> dict[TransactionType, list[str]]:
    try:
        return _CATEGORIES.validate_json(blob)
    except pydantic.ValidationError as e:
        raise LoadError(f"Stored categories are invalid: {e.error_count()} errors") from e


def dump_theme(theme: Theme) -> str:
    return Theme(theme).value


def load_theme(blob: str) -> Theme:
    try:
        return Theme(blob.strip())
    except ValueError as e:
        raise LoadError(f"Unknown theme: {blob!r}") from e
