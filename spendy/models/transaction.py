"""
Core Data Models for Spendy

These models define the schemas for all ledger data:
1. Transactions (the only record type that is ever persisted per-row)
2. Reference months (the calendar window every view is scoped to)
3. Derived month views (totals and category groups, never stored)
4. Theme and entry-form state

DESIGN DECISION: Wire names follow the stored JSON shape
(`dateISO`, `displayDate`) through aliases, so data written by earlier
clients loads unchanged while Python code stays snake_case.
"""

import calendar
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of a transaction.

    The values double as the keys of the stored category mapping.
    """
    INCOME = "Income"
    EXPENSE = "Expense"


class Theme(str, Enum):
    """Colour theme preference."""
    LIGHT = "light"
    DARK = "dark"

    def toggle(self) -> "Theme":
        return Theme.DARK if self is Theme.LIGHT else Theme.LIGHT


MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

DEFAULT_CATEGORIES: dict[TransactionType, list[str]] = {
    TransactionType.INCOME: ["Salary", "Gift", "Freelance"],
    TransactionType.EXPENSE: ["Food", "Transport", "Shopping", "Bills"],
}


def default_categories() -> dict[TransactionType, list[str]]:
    """Fresh copy of the seed category lists."""
    return {t_type: list(names) for t_type, names in DEFAULT_CATEGORIES.items()}


def new_transaction_id() -> str:
    return str(uuid4())


# Month indexes (year * 12 + month - 1) of the supported calendar range
_FIRST_MONTH_INDEX = 1 * 12
_LAST_MONTH_INDEX = 9999 * 12 + 11


# =============================================================================
# REFERENCE MONTH
# =============================================================================

class ReferenceMonth(BaseModel):
    """
    A calendar month used to scope views and new entries.

    Immutable: navigation returns a new instance.
    """
    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12, description="Month number, 1-12")

    @classmethod
    def from_date(cls, value: date) -> "ReferenceMonth":
        return cls(year=value.year, month=value.month)

    @classmethod
    def current(cls, today: Optional[date] = None) -> "ReferenceMonth":
        return cls.from_date(today or date.today())

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days_in_month)

    def shift(self, months: int) -> "ReferenceMonth":
        """
        Move forward (positive) or backward (negative) by whole months.

        Stops at January of year 1 and December of year 9999.
        """
        index = self.year * 12 + (self.month - 1) + months
        index = max(_FIRST_MONTH_INDEX, min(index, _LAST_MONTH_INDEX))
        return ReferenceMonth(year=index // 12, month=index % 12 + 1)

    def contains(self, timestamp: datetime) -> bool:
        """
        Does the timestamp fall inside this month?

        Aware timestamps are converted to local time first, so a stored
        UTC instant is judged by the calendar day the user saw.
        """
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone()
        return timestamp.year == self.year and timestamp.month == self.month

    def label(self) -> str:
        """Header text, e.g. 'March 2025'."""
        return f"{MONTH_NAMES[self.month - 1]} {self.year}"

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


# =============================================================================
# TRANSACTION
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense entry.

    Only `category` may change after creation (category reassignment).
    Everything else is fixed for the lifetime of the record.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    # Identity
    id: str = Field(
        default_factory=new_transaction_id,
        min_length=1,
        description="Opaque unique identifier"
    )

    type: TransactionType = Field(
        ...,
        description="Income or Expense"
    )
    amount: Decimal = Field(
        ...,
        description="Monetary value as entered"
    )
    category: str = Field(
        ...,
        description="Category name within the type's list"
    )
    note: str = Field(
        default="",
        description="Free-text note"
    )

    # Dates
    date_iso: datetime = Field(
        ...,
        alias="dateISO",
        description="Timestamp of the day the entry is assigned to"
    )
    display_date: str = Field(
        default="",
        alias="displayDate",
        description="Formatted date, frozen at creation"
    )

    @field_validator('note', mode='before')
    @classmethod
    def none_note_is_empty(cls, v: Optional[str]) -> str:
        return v or ""

    @property
    def signed_amount(self) -> Decimal:
        """Amount with sign for net calculations."""
        return self.amount if self.type == TransactionType.INCOME else -self.amount

    def to_wire_dict(self) -> dict:
        """Dictionary in the stored JSON shape."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# DERIVED VIEW MODELS
# =============================================================================

class Totals(BaseModel):
    """Income, expense and balance for a set of transactions."""

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class CategoryGroup(BaseModel):
    """
    All transactions of one (type, category) pair within a month.

    `transactions` keeps ledger order (most recently added first).
    """

    type: TransactionType
    category: str
    total: Decimal = Decimal("0")
    transactions: list[Transaction] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.transactions)


class MonthSnapshot(BaseModel):
    """Everything the month screen shows, computed for one read."""

    month: ReferenceMonth
    transactions: list[Transaction] = Field(default_factory=list)
    totals: Totals = Field(default_factory=Totals)
    groups: list[CategoryGroup] = Field(default_factory=list)
    is_future: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.transactions


# =============================================================================
# ENTRY FORM STATE
# =============================================================================

class EntrySelection(BaseModel):
    """
    Transient state of the new-transaction form.

    Not persisted. Category deletion clears `category` when it
    points at the deleted name.
    """
    model_config = ConfigDict(validate_assignment=True)

    type: TransactionType = TransactionType.EXPENSE
    category: str = ""

    def reset(self) -> None:
        self.type = TransactionType.EXPENSE
        self.category = ""
