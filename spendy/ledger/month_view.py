"""
Month View Engine

Pure derivations over the ledger for one reference month:
1. Filter: transactions dated in the month
2. Totals: income, expense and balance
3. Grouping: one group per (type, category) seen in the month

DESIGN DECISION: Everything here is recomputed from scratch on every
read. Nothing is cached, so there is nothing to invalidate when the
ledger changes.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from spendy.models.transaction import (
    CategoryGroup,
    MonthSnapshot,
    ReferenceMonth,
    Totals,
    Transaction,
    TransactionType,
)


_TYPE_ORDER = {
    TransactionType.INCOME: 0,
    TransactionType.EXPENSE: 1,
}


def filter_month(
    transactions: Iterable[Transaction],
    month: ReferenceMonth,
) -> list[Transaction]:
    """
    Transactions whose stored timestamp falls in `month`.

    Month and year are re-derived from each timestamp; ledger
    order is kept.
    """
    return [t for t in transactions if month.contains(t.date_iso)]


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    """Sum amounts by type. Balance is income minus expense."""
    income = Decimal("0")
    expense = Decimal("0")
    for transaction in transactions:
        if transaction.type == TransactionType.INCOME:
            income += transaction.amount
        else:
            expense += transaction.amount
    return Totals(income=income, expense=expense, balance=income - expense)


def group_by_category(transactions: Iterable[Transaction]) -> list[CategoryGroup]:
    """
    Partition transactions by (type, category).

    Groups come from the data, so a category with no transactions
    never appears. Income groups come first, then Expense groups;
    within a type, larger totals first. Ties keep the order in which
    the groups were first seen.
    """
    groups: dict[tuple[TransactionType, str], CategoryGroup] = {}
    for transaction in transactions:
        key = (transaction.type, transaction.category)
        group = groups.get(key)
        if group is None:
            group = CategoryGroup(type=transaction.type, category=transaction.category)
            groups[key] = group
        group.total += transaction.amount
        group.transactions.append(transaction)

    return sorted(
        groups.values(),
        key=lambda g: (_TYPE_ORDER[g.type], -g.total),
    )


def is_future_month(month: ReferenceMonth, today: Optional[date] = None) -> bool:
    """True if `month` starts after the current month does."""
    current = ReferenceMonth.current(today)
    return month.first_day > current.first_day


def build_month_view(
    transactions: Iterable[Transaction],
    month: ReferenceMonth,
    today: Optional[date] = None,
) -> MonthSnapshot:
    """Filter, total and group the ledger for one month."""
    filtered = filter_month(transactions, month)
    return MonthSnapshot(
        month=month,
        transactions=filtered,
        totals=compute_totals(filtered),
        groups=group_by_category(filtered),
        is_future=is_future_month(month, today),
    )


def format_currency(amount: Decimal, symbol: Optional[str] = None) -> str:
    """
    Presentation format: symbol plus two fixed decimals, e.g. '$12.50'.

    Negative values keep the sign after the symbol ('$-5.00').
    """
    if symbol is None:
        from spendy.config import get_settings
        symbol = get_settings().ledger.currency_symbol
    return f"{symbol}{Decimal(amount):.2f}"
