"""
Ledger Core Package

Category registry, transaction ledger, month views and the
category deletion workflow.
"""

from spendy.ledger.month_view import (
    build_month_view,
    compute_totals,
    filter_month,
    format_currency,
    group_by_category,
    is_future_month,
)
from spendy.ledger.registry import CategoryRegistry
from spendy.ledger.resolver import (
    CategoryLifecycleResolver,
    DeletionOutcome,
    DeletionRequest,
    DeletionState,
    ResolutionError,
)
from spendy.ledger.transactions import (
    BulkMode,
    TransactionLedger,
    assigned_date,
    local_now,
)

__all__ = [
    # Month view
    "build_month_view",
    "compute_totals",
    "filter_month",
    "format_currency",
    "group_by_category",
    "is_future_month",
    # Registry
    "CategoryRegistry",
    # Resolver
    "CategoryLifecycleResolver",
    "DeletionOutcome",
    "DeletionRequest",
    "DeletionState",
    "ResolutionError",
    # Ledger
    "BulkMode",
    "TransactionLedger",
    "assigned_date",
    "local_now",
]
