"""
Data Models Package

This package contains all Pydantic models used in Spendy.
All data flowing through the system must conform to these schemas.
"""

from spendy.models.transaction import (
    DEFAULT_CATEGORIES,
    MONTH_NAMES,
    CategoryGroup,
    EntrySelection,
    MonthSnapshot,
    ReferenceMonth,
    Theme,
    Totals,
    Transaction,
    TransactionType,
    default_categories,
    new_transaction_id,
)
from spendy.models.validation import ValidationIssue, ValidationResult
from spendy.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "DEFAULT_CATEGORIES",
    "MONTH_NAMES",
    "CategoryGroup",
    "EntrySelection",
    "MonthSnapshot",
    "ReferenceMonth",
    "Theme",
    "Totals",
    "Transaction",
    "TransactionType",
    "default_categories",
    "new_transaction_id",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
