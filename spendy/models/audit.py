"""
Audit Models for Spendy

Every ledger mutation and every persistence outcome is logged.
This provides:
1. Traceability of what changed in the ledger and when
2. Visibility of save failures, which never block the user
3. Debugging information when stored data fails to load

DESIGN DECISION: Audit history is append-only. We never modify events.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Ledger
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_REMOVED = "transaction_removed"
    TRANSACTIONS_DELETED = "transactions_deleted"
    TRANSACTIONS_REASSIGNED = "transactions_reassigned"

    # Registry
    CATEGORY_ADDED = "category_added"
    CATEGORY_ADD_REJECTED = "category_add_rejected"
    CATEGORY_DELETED = "category_deleted"
    CATEGORY_DELETION_CANCELLED = "category_deletion_cancelled"

    # Preferences
    THEME_CHANGED = "theme_changed"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    DATA_LOADED = "data_loaded"
    LOAD_FAILED = "load_failed"
    SAVE_FAILED = "save_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every mutation and persistence outcome creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'category', 'slot')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID or name of the entity this event relates to"
    )

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction)
        event = AuditEventBuilder.save_failed("@tracker_app_theme", "disk full")
    """

    @staticmethod
    def transaction_added(
        transaction_id: str,
        transaction_type: str,
        category: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"{transaction_type} added: {category} - {amount}",
            details={
                "type": transaction_type,
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_removed(transaction_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REMOVED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction removed",
            is_user_action=True,
        )

    @staticmethod
    def transactions_deleted(
        transaction_type: str,
        category: str,
        count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_DELETED,
            entity_type="category",
            entity_id=category,
            description=f"Deleted {count} {transaction_type} transactions under {category}",
            details={
                "type": transaction_type,
                "count": count,
            },
            is_user_action=True,
        )

    @staticmethod
    def transactions_reassigned(
        transaction_type: str,
        category: str,
        target_category: str,
        count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_REASSIGNED,
            entity_type="category",
            entity_id=category,
            description=f"Moved {count} {transaction_type} transactions from {category} to {target_category}",
            details={
                "type": transaction_type,
                "target_category": target_category,
                "count": count,
            },
            is_user_action=True,
        )

    @staticmethod
    def category_added(transaction_type: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_ADDED,
            entity_type="category",
            entity_id=name,
            description=f"{transaction_type} category added: {name}",
            details={"type": transaction_type},
            is_user_action=True,
        )

    @staticmethod
    def category_add_rejected(
        transaction_type: str,
        name: str,
        reason: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_ADD_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="category",
            entity_id=name,
            description=f"{transaction_type} category rejected: {reason}",
            details={"type": transaction_type, "reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def category_deleted(
        transaction_type: str,
        name: str,
        mode: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_DELETED,
            entity_type="category",
            entity_id=name,
            description=f"{transaction_type} category deleted: {name}",
            details={"type": transaction_type, "mode": mode},
            is_user_action=True,
        )

    @staticmethod
    def category_deletion_cancelled(transaction_type: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_DELETION_CANCELLED,
            severity=AuditSeverity.DEBUG,
            entity_type="category",
            entity_id=name,
            description=f"Deletion of {transaction_type} category {name} cancelled",
            details={"type": transaction_type},
            is_user_action=True,
        )

    @staticmethod
    def theme_changed(theme: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.THEME_CHANGED,
            entity_type="theme",
            entity_id=theme,
            description=f"Theme changed to {theme}",
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(action: str, issues: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="action",
            entity_id=action,
            description=f"{action} rejected with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def data_loaded(
        transaction_count: int,
        category_counts: dict[str, int],
        theme: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            entity_type="store",
            description=f"Loaded {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "category_counts": category_counts,
                "theme": theme,
            },
        )

    @staticmethod
    def load_failed(error_message: str, key: Optional[str] = None) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="slot",
            entity_id=key,
            description="Failed to load stored data, using defaults",
            error_message=error_message,
        )

    @staticmethod
    def save_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SAVE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="slot",
            entity_id=key,
            description=f"Failed to save {key}",
            error_message=error_message,
        )
