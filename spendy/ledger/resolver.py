"""
Category Lifecycle Resolver

Deleting a category is a small state machine:

    begin()
      |-- no dependent transactions --> SIMPLE_CONFIRM
      |                                   confirm() -> COMPLETED
      |                                   cancel()  -> CANCELLED
      |
      `-- dependent transactions ----> CONFLICT_RESOLUTION
                                          delete_all() -> COMPLETED
                                          reassign()   -> COMPLETED
                                          cancel()     -> CANCELLED

Only this module removes names from the CategoryRegistry, so no
transaction is left pointing at a category that silently vanished
(unless the caller explicitly reassigns or deletes them).

A refused action (e.g. reassign without a target) leaves the ledger,
the registry and the request exactly as they were.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from spendy.ledger.registry import CategoryRegistry
from spendy.ledger.transactions import BulkMode, TransactionLedger
from spendy.models.transaction import EntrySelection, TransactionType
from spendy.validation import EntryValidator


class DeletionState(str, Enum):
    """Where a deletion request currently stands."""
    SIMPLE_CONFIRM = "simple_confirm"
    CONFLICT_RESOLUTION = "conflict_resolution"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class DeletionOutcome(str, Enum):
    """How a completed request was resolved."""
    DELETED = "deleted"                    # No dependents
    DELETED_WITH_TRANSACTIONS = "deleted_with_transactions"
    REASSIGNED = "reassigned"
    CANCELLED = "cancelled"


class ResolutionError(Exception):
    """Action not allowed in the request's current state."""
    pass


class DeletionRequest(BaseModel):
    """A user's request to delete one category."""

    type: TransactionType
    category: str
    state: DeletionState
    dependent_count: int = Field(default=0, ge=0)
    reassign_targets: list[str] = Field(
        default_factory=list,
        description="Categories of the same type that may receive the transactions"
    )
    outcome: Optional[DeletionOutcome] = None
    affected_count: int = Field(
        default=0,
        ge=0,
        description="Transactions deleted or moved when the request completed"
    )
    target_category: Optional[str] = None

    @property
    def has_dependents(self) -> bool:
        return self.dependent_count > 0

    @property
    def is_open(self) -> bool:
        return self.state in (DeletionState.SIMPLE_CONFIRM, DeletionState.CONFLICT_RESOLUTION)


class CategoryLifecycleResolver:
    """
    Orchestrates category deletion across the ledger and the registry.

    Args:
        ledger: Transaction ledger to delete from or reassign in
        registry: Category registry to remove the name from
        selection: Entry-form state; its category is cleared when
                   it names a category that was just deleted
    """

    def __init__(
        self,
        ledger: TransactionLedger,
        registry: CategoryRegistry,
        selection: Optional[EntrySelection] = None,
        validator: Optional[EntryValidator] = None,
    ):
        self._ledger = ledger
        self._registry = registry
        self._selection = selection
        self._validator = validator or EntryValidator()

    def begin(self, t_type: TransactionType, category: str) -> DeletionRequest:
        """
        Start deleting a category and check for dependent transactions.

        Raises:
            ResolutionError: If the category is not listed for the type
        """
        t_type = TransactionType(t_type)
        if not self._registry.contains(t_type, category):
            raise ResolutionError(f"No {t_type.value} category named '{category}'")

        dependent_count = len(self._ledger.dependents(category, t_type))
        state = (
            DeletionState.CONFLICT_RESOLUTION
            if dependent_count
            else DeletionState.SIMPLE_CONFIRM
        )

        return DeletionRequest(
            type=t_type,
            category=category,
            state=state,
            dependent_count=dependent_count,
            reassign_targets=self._targets_for(t_type, category),
        )

    def confirm(self, request: DeletionRequest) -> DeletionRequest:
        """Delete a category that has no dependent transactions."""
        self._require(request, DeletionState.SIMPLE_CONFIRM)
        if self._ledger.has_dependents(request.category, request.type):
            raise ResolutionError(
                f"'{request.category}' has transactions now; start the deletion again"
            )

        self._registry.remove(request.type, request.category)
        return self._complete(request, DeletionOutcome.DELETED, 0)

    def delete_all(self, request: DeletionRequest) -> DeletionRequest:
        """Delete the category together with all of its transactions."""
        self._require(request, DeletionState.CONFLICT_RESOLUTION)

        removed = self._ledger.bulk_reassign_or_delete(
            request.category, request.type, BulkMode.DELETE
        )
        self._registry.remove(request.type, request.category)
        return self._complete(request, DeletionOutcome.DELETED_WITH_TRANSACTIONS, removed)

    def reassign(
        self,
        request: DeletionRequest,
        target_category: Optional[str],
    ) -> DeletionRequest:
        """
        Move the category's transactions to another category, then delete it.

        Raises:
            ValidationError: If no target is chosen or it is not a
                             remaining category of the same type
        """
        self._require(request, DeletionState.CONFLICT_RESOLUTION)

        available = self._targets_for(request.type, request.category)
        result = self._validator.validate_reassign_target(target_category, available)
        self._validator.raise_for_errors(result)

        moved = self._ledger.bulk_reassign_or_delete(
            request.category, request.type, BulkMode.REASSIGN, target_category
        )
        self._registry.remove(request.type, request.category)
        request.target_category = target_category
        return self._complete(request, DeletionOutcome.REASSIGNED, moved)

    def cancel(self, request: DeletionRequest) -> DeletionRequest:
        """Drop the request without changing anything."""
        if not request.is_open:
            raise ResolutionError(f"Request is already {request.state.value}")
        request.state = DeletionState.CANCELLED
        request.outcome = DeletionOutcome.CANCELLED
        return request

    def _targets_for(self, t_type: TransactionType, category: str) -> list[str]:
        return [name for name in self._registry.list_for(t_type) if name != category]

    def _require(self, request: DeletionRequest, state: DeletionState) -> None:
        if request.state != state:
            raise ResolutionError(
                f"Cannot do that while the request is {request.state.value}"
            )

    def _complete(
        self,
        request: DeletionRequest,
        outcome: DeletionOutcome,
        affected: int,
    ) -> DeletionRequest:
        request.state = DeletionState.COMPLETED
        request.outcome = outcome
        request.affected_count = affected

        if self._selection is not None and self._selection.category == request.category:
            self._selection.category = ""

        return request
