"""
Main Orchestrator for Spendy

This module ties the ledger core to persistence and the UI:
1. WalletStore owns the ledger, the registry, the theme and the
   transient entry/month selection, and exposes every user action
2. Every committed mutation is announced on a change channel
3. AutoSaver listens on that channel and writes the affected slot

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is saved before the initial load has finished, so stored
  data is never overwritten with defaults
- Saves are fire-and-forget; reads always see in-memory state
- A failed save is logged and never rolls back the mutation
"""

import asyncio
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Callable, Optional, Union

from spendy.audit import AuditLogger
from spendy.config import StorageSettings, get_settings
from spendy.ledger import (
    CategoryLifecycleResolver,
    CategoryRegistry,
    DeletionOutcome,
    DeletionRequest,
    TransactionLedger,
    build_month_view,
    is_future_month,
    local_now,
)
from spendy.models.audit import AuditEventBuilder
from spendy.models.transaction import (
    EntrySelection,
    MonthSnapshot,
    ReferenceMonth,
    Theme,
    Transaction,
    TransactionType,
)
from spendy.models.validation import ValidationIssue, ValidationResult
from spendy.services.storage import (
    InMemoryGateway,
    JsonFileGateway,
    PersistenceGateway,
    dump_categories,
    dump_theme,
    dump_transactions,
    load_categories,
    load_theme,
    load_transactions,
)
from spendy.validation import EntryValidator, ValidationError


class StoreChange(str, Enum):
    """Which persisted slot a mutation touched."""
    TRANSACTIONS = "transactions"
    CATEGORIES = "categories"
    THEME = "theme"


ChangeListener = Callable[[StoreChange], None]


class WalletStore:
    """
    Single owner of all ledger state.

    Mutations are synchronous and run to completion; the change
    channel is notified after each committed mutation.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        audit_logger: Optional[AuditLogger] = None,
        storage_settings: Optional[StorageSettings] = None,
        clock: Callable[[], datetime] = local_now,
        display_date_format: Optional[str] = None,
        default_theme: Optional[Union[Theme, str]] = None,
    ):
        if default_theme is None:
            default_theme = get_settings().ledger.default_theme

        self._gateway = gateway
        self._clock = clock
        self._keys = storage_settings or get_settings().storage
        self._audit = audit_logger or AuditLogger()
        self._validator = EntryValidator()
        self._listeners: list[ChangeListener] = []

        self.ledger = TransactionLedger(
            validator=self._validator,
            clock=clock,
            display_date_format=display_date_format,
        )
        self.registry = CategoryRegistry(validator=self._validator)
        self.selection = EntrySelection()
        self.resolver = CategoryLifecycleResolver(
            self.ledger, self.registry, self.selection, self._validator
        )
        self.theme = Theme(default_theme)
        self.current_month = ReferenceMonth.current(clock().date())

        self.is_loaded = False
        self.load_error: Optional[str] = None

        self.saver = AutoSaver(self, gateway, self._keys, self._audit)

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit

    @property
    def validator(self) -> EntryValidator:
        return self._validator

    # ------------------------------------------------------------------
    # Change channel
    # ------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, *changes: StoreChange) -> None:
        for change in changes:
            for listener in list(self._listeners):
                listener(change)

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    async def load(self) -> bool:
        """
        Load all three slots before any interaction.

        A slot that is missing keeps its default. A slot that fails
        to load also keeps its default; the failure is recorded in
        `load_error` for a blocking notice.

        Returns:
            True if every slot loaded (or was absent)
        """
        keys = (
            self._keys.transactions_key,
            self._keys.categories_key,
            self._keys.theme_key,
        )
        decoders = (load_transactions, load_categories, load_theme)
        blobs = await asyncio.gather(
            *(self._gateway.get(key) for key in keys),
            return_exceptions=True,
        )

        decoded = {}
        failures = []
        for key, decoder, blob in zip(keys, decoders, blobs):
            if isinstance(blob, BaseException) and not isinstance(blob, Exception):
                raise blob
            try:
                if isinstance(blob, Exception):
                    raise blob
                if blob:
                    decoded[key] = decoder(blob)
            except Exception as e:
                failures.append(key)
                self._audit.log(AuditEventBuilder.load_failed(str(e), key))

        if self._keys.transactions_key in decoded:
            self.ledger.replace(decoded[self._keys.transactions_key])
        if self._keys.categories_key in decoded:
            self.registry.replace(decoded[self._keys.categories_key])
        if self._keys.theme_key in decoded:
            self.theme = decoded[self._keys.theme_key]

        self.load_error = "Failed to load data." if failures else None
        self.is_loaded = True

        self._audit.log(AuditEventBuilder.data_loaded(
            transaction_count=len(self.ledger),
            category_counts={
                t_type.value: len(names)
                for t_type, names in self.registry.to_mapping().items()
            },
            theme=self.theme.value,
        ))
        return not failures

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def today(self) -> date:
        return self._clock().date()

    def month_view(self) -> MonthSnapshot:
        """Filtered transactions, totals and groups for the current month."""
        return build_month_view(self.ledger, self.current_month, self.today())

    @property
    def can_add_entries(self) -> bool:
        """New entries are refused for months that have not started."""
        return not is_future_month(self.current_month, self.today())

    def categories_for(self, t_type: TransactionType) -> tuple[str, ...]:
        return self.registry.list_for(t_type)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def add_transaction(
        self,
        t_type: TransactionType,
        amount: Union[str, int, float, Decimal, None],
        category: Optional[str],
        note: Optional[str] = "",
    ) -> Transaction:
        """
        Add a transaction to the current month.

        Raises:
            ValidationError: If the input is refused or the current
                             month is in the future
        """
        try:
            if not self.can_add_entries:
                raise ValidationError(ValidationResult(
                    action="add_transaction",
                    issues=[ValidationIssue(
                        field="month",
                        issue_type="future_month",
                        message=f"Cannot add entries to {self.current_month.label()} yet",
                        suggested_fix="Switch to the current month",
                    )],
                ))
            transaction = self.ledger.add(
                t_type, amount, category, note, reference_month=self.current_month
            )
        except ValidationError as e:
            self._log_rejection(e)
            raise

        self.selection.reset()
        self._audit.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction.id,
            transaction_type=transaction.type.value,
            category=transaction.category,
            amount=str(transaction.amount),
        ))
        self._notify(StoreChange.TRANSACTIONS)
        return transaction

    def remove_transaction(self, transaction_id: str) -> bool:
        """Delete one transaction. The UI asks for confirmation first."""
        removed = self.ledger.remove(transaction_id)
        if removed:
            self._audit.log(AuditEventBuilder.transaction_removed(transaction_id))
            self._notify(StoreChange.TRANSACTIONS)
        return removed

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def add_category(self, t_type: TransactionType, name: Optional[str]) -> str:
        """
        Add a category and select it in the entry form.

        Raises:
            ValidationError: If the name is empty or already listed
        """
        t_type = TransactionType(t_type)
        try:
            stored = self.registry.add(t_type, name)
        except ValidationError as e:
            self._audit.log(AuditEventBuilder.category_add_rejected(
                transaction_type=t_type.value,
                name=(name or "").strip(),
                reason=str(e),
            ))
            raise

        self.selection.type = t_type
        self.selection.category = stored
        self._audit.log(AuditEventBuilder.category_added(t_type.value, stored))
        self._notify(StoreChange.CATEGORIES)
        return stored

    def begin_category_deletion(
        self,
        t_type: TransactionType,
        name: str,
    ) -> DeletionRequest:
        return self.resolver.begin(t_type, name)

    def confirm_category_deletion(self, request: DeletionRequest) -> DeletionRequest:
        """Delete a category that has no transactions."""
        self.resolver.confirm(request)
        self._finish_deletion(request)
        return request

    def delete_category_with_transactions(self, request: DeletionRequest) -> DeletionRequest:
        """Delete a category and every transaction filed under it."""
        self.resolver.delete_all(request)
        self._audit.log(AuditEventBuilder.transactions_deleted(
            request.type.value, request.category, request.affected_count
        ))
        self._finish_deletion(request)
        return request

    def reassign_category(
        self,
        request: DeletionRequest,
        target_category: Optional[str],
    ) -> DeletionRequest:
        """
        Move a category's transactions to another one, then delete it.

        Raises:
            ValidationError: If no valid target is chosen
        """
        try:
            self.resolver.reassign(request, target_category)
        except ValidationError as e:
            self._log_rejection(e)
            raise

        self._audit.log(AuditEventBuilder.transactions_reassigned(
            request.type.value,
            request.category,
            target_category,
            request.affected_count,
        ))
        self._finish_deletion(request)
        return request

    def cancel_category_deletion(self, request: DeletionRequest) -> DeletionRequest:
        self.resolver.cancel(request)
        self._audit.log(AuditEventBuilder.category_deletion_cancelled(
            request.type.value, request.category
        ))
        return request

    def _finish_deletion(self, request: DeletionRequest) -> None:
        self._audit.log(AuditEventBuilder.category_deleted(
            request.type.value, request.category, request.outcome.value
        ))
        if request.outcome == DeletionOutcome.DELETED:
            self._notify(StoreChange.CATEGORIES)
        else:
            self._notify(StoreChange.TRANSACTIONS, StoreChange.CATEGORIES)

    # ------------------------------------------------------------------
    # Entry form, month navigation and theme
    # ------------------------------------------------------------------

    def select_type(self, t_type: TransactionType) -> None:
        """Switch the entry form type; the category choice is cleared."""
        self.selection.type = TransactionType(t_type)
        self.selection.category = ""

    def select_category(self, name: str) -> None:
        if not self.registry.contains(self.selection.type, name):
            raise ValueError(f"No {self.selection.type.value} category named '{name}'")
        self.selection.category = name

    def change_month(self, direction: int) -> ReferenceMonth:
        """Step the viewed month backward (negative) or forward (positive)."""
        self.current_month = self.current_month.shift(direction)
        return self.current_month

    def select_month(self, year: int, month: int) -> ReferenceMonth:
        """Jump straight to a month (month is 1-12)."""
        self.current_month = ReferenceMonth(year=year, month=month)
        return self.current_month

    def set_theme(self, theme: Union[Theme, str]) -> Theme:
        theme = Theme(theme)
        if theme != self.theme:
            self.theme = theme
            self._audit.log(AuditEventBuilder.theme_changed(theme.value))
            self._notify(StoreChange.THEME)
        return self.theme

    def toggle_theme(self) -> Theme:
        return self.set_theme(self.theme.toggle())

    # ------------------------------------------------------------------
    # Persistence helpers
    # ------------------------------------------------------------------

    async def flush(self) -> None:
        """Wait for every scheduled save to finish."""
        await self.saver.flush()

    def _log_rejection(self, error: ValidationError) -> None:
        issues = [
            {"field": i.field, "type": i.issue_type, "message": i.message}
            for i in error.issues
        ]
        self._audit.log(AuditEventBuilder.validation_failed(error.result.action, issues))


class AutoSaver:
    """
    Writes the affected slot after every committed mutation.

    With a running event loop the save is scheduled as a task and not
    awaited. Without one it runs to completion before returning.
    Saves of the same slot are written in the order they were issued.
    """

    def __init__(
        self,
        store: WalletStore,
        gateway: PersistenceGateway,
        keys: StorageSettings,
        audit_logger: AuditLogger,
    ):
        self._store = store
        self._gateway = gateway
        self._keys = keys
        self._audit = audit_logger
        self._pending: set[asyncio.Task] = set()
        self._latest: dict[str, asyncio.Task] = {}
        store.subscribe(self.on_change)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def on_change(self, change: StoreChange) -> None:
        if not self._store.is_loaded:
            return

        key, blob = self._encode(change)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.save(key, blob))
            return

        previous = self._latest.get(key)
        task = loop.create_task(self.save(key, blob, previous))
        self._latest[key] = task
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def _encode(self, change: StoreChange) -> tuple[str, str]:
        """Serialize the slot as it is right now."""
        if change == StoreChange.TRANSACTIONS:
            return self._keys.transactions_key, dump_transactions(self._store.ledger)
        if change == StoreChange.CATEGORIES:
            return self._keys.categories_key, dump_categories(self._store.registry.to_mapping())
        return self._keys.theme_key, dump_theme(self._store.theme)

    async def save(
        self,
        key: str,
        blob: str,
        previous: Optional[asyncio.Task] = None,
    ) -> bool:
        """
        Write one slot. Never raises; failures are logged.

        Returns:
            True if the gateway reported success
        """
        if previous is not None and not previous.done():
            await asyncio.wait({previous})

        try:
            written = await self._gateway.set(key, blob)
        except Exception as e:
            self._audit.log(AuditEventBuilder.save_failed(key, str(e)))
            return False

        if not written:
            self._audit.log(AuditEventBuilder.save_failed(key, "Gateway reported the write as failed"))
            return False
        return True

    async def flush(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending))


def create_gateway(backend: Optional[str] = None) -> PersistenceGateway:
    """Build the configured persistence gateway."""
    backend = backend or get_settings().ledger.storage_backend
    if backend == "memory":
        return InMemoryGateway()
    if backend == "json":
        return JsonFileGateway()
    raise ValueError(f"Unknown storage backend: {backend}")


def create_store(
    gateway: Optional[PersistenceGateway] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> WalletStore:
    """
    Factory function to create the application store.

    The caller must await `store.load()` before using it.
    """
    return WalletStore(
        gateway=gateway or create_gateway(),
        audit_logger=audit_logger,
    )
