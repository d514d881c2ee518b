"""Tests for the category deletion workflow."""

import pytest

from spendy.ledger import (
    CategoryLifecycleResolver,
    DeletionOutcome,
    DeletionState,
    ResolutionError,
)
from spendy.models.transaction import EntrySelection, TransactionType
from spendy.validation import ValidationError


@pytest.fixture
def selection() -> EntrySelection:
    return EntrySelection()


@pytest.fixture
def resolver(ledger, registry, selection) -> CategoryLifecycleResolver:
    return CategoryLifecycleResolver(ledger, registry, selection)


class TestSimpleDeletion:
    """Categories with no transactions."""

    def test_begin_without_dependents(self, resolver):
        """Test an unused category goes straight to confirmation."""
        request = resolver.begin(TransactionType.EXPENSE, "Shopping")
        assert request.state == DeletionState.SIMPLE_CONFIRM
        assert request.dependent_count == 0
        assert not request.has_dependents

    def test_confirm_removes_category(self, resolver, registry):
        """Test confirmation removes the name."""
        request = resolver.confirm(resolver.begin(TransactionType.EXPENSE, "Shopping"))
        assert request.state == DeletionState.COMPLETED
        assert request.outcome == DeletionOutcome.DELETED
        assert not registry.contains(TransactionType.EXPENSE, "Shopping")

    def test_cancel_changes_nothing(self, resolver, registry):
        """Test cancelling keeps the category."""
        request = resolver.cancel(resolver.begin(TransactionType.EXPENSE, "Shopping"))
        assert request.state == DeletionState.CANCELLED
        assert request.outcome == DeletionOutcome.CANCELLED
        assert registry.contains(TransactionType.EXPENSE, "Shopping")

    def test_confirm_refused_when_dependents_appear(self, resolver, ledger, registry):
        """Test a stale simple request cannot orphan new transactions."""
        request = resolver.begin(TransactionType.EXPENSE, "Shopping")
        ledger.add(TransactionType.EXPENSE, "10", "Shopping")
        with pytest.raises(ResolutionError):
            resolver.confirm(request)
        assert registry.contains(TransactionType.EXPENSE, "Shopping")

    def test_unknown_category(self, resolver):
        """Test deleting a category that is not listed."""
        with pytest.raises(ResolutionError):
            resolver.begin(TransactionType.EXPENSE, "Nope")

    def test_other_type_untouched(self, resolver, registry):
        """Test deleting a name under one type keeps it under the other."""
        registry.add(TransactionType.EXPENSE, "Gift")
        resolver.confirm(resolver.begin(TransactionType.EXPENSE, "Gift"))
        assert registry.contains(TransactionType.INCOME, "Gift")


class TestConflictResolution:
    """Categories with dependent transactions."""

    @pytest.fixture
    def food_request(self, resolver, ledger):
        ledger.add(TransactionType.EXPENSE, "10", "Food")
        ledger.add(TransactionType.EXPENSE, "20", "Food")
        ledger.add(TransactionType.EXPENSE, "30", "Bills")
        ledger.add(TransactionType.INCOME, "40", "Salary")
        return resolver.begin(TransactionType.EXPENSE, "Food")

    def test_begin_with_dependents(self, food_request):
        """Test conflicts are detected with the right count and targets."""
        assert food_request.state == DeletionState.CONFLICT_RESOLUTION
        assert food_request.dependent_count == 2
        assert food_request.reassign_targets == ["Transport", "Shopping", "Bills"]

    def test_confirm_not_allowed(self, resolver, food_request):
        """Test the simple path is closed while conflicts exist."""
        with pytest.raises(ResolutionError):
            resolver.confirm(food_request)

    def test_delete_all(self, resolver, ledger, registry, food_request):
        """Test the category and its transactions go together."""
        request = resolver.delete_all(food_request)
        assert request.outcome == DeletionOutcome.DELETED_WITH_TRANSACTIONS
        assert request.affected_count == 2
        assert not ledger.has_dependents("Food", TransactionType.EXPENSE)
        assert len(ledger) == 2
        assert not registry.contains(TransactionType.EXPENSE, "Food")

    def test_reassign(self, resolver, ledger, registry, food_request):
        """Test Food transactions move to Bills and Food is removed."""
        request = resolver.reassign(food_request, "Bills")
        assert request.outcome == DeletionOutcome.REASSIGNED
        assert request.affected_count == 2
        assert request.target_category == "Bills"
        assert len(ledger.dependents("Bills", TransactionType.EXPENSE)) == 3
        assert len(ledger) == 4
        assert registry.list_for(TransactionType.EXPENSE) == ("Transport", "Shopping", "Bills")

    @pytest.mark.parametrize("target", ["", None, "Food", "Salary"])
    def test_reassign_bad_target_changes_nothing(
        self, resolver, ledger, registry, food_request, target
    ):
        """Test missing or unavailable targets are refused."""
        before_ledger = [t.model_copy() for t in ledger.transactions]
        before_registry = registry.to_mapping()
        with pytest.raises(ValidationError):
            resolver.reassign(food_request, target)
        assert list(ledger.transactions) == before_ledger
        assert registry.to_mapping() == before_registry
        assert food_request.state == DeletionState.CONFLICT_RESOLUTION

    def test_cancel(self, resolver, ledger, food_request):
        """Test cancelling leaves every transaction as it was."""
        resolver.cancel(food_request)
        assert len(ledger.dependents("Food", TransactionType.EXPENSE)) == 2

    def test_completed_request_is_closed(self, resolver, food_request):
        """Test nothing can be done to a finished request."""
        resolver.delete_all(food_request)
        with pytest.raises(ResolutionError):
            resolver.cancel(food_request)
        with pytest.raises(ResolutionError):
            resolver.delete_all(food_request)


class TestSelectionCleanup:
    """The entry form must not keep pointing at a deleted category."""

    def test_selected_category_cleared(self, resolver, selection):
        selection.category = "Shopping"
        resolver.confirm(resolver.begin(TransactionType.EXPENSE, "Shopping"))
        assert selection.category == ""

    def test_other_selection_kept(self, resolver, selection):
        selection.category = "Food"
        resolver.confirm(resolver.begin(TransactionType.EXPENSE, "Shopping"))
        assert selection.category == "Food"

    def test_cancel_keeps_selection(self, resolver, selection):
        selection.category = "Shopping"
        resolver.cancel(resolver.begin(TransactionType.EXPENSE, "Shopping"))
        assert selection.category == "Shopping"
