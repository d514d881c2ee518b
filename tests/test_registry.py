"""Tests for the category registry."""

import pytest

from spendy.ledger import CategoryRegistry
from spendy.models.transaction import TransactionType
from spendy.validation import ValidationError


class TestCategoryRegistry:
    """Tests for CategoryRegistry."""

    def test_seeded_with_defaults(self, registry):
        """Test the default lists and their order."""
        assert registry.list_for(TransactionType.INCOME) == ("Salary", "Gift", "Freelance")
        assert registry.list_for(TransactionType.EXPENSE) == (
            "Food", "Transport", "Shopping", "Bills",
        )

    def test_list_for_is_read_only(self, registry):
        """Test callers cannot mutate the registry through the view."""
        view = registry.list_for(TransactionType.EXPENSE)
        assert isinstance(view, tuple)

    def test_add_appends_trimmed_name(self, registry):
        """Test new names are trimmed and go to the end."""
        stored = registry.add(TransactionType.EXPENSE, "  Travel ")
        assert stored == "Travel"
        assert registry.list_for(TransactionType.EXPENSE)[-1] == "Travel"

    def test_add_rejects_empty(self, registry):
        """Test empty names are refused and nothing changes."""
        before = registry.to_mapping()
        with pytest.raises(ValidationError):
            registry.add(TransactionType.EXPENSE, "   ")
        assert registry.to_mapping() == before

    def test_add_rejects_duplicate(self, registry):
        """Test duplicate names within a type are refused."""
        with pytest.raises(ValidationError, match="already exists"):
            registry.add(TransactionType.EXPENSE, "Food")
        assert registry.list_for(TransactionType.EXPENSE).count("Food") == 1

    def test_same_name_allowed_across_types(self, registry):
        """Test uniqueness is per type only."""
        registry.add(TransactionType.INCOME, "Food")
        assert registry.contains(TransactionType.INCOME, "Food")
        assert registry.contains(TransactionType.EXPENSE, "Food")

    def test_remove(self, registry):
        """Test removal from one type's list only."""
        registry.add(TransactionType.INCOME, "Bills")
        assert registry.remove(TransactionType.EXPENSE, "Bills") is True
        assert not registry.contains(TransactionType.EXPENSE, "Bills")
        assert registry.contains(TransactionType.INCOME, "Bills")

    def test_remove_missing_is_noop(self, registry):
        """Test removing an unknown name reports False."""
        assert registry.remove(TransactionType.EXPENSE, "Nope") is False

    def test_replace_keeps_order_and_drops_repeats(self, registry):
        """Test loading a stored mapping."""
        registry.replace({TransactionType.EXPENSE: ["Rent", "Food", "Rent"]})
        assert registry.list_for(TransactionType.EXPENSE) == ("Rent", "Food")
        assert registry.list_for(TransactionType.INCOME) == ("Salary", "Gift", "Freelance")

    def test_accepts_string_types(self, registry):
        """Test raw type tokens are accepted."""
        registry.add("Income", "Bonus")
        assert "Bonus" in registry.list_for("Income")

    def test_equality(self):
        """Test registries compare by content."""
        assert CategoryRegistry() == CategoryRegistry()
        other = CategoryRegistry()
        other.add(TransactionType.EXPENSE, "Travel")
        assert CategoryRegistry() != other
