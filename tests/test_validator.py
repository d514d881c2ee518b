"""Tests for input validation."""

from decimal import Decimal

import pytest

from spendy.validation import EntryValidator, ValidationError


@pytest.fixture
def validator() -> EntryValidator:
    return EntryValidator()


class TestTransactionValidation:
    """Tests for new-transaction input."""

    @pytest.mark.parametrize("amount, expected", [
        ("12.50", Decimal("12.50")),
        (" 7 ", Decimal("7")),
        (3, Decimal("3")),
        (0.1, Decimal("0.1")),
        (Decimal("99.99"), Decimal("99.99")),
    ])
    def test_valid_amounts(self, validator, amount, expected):
        """Test accepted amount inputs are parsed exactly."""
        value, category = validator.clean_transaction(amount, " Food ")
        assert value == expected
        assert category == "Food"

    @pytest.mark.parametrize("amount, issue_type", [
        ("", "missing"),
        ("   ", "missing"),
        (None, "missing"),
        ("abc", "invalid_format"),
        ("NaN", "invalid_format"),
        ("Infinity", "invalid_format"),
        ("0", "invalid_value"),
        ("-5", "invalid_value"),
    ])
    def test_rejected_amounts(self, validator, amount, issue_type):
        """Test refused amounts report the right issue."""
        result = validator.validate_transaction(amount, "Food")
        assert result.has_errors
        assert result.issues[0].field == "amount"
        assert result.issues[0].issue_type == issue_type

    def test_missing_category(self, validator):
        """Test an empty category is refused."""
        result = validator.validate_transaction("10", "  ")
        assert [issue.field for issue in result.issues] == ["category"]

    def test_both_fields_missing(self, validator):
        """Test every problem is reported at once."""
        result = validator.validate_transaction("", "")
        assert result.error_count == 2

    def test_clean_transaction_raises(self, validator):
        """Test clean_transaction raises ValidationError with the issues."""
        with pytest.raises(ValidationError) as excinfo:
            validator.clean_transaction("", "Food")
        assert excinfo.value.issues[0].field == "amount"
        assert "amount" in str(excinfo.value)


class TestCategoryValidation:
    """Tests for category names and reassignment targets."""

    def test_valid_name(self, validator):
        """Test a new, non-empty name passes."""
        assert validator.validate_category_name("Travel", ["Food"]).is_valid

    def test_empty_name(self, validator):
        """Test whitespace-only names are refused."""
        result = validator.validate_category_name("   ", ["Food"])
        assert result.issues[0].issue_type == "missing"

    def test_duplicate_after_trim(self, validator):
        """Test duplicates are detected after trimming."""
        result = validator.validate_category_name("  Food ", ["Food"])
        assert result.issues[0].issue_type == "duplicate"

    def test_duplicate_is_case_sensitive(self, validator):
        """Test exact string matching for duplicates."""
        assert validator.validate_category_name("food", ["Food"]).is_valid

    def test_reassign_target_required(self, validator):
        """Test an empty reassignment target is refused."""
        result = validator.validate_reassign_target("", ["Bills"])
        assert result.issues[0].issue_type == "missing"

    def test_reassign_target_must_be_available(self, validator):
        """Test the target must be one of the offered categories."""
        result = validator.validate_reassign_target("Rent", ["Bills"])
        assert result.issues[0].issue_type == "unknown"
        assert validator.validate_reassign_target("Rent").is_valid

    def test_user_friendly_summary(self, validator):
        """Test the blocking notice lists every message."""
        result = validator.validate_transaction("", "")
        summary = validator.get_user_friendly_summary(result)
        assert "Please enter an amount" in summary
        assert "Please select a category" in summary
