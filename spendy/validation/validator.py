"""
Input Validation

DESIGN DECISION: Every user action that can be refused is checked here
before any state is touched:

- New transactions: amount present, numeric, finite and positive;
  category present
- New categories: non-empty after trimming, not already listed
- Category reassignment: a target is chosen and is a live category

IMPORTANT: Validation NEVER silently fixes issues.
It reports them so the UI can show a blocking notice.
"""

from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional, Union

from spendy.models.validation import ValidationIssue, ValidationResult


AmountInput = Union[str, int, float, Decimal, None]


class ValidationError(Exception):
    """User input was refused. No state was changed."""

    def __init__(self, result: ValidationResult):
        self.result = result
        self.issues = result.issues
        super().__init__(
            "; ".join(issue.message for issue in result.issues if issue.severity == "error")
        )


class EntryValidator:
    """
    Validates user input for ledger and category actions.

    Stateless: callers pass in whatever context a check needs
    (e.g. the current category list).
    """

    def _check_amount(
        self,
        amount: AmountInput,
    ) -> tuple[Optional[Decimal], list[ValidationIssue]]:
        """Parse an amount. Returns (value, issues); value is None on error."""
        if isinstance(amount, bool):
            amount = None
        if isinstance(amount, str):
            amount = amount.strip()

        if amount is None or amount == "":
            return None, [ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Please enter an amount",
                suggested_fix="Type the amount, e.g. 12.50",
            )]

        try:
            value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
        except (InvalidOperation, ValueError):
            return None, [ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message=f"'{amount}' is not a number",
                suggested_fix="Use digits with an optional decimal point",
            )]

        if not value.is_finite():
            return None, [ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Amount must be a finite number",
            )]

        if value <= 0:
            return None, [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                suggested_fix="Pick Income or Expense instead of a negative amount",
            )]

        return value, []

    def validate_transaction(
        self,
        amount: AmountInput,
        category: Optional[str],
    ) -> ValidationResult:
        """Check the fields of a new transaction."""
        _, issues = self._check_amount(amount)

        if not category or not category.strip():
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Please select a category",
            ))

        return ValidationResult(action="add_transaction", issues=issues)

    def clean_transaction(
        self,
        amount: AmountInput,
        category: Optional[str],
    ) -> tuple[Decimal, str]:
        """
        Validate and normalise transaction input.

        Returns:
            (amount, category)

        Raises:
            ValidationError: If any field is refused
        """
        result = self.validate_transaction(amount, category)
        self.raise_for_errors(result)
        value, _ = self._check_amount(amount)
        return value, category.strip()

    def validate_category_name(
        self,
        name: Optional[str],
        existing: Iterable[str],
    ) -> ValidationResult:
        """Check a new category name against the type's current list."""
        issues = []
        trimmed = (name or "").strip()

        if not trimmed:
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Category name cannot be empty",
            ))
        elif trimmed in existing:
            issues.append(ValidationIssue(
                field="name",
                issue_type="duplicate",
                message=f"Category '{trimmed}' already exists",
                suggested_fix="Pick the existing category instead",
            ))

        return ValidationResult(action="add_category", issues=issues)

    def validate_reassign_target(
        self,
        target: Optional[str],
        available: Optional[Iterable[str]] = None,
    ) -> ValidationResult:
        """
        Check the category chosen to receive reassigned transactions.

        When `available` is None only presence is checked.
        """
        issues = []

        if not target:
            issues.append(ValidationIssue(
                field="target_category",
                issue_type="missing",
                message="Please choose a category to move the transactions to",
            ))
        elif available is not None and target not in available:
            issues.append(ValidationIssue(
                field="target_category",
                issue_type="unknown",
                message=f"'{target}' is not an available category",
            ))

        return ValidationResult(action="reassign_category", issues=issues)

    def raise_for_errors(self, result: ValidationResult) -> None:
        if result.has_errors:
            raise ValidationError(result)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Generate a user-facing summary of validation results.

        This is the text of the blocking notice.
        """
        if not result.issues:
            return "All checks passed."

        lines = []
        for issue in result.issues:
            lines.append(f"• {issue.message}")
            if issue.suggested_fix:
                lines.append(f"  {issue.suggested_fix}")

        return "\n".join(lines)
