"""Input validation package."""

from spendy.validation.validator import EntryValidator, ValidationError

__all__ = ["EntryValidator", "ValidationError"]
