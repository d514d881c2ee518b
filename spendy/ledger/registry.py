"""
Category Registry

Owns the ordered list of category names for each transaction type.
Insertion order is display order. Names are unique within a type;
the same name may exist under both types.

Removing a name never touches transactions that reference it.
Use CategoryLifecycleResolver to delete a category safely.
"""

from typing import Mapping, Optional

from spendy.models.transaction import TransactionType, default_categories
from spendy.validation import EntryValidator


class CategoryRegistry:
    """Per-type category lists."""

    def __init__(
        self,
        categories: Optional[Mapping[TransactionType, list[str]]] = None,
        validator: Optional[EntryValidator] = None,
    ):
        self._validator = validator or EntryValidator()
        self._categories: dict[TransactionType, list[str]] = default_categories()
        if categories is not None:
            self.replace(categories)

    def list_for(self, t_type: TransactionType) -> tuple[str, ...]:
        """Read-only view of one type's categories."""
        return tuple(self._categories[TransactionType(t_type)])

    def contains(self, t_type: TransactionType, name: str) -> bool:
        return name in self._categories[TransactionType(t_type)]

    def add(self, t_type: TransactionType, name: Optional[str]) -> str:
        """
        Append a category to the end of a type's list.

        Returns:
            The trimmed name that was stored

        Raises:
            ValidationError: If the name is empty or already listed
        """
        t_type = TransactionType(t_type)
        result = self._validator.validate_category_name(name, self._categories[t_type])
        self._validator.raise_for_errors(result)

        trimmed = name.strip()
        self._categories[t_type].append(trimmed)
        return trimmed

    def remove(self, t_type: TransactionType, name: str) -> bool:
        """Remove a name. Returns False if it was not listed."""
        names = self._categories[TransactionType(t_type)]
        if name not in names:
            return False
        names.remove(name)
        return True

    def replace(self, categories: Mapping[TransactionType, list[str]]) -> None:
        """
        Swap in a full mapping (used when loading stored data).

        Types missing from the mapping keep their seed list.
        Repeated names are dropped, first occurrence wins.
        """
        for t_type, names in categories.items():
            self._categories[TransactionType(t_type)] = list(dict.fromkeys(names))

    def to_mapping(self) -> dict[TransactionType, list[str]]:
        """Copy of all lists, suitable for serialization."""
        return {t_type: list(names) for t_type, names in self._categories.items()}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CategoryRegistry):
            return NotImplemented
        return self.to_mapping() == other.to_mapping()

    def __repr__(self) -> str:
        return f"CategoryRegistry({self.to_mapping()!r})"
