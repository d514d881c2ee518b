"""
Abstract Persistence Gateway

DESIGN DECISION: Storage is an opaque key-value gateway.
This allows us to:
1. Swap the file backend for another store later
2. Use in-memory storage for testing
3. Keep ledger logic decoupled from serialization and I/O

The interface is intentionally tiny: three string-keyed slots
(transactions, categories, theme), each holding one serialized blob.
"""

from abc import ABC, abstractmethod
from typing import Optional


class PersistenceGateway(ABC):
    """
    Abstract interface for slot storage.
    
    Any storage implementation must implement these methods.
    """
    
    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read a slot.
        
        Args:
            key: Slot key
            
        Returns:
            The stored blob, or None if the slot was never written
            
        Raises:
            LoadError: If the slot exists but cannot be read
        """
        pass
    
    @abstractmethod
    async def set(self, key: str, blob: str) -> bool:
        """
        Write a slot, replacing any previous value.
        
        Args:
            key: Slot key
            blob: Serialized value
            
        Returns:
            True if written successfully
            
        Raises:
            PersistenceError: If the write fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PersistenceError(StorageError):
    """A save did not complete."""
    pass


class LoadError(StorageError):
    """Stored data could not be read or decoded."""
    pass
