"""
In-Memory Gateway

Dict-backed gateway for tests and for running without a data directory.
Contents are lost when the process exits.
"""

from typing import Optional

from spendy.services.storage.interface import PersistenceGateway


class InMemoryGateway(PersistenceGateway):
    """Stores blobs in a dict."""
    
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._slots: dict[str, str] = dict(initial or {})
        self.write_count = 0
    
    async def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)
    
    async def set(self, key: str, blob: str) -> bool:
        self._slots[key] = blob
        self.write_count += 1
        return True
    
    def snapshot(self) -> dict[str, str]:
        """Copy of all stored slots."""
        return dict(self._slots)
