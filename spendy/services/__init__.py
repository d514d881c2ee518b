"""Services package."""

from spendy.services.storage import (
    InMemoryGateway,
    JsonFileGateway,
    LoadError,
    PersistenceError,
    PersistenceGateway,
    StorageError,
)

__all__ = [
    "InMemoryGateway",
    "JsonFileGateway",
    "LoadError",
    "PersistenceError",
    "PersistenceGateway",
    "StorageError",
]
