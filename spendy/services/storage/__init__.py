"""
Storage Services Package

Provides the abstract persistence gateway and concrete implementations.
The file backend is the default, but the gateway is designed to be swappable.
"""

from spendy.services.storage.interface import (
    LoadError,
    PersistenceError,
    PersistenceGateway,
    StorageError,
)
from spendy.services.storage.codec import (
    dump_categories,
    dump_theme,
    dump_transactions,
    load_categories,
    load_theme,
    load_transactions,
)
from spendy.services.storage.json_file import JsonFileGateway
from spendy.services.storage.memory import InMemoryGateway

__all__ = [
    # Interface
    "PersistenceGateway",
    # Exceptions
    "LoadError",
    "PersistenceError",
    "StorageError",
    # Codec
    "dump_categories",
    "dump_theme",
    "dump_transactions",
    "load_categories",
    "load_theme",
    "load_transactions",
    # Implementations
    "InMemoryGateway",
    "JsonFileGateway",
]
